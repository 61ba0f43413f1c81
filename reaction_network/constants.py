"""Defaults shared across the package."""

DEFAULT_NETWORK_NAME = "reaction_network"
REACTION_PREFIX = "J"
DEFAULT_COMPARTMENT = "default_compartment"
DEFAULT_COMPARTMENT_SIZE = 1.0
SBML_LEVEL = 3
SBML_VERSION = 1
TIME_SYMBOL = "time"
