"""Reaction network registry: species, parameters, reactions and derived views."""

from reaction_network.network import ReactionDeclaration, ReactionNetwork  # type: ignore
from reaction_network.rate_spec import Numeric, ReversiblePair, Symbolic  # type: ignore

__all__ = [
    "ReactionDeclaration",
    "ReactionNetwork",
    "Numeric",
    "Symbolic",
    "ReversiblePair",
]
