"""Errors raised by the reaction network registry."""

from typing import Any, Mapping, Optional


class ReactionNetworkError(Exception):
    """Base exception for registry failures."""

    def __init__(self, message: str, context: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.context = dict(context) if context else {}

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable
        return str(self.args[0]) if self.args else ""


class DuplicateNameError(ReactionNetworkError, ValueError):
    """Name already used by a species or parameter."""


class UnknownSpeciesError(ReactionNetworkError, KeyError):
    """Reaction references a name that is not registered."""


class IndexOutOfRangeError(ReactionNetworkError, IndexError):
    """Reaction or species index is not in the registry."""


class MalformedStoichiometryError(ReactionNetworkError, ValueError):
    """Stoichiometric coefficient is not a positive integer."""


class MalformedRateError(ReactionNetworkError, ValueError):
    """Rate specification cannot be interpreted."""


class MalformedNameError(ReactionNetworkError, ValueError):
    """Name is not a valid identifier."""
