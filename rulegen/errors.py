"""Exception types raised for contract violations."""

from __future__ import annotations


class MergeError(ValueError):
    """Raised when a merge is requested for an empty group of results."""


class UnknownGeneratorError(ValueError):
    """Raised when a generator kind is not registered."""


__all__ = ["MergeError", "UnknownGeneratorError"]
