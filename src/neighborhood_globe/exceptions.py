"""Exception types raised by the neighborhood globe."""

from __future__ import annotations


class NeighborhoodError(Exception):
    """Base class for errors raised by this package."""


class DataValidationError(NeighborhoodError, ValueError):
    """Reference data that cannot be placed on the globe."""


class NeighborsFetchError(NeighborhoodError):
    """The upstream person source could not be read."""
