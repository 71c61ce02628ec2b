"""Neighborhood roster and airport globe."""

__version__ = "0.1.0"
