"""Fetchers for the person source and the airport reference table."""
