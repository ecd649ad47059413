"""Bulk search and modification of notes attached to library user records."""

__version__ = "0.1.0"
