"""Local record source and persistence."""

from notebulk.store.json_store import JsonUserStore

__all__ = ["JsonUserStore"]
