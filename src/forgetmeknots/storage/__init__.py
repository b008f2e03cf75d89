"""SQLite persistence for the projects table."""

from forgetmeknots.storage.project_store import ProjectStore, open_store, resolve_sort

__all__ = ["ProjectStore", "open_store", "resolve_sort"]
