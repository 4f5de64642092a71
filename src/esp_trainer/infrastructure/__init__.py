# Infrastructure Adapters Package
from .preferences import JsonPreferencesStore
from .sqlite_repository import SqliteGuessRepository

__all__ = ["SqliteGuessRepository", "JsonPreferencesStore"]
