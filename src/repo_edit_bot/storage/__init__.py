"""Persistence sink for conversation turns and commit records."""

from repo_edit_bot.storage.exceptions import StoreError
from repo_edit_bot.storage.history_store import (
    HistoryStore,
    InMemoryHistoryStore,
    JsonFileHistoryStore,
)

__all__ = [
    "HistoryStore",
    "InMemoryHistoryStore",
    "JsonFileHistoryStore",
    "StoreError",
]
