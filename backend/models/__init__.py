"""Database models."""

from backend.models.journal_entry import JournalEntry
from backend.models.user import User

__all__ = [
    "JournalEntry",
    "User",
]
