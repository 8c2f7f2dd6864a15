"""Database Repositories - Organized data access."""

from journal_service.features.database.repositories.entries import EntriesRepository
from journal_service.features.database.repositories.stats import StatsRepository

__all__ = [
    "EntriesRepository",
    "StatsRepository",
]
