"""
Database Client - access to the journal repositories.

Bundles the repositories around one connection pool so request handlers
receive a single injected object instead of reaching for a global.
"""

import logging

from journal_service.core.database import DatabasePool
from journal_service.features.database.repositories.entries import EntriesRepository
from journal_service.features.database.repositories.stats import StatsRepository

logger = logging.getLogger("Journal.Database")


class DatabaseClient:
    """
    Usage:
        db = DatabaseClient(pool)
        entry = db.entries.get_by_id(entry_id)
        stats = db.stats.get_stats()
    """

    def __init__(self, pool: DatabasePool):
        self.pool = pool
        self.entries = EntriesRepository(pool)
        self.stats = StatsRepository(pool)

    def setup_schema(self) -> None:
        self.pool.setup_schema()
