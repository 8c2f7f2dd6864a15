"""
Database Feature Module - data access for journal entries.

Usage:
    from journal_service.features.database import DatabaseClient

    db = DatabaseClient(pool)
    entries = db.entries.list(search="berlin")
    trending = db.stats.get_trending_keywords(limit=10)
"""

from journal_service.features.database.client import DatabaseClient

__all__ = [
    "DatabaseClient",
]
