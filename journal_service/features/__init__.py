"""
Features Module - Self-contained feature units.

- database: repositories for journal entries and aggregates
- journal: entry lifecycle (validate, analyse, persist)
"""

from journal_service.features.database import DatabaseClient
from journal_service.features.journal import JournalService

__all__ = [
    "DatabaseClient",
    "JournalService",
]
