"""
Journal Service - validate, analyse, persist.

Write paths follow one order: reject bad content before spending an
inference call, analyse, then store content and derived fields in a single
statement. If analysis fails nothing is written, so a stored entry's
sentiment and keywords always belong to its current content.

The async write paths push blocking psycopg2 calls onto the threadpool;
the sync read paths are called from plain ``def`` routes, which FastAPI
already runs there.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from journal_service.features.database.client import DatabaseClient
from journal_service.services.inference import HuggingFaceClient
from journal_service.shared.logging_config import sanitize_for_logging

logger = logging.getLogger("Journal.Service")


class ContentValidationError(ValueError):
    """Entry content is missing, not text, or too short."""


class EntryNotFoundError(LookupError):
    """No entry with the requested id."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry {entry_id} not found")
        self.entry_id = entry_id


def validate_content(content, min_length: int = 3) -> str:
    """
    Return trimmed content, or raise ContentValidationError.

    Length is measured after trimming, so whitespace padding does not count.
    """
    if not isinstance(content, str) or len(content.strip()) < min_length:
        raise ContentValidationError(
            f"Content must be a string with at least {min_length} characters."
        )
    return content.strip()


class JournalService:
    """Entry lifecycle on top of the repositories and the inference client."""

    def __init__(
        self,
        db: DatabaseClient,
        analyzer: HuggingFaceClient,
        min_content_length: int = 3,
    ):
        self.db = db
        self.analyzer = analyzer
        self.min_content_length = min_content_length

    async def create_entry(self, content) -> Dict:
        text = validate_content(content, self.min_content_length)
        logger.info(f"Creating entry: {sanitize_for_logging(text)}")

        analysis = await self.analyzer.analyze_content(text)
        return await run_in_threadpool(
            self.db.entries.create,
            content=text,
            sentiment=analysis.sentiment.value,
            sentiment_score=analysis.sentiment_score,
            keywords=analysis.keywords,
        )

    async def update_entry(self, entry_id: str, content) -> Dict:
        """
        Re-analyse and replace an entry's content.

        Existence is checked before the inference call; the UPDATE itself
        also reports a vanished row (deleted concurrently) as not found.
        """
        text = validate_content(content, self.min_content_length)
        if await run_in_threadpool(self.db.entries.get_by_id, entry_id) is None:
            raise EntryNotFoundError(entry_id)

        analysis = await self.analyzer.analyze_content(text)
        entry = await run_in_threadpool(
            self.db.entries.update,
            entry_id,
            content=text,
            sentiment=analysis.sentiment.value,
            sentiment_score=analysis.sentiment_score,
            keywords=analysis.keywords,
        )
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def get_entry(self, entry_id: str) -> Dict:
        entry = self.db.entries.get_by_id(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def delete_entry(self, entry_id: str) -> None:
        if not self.db.entries.delete(entry_id):
            raise EntryNotFoundError(entry_id)

    def list_entries(self, search: Optional[str] = None, limit: int = 20, offset: int = 0) -> List[Dict]:
        return self.db.entries.list(search=search or None, limit=limit, offset=offset)

    def list_entries_by_date(self, start_date: date, end_date: date) -> List[Dict]:
        if end_date < start_date:
            raise ContentValidationError("end_date must not be before start_date.")
        return self.db.entries.list_by_date_range(start_date, end_date)
