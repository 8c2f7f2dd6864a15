"""
Entries Repository - journal entry data access.

Handles:
- Creating entries with their analysis results
- Listing (newest first, optional search, paging) and date-range queries
- Updating content together with re-computed sentiment/keywords
- Deleting entries
"""

import logging
import uuid
from datetime import date, timedelta
from typing import Dict, List, Optional

from journal_service.core.database import DatabasePool

logger = logging.getLogger("Journal.Database.Entries")

ENTRY_COLUMNS = "id::text AS id, content, sentiment::text AS sentiment, sentiment_score, keywords, created_at, updated_at"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50


def is_valid_entry_id(entry_id: str) -> bool:
    """
    Entry ids are canonical hyphenated UUIDs; anything else cannot match a row.

    ``uuid.UUID`` also accepts ``urn:uuid:`` and brace forms that Postgres
    rejects, so the round-tripped string must match the input.
    """
    text = str(entry_id)
    try:
        return str(uuid.UUID(text)) == text.lower()
    except ValueError:
        return False


def _row_to_entry(row: Optional[Dict]) -> Optional[Dict]:
    if row is None:
        return None
    entry = dict(row)
    entry["keywords"] = list(entry.get("keywords") or [])
    return entry


class EntriesRepository:
    """Repository for journal_entries rows."""

    def __init__(self, pool: DatabasePool):
        self.pool = pool

    def create(
        self,
        content: str,
        sentiment: str,
        sentiment_score: Optional[float],
        keywords: List[str],
    ) -> Dict:
        """Insert an entry and return the stored row."""
        with self.pool.cursor("insert") as cur:
            cur.execute(
                f"""INSERT INTO journal_entries (content, sentiment, sentiment_score, keywords)
                    VALUES (%s, %s, %s, %s)
                    RETURNING {ENTRY_COLUMNS}""",
                (content, sentiment, sentiment_score, list(keywords)),
            )
            entry = _row_to_entry(cur.fetchone())

        logger.info(f"Entry created: {entry['id']}")
        return entry

    def list(
        self,
        search: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[Dict]:
        """
        Newest entries first.

        ``limit`` is clamped to 1..MAX_PAGE_SIZE and ``offset`` to >= 0
        rather than rejected. ``search`` is a case-insensitive substring
        match on content.
        """
        limit = min(max(int(limit), 1), MAX_PAGE_SIZE)
        offset = max(int(offset), 0)

        with self.pool.cursor("query") as cur:
            if search:
                cur.execute(
                    f"""SELECT {ENTRY_COLUMNS}
                        FROM journal_entries
                        WHERE content ILIKE %s
                        ORDER BY created_at DESC
                        LIMIT %s OFFSET %s""",
                    (f"%{search}%", limit, offset),
                )
            else:
                cur.execute(
                    f"""SELECT {ENTRY_COLUMNS}
                        FROM journal_entries
                        ORDER BY created_at DESC
                        LIMIT %s OFFSET %s""",
                    (limit, offset),
                )
            return [_row_to_entry(row) for row in cur.fetchall()]

    def list_by_date_range(self, start_date: date, end_date: date) -> List[Dict]:
        """Entries created between start_date and the end of end_date, newest first."""
        with self.pool.cursor("query") as cur:
            cur.execute(
                f"""SELECT {ENTRY_COLUMNS}
                    FROM journal_entries
                    WHERE created_at >= %s AND created_at < %s
                    ORDER BY created_at DESC""",
                (start_date, end_date + timedelta(days=1)),
            )
            return [_row_to_entry(row) for row in cur.fetchall()]

    def get_by_id(self, entry_id: str) -> Optional[Dict]:
        if not is_valid_entry_id(entry_id):
            return None
        with self.pool.cursor("query") as cur:
            cur.execute(
                f"SELECT {ENTRY_COLUMNS} FROM journal_entries WHERE id = %s",
                (entry_id,),
            )
            return _row_to_entry(cur.fetchone())

    def update(
        self,
        entry_id: str,
        content: str,
        sentiment: str,
        sentiment_score: Optional[float],
        keywords: List[str],
    ) -> Optional[Dict]:
        """
        Replace content and derived fields in one statement.

        Returns the updated row, or None if the entry does not exist.
        """
        if not is_valid_entry_id(entry_id):
            return None
        with self.pool.cursor("update") as cur:
            cur.execute(
                f"""UPDATE journal_entries
                    SET content = %s,
                        sentiment = %s,
                        sentiment_score = %s,
                        keywords = %s,
                        updated_at = now()
                    WHERE id = %s
                    RETURNING {ENTRY_COLUMNS}""",
                (content, sentiment, sentiment_score, list(keywords), entry_id),
            )
            entry = _row_to_entry(cur.fetchone())

        if entry:
            logger.info(f"Entry updated: {entry_id}")
        return entry

    def delete(self, entry_id: str) -> bool:
        """Delete an entry. Returns False if there was nothing to delete."""
        if not is_valid_entry_id(entry_id):
            return False
        with self.pool.cursor("delete") as cur:
            cur.execute("DELETE FROM journal_entries WHERE id = %s", (entry_id,))
            deleted = cur.rowcount > 0

        if deleted:
            logger.info(f"Entry deleted: {entry_id}")
        return deleted
