"""Shared test fixtures for the journal service.

Provides an in-memory stand-in for the entries repository, a scripted
analyzer and a FastAPI TestClient wired to both through dependency
overrides, so no database or network access is needed.
"""

import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from journal_service.api.dependencies import get_analyzer, get_database
from journal_service.services.inference import AnalysisResult
from journal_service.services.normalizer import Sentiment


class InMemoryEntries:
    """Same method surface as EntriesRepository, backed by a dict."""

    def __init__(self):
        self.rows = {}

    def create(self, content, sentiment, sentiment_score, keywords):
        now = datetime.now(timezone.utc)
        entry_id = str(uuid.uuid4())
        self.rows[entry_id] = {
            "id": entry_id,
            "content": content,
            "sentiment": sentiment,
            "sentiment_score": sentiment_score,
            "keywords": list(keywords),
            "created_at": now,
            "updated_at": now,
        }
        return dict(self.rows[entry_id])

    def list(self, search=None, limit=20, offset=0):
        rows = sorted(self.rows.values(), key=lambda r: r["created_at"], reverse=True)
        if search:
            rows = [r for r in rows if search.lower() in r["content"].lower()]
        return [dict(r) for r in rows[offset:offset + limit]]

    def list_by_date_range(self, start_date, end_date):
        rows = [
            r for r in self.rows.values()
            if start_date <= r["created_at"].date() < end_date + timedelta(days=1)
        ]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    def get_by_id(self, entry_id):
        row = self.rows.get(entry_id)
        return dict(row) if row else None

    def update(self, entry_id, content, sentiment, sentiment_score, keywords):
        row = self.rows.get(entry_id)
        if row is None:
            return None
        row.update(
            content=content,
            sentiment=sentiment,
            sentiment_score=sentiment_score,
            keywords=list(keywords),
            updated_at=datetime.now(timezone.utc),
        )
        return dict(row)

    def delete(self, entry_id):
        return self.rows.pop(entry_id, None) is not None


class ScriptedAnalyzer:
    """Returns a fixed AnalysisResult (or raises) and records every call."""

    def __init__(self, result=None, error=None):
        self.result = result or AnalysisResult(
            sentiment=Sentiment.POSITIVE,
            sentiment_score=0.99,
            keywords=["Berlin", "Anna"],
        )
        self.error = error
        self.calls = []

    async def analyze_content(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_db():
    db = MagicMock()
    db.entries = InMemoryEntries()
    db.pool.is_open = True
    return db


@pytest.fixture
def analyzer():
    return ScriptedAnalyzer()


@pytest.fixture
def app(fake_db, analyzer):
    from main import create_app

    application = create_app()
    application.dependency_overrides[get_database] = lambda: fake_db
    application.dependency_overrides[get_analyzer] = lambda: analyzer
    return application


@pytest.fixture
def client(app):
    """TestClient without lifespan, so no real pool or HTTP client is opened."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def mock_pool():
    """A DatabasePool stand-in whose cursor() yields one shared MagicMock cursor."""
    cursor = MagicMock()
    pool = MagicMock()

    @contextmanager
    def _cursor(operation="query"):
        yield cursor

    pool.cursor.side_effect = _cursor
    return pool, cursor


@pytest.fixture
def make_analyzer():
    """Factory for analyzers with a specific result or error."""
    return ScriptedAnalyzer
