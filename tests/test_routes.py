"""HTTP-level tests for the journal API.

Uses the TestClient from conftest: the database is an in-memory stand-in
and the analyzer is scripted, so no Postgres or network access is needed.
"""

from datetime import date
from unittest.mock import MagicMock

from journal_service.core.database import DatabaseError
from journal_service.services.inference import AnalysisResult, InferenceAPIError
from journal_service.services.normalizer import Sentiment

MISSING_ID = "6f1c2a4e-8b1d-4c5e-9f3a-2b7d9e0c1a11"


def _create(client, content="Coffee with Anna in Berlin."):
    response = client.post("/entries", json={"content": content})
    assert response.status_code == 201
    return response.json()


# ============================================================
# Create
# ============================================================

class TestCreateEntry:

    def test_created_entry_carries_analysis(self, client, analyzer):
        response = client.post("/entries", json={"content": "  Coffee with Anna in Berlin.  "})

        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "Coffee with Anna in Berlin."
        assert body["sentiment"] == "POSITIVE"
        assert body["sentiment_score"] == 0.99
        assert body["keywords"] == ["Berlin", "Anna"]
        assert set(body) == {"id", "content", "sentiment", "sentiment_score", "keywords", "created_at", "updated_at"}
        assert analyzer.calls == ["Coffee with Anna in Berlin."]

    def test_short_content_is_rejected_without_analysis(self, client, analyzer):
        response = client.post("/entries", json={"content": "hi"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert analyzer.calls == []

    def test_missing_content_is_rejected(self, client, analyzer):
        response = client.post("/entries", json={})

        assert response.status_code == 400
        assert analyzer.calls == []

    def test_non_json_body_is_rejected(self, client):
        response = client.post("/entries", content=b"not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_inference_failure_is_external_service_error(self, client, analyzer, fake_db):
        analyzer.error = InferenceAPIError(
            "sentiment failed after 3 attempts",
            model="distilbert/distilbert-base-uncased-finetuned-sst-2-english",
            status_code=503,
        )

        response = client.post("/entries", json={"content": "Long enough content."})

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "EXTERNAL_SERVICE_ERROR"
        assert error["details"]["service"] == "distilbert/distilbert-base-uncased-finetuned-sst-2-english"
        assert fake_db.entries.rows == {}


# ============================================================
# Read
# ============================================================

class TestReadEntries:

    def test_list_and_search(self, client):
        _create(client, "Coffee with Anna in Berlin.")
        _create(client, "Long run by the river.")

        assert len(client.get("/entries").json()) == 2

        found = client.get("/entries", params={"search": "RIVER"}).json()
        assert [e["content"] for e in found] == ["Long run by the river."]

    def test_get_by_id(self, client):
        created = _create(client)

        response = client.get(f"/entries/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_unknown_and_malformed_ids_are_not_found(self, client):
        for entry_id in (MISSING_ID, "not-a-uuid"):
            response = client.get(f"/entries/{entry_id}")
            assert response.status_code == 404
            assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_by_date_returns_todays_entries(self, client, fake_db):
        created = _create(client)
        today = fake_db.entries.rows[created["id"]]["created_at"].date().isoformat()

        response = client.get("/entries/by-date", params={"start_date": today, "end_date": today})

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [created["id"]]

    def test_by_date_requires_both_dates(self, client):
        response = client.get("/entries/by-date", params={"start_date": "2026-10-01"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_by_date_rejects_bad_dates(self, client):
        response = client.get("/entries/by-date", params={"start_date": "yesterday", "end_date": "2026-10-01"})

        assert response.status_code == 400

    def test_by_date_rejects_reversed_range(self, client):
        response = client.get(
            "/entries/by-date",
            params={"start_date": date(2026, 10, 19).isoformat(), "end_date": date(2026, 10, 1).isoformat()},
        )

        assert response.status_code == 400


# ============================================================
# Update and delete
# ============================================================

class TestUpdateAndDelete:

    def test_update_replaces_content_and_analysis(self, client, analyzer):
        created = _create(client)
        analyzer.result = AnalysisResult(Sentiment.NEGATIVE, 0.95, ["Oslo"])

        response = client.put(f"/entries/{created['id']}", json={"content": "Rainy walk in Oslo."})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["content"] == "Rainy walk in Oslo."
        assert body["sentiment"] == "NEGATIVE"
        assert body["keywords"] == ["Oslo"]

    def test_update_missing_entry_skips_analysis(self, client, analyzer):
        response = client.put(f"/entries/{MISSING_ID}", json={"content": "New content."})

        assert response.status_code == 404
        assert analyzer.calls == []

    def test_update_with_short_content(self, client):
        created = _create(client)

        response = client.put(f"/entries/{created['id']}", json={"content": "  "})

        assert response.status_code == 400

    def test_delete_then_get_and_put_are_not_found(self, client):
        created = _create(client)

        response = client.delete(f"/entries/{created['id']}")
        assert response.status_code == 204
        assert response.content == b""

        assert client.get(f"/entries/{created['id']}").status_code == 404
        assert client.put(f"/entries/{created['id']}", json={"content": "Back again."}).status_code == 404
        assert client.delete(f"/entries/{created['id']}").status_code == 404


# ============================================================
# Stats, setup, health
# ============================================================

class TestStatsAndKeywords:

    def test_stats(self, client, fake_db):
        fake_db.stats.get_stats.return_value = {
            "total_entries": 4,
            "sentiment_breakdown": [
                {"sentiment": "NEGATIVE", "count": 1, "percentage": 25.0},
                {"sentiment": "POSITIVE", "count": 3, "percentage": 75.0},
            ],
            "average_sentiment_score": 0.94,
        }

        response = client.get("/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["total_entries"] == 4
        assert body["sentiment_breakdown"][1] == {"sentiment": "POSITIVE", "count": 3, "percentage": 75.0}
        assert body["average_sentiment_score"] == 0.94

    def test_empty_stats(self, client, fake_db):
        fake_db.stats.get_stats.return_value = {
            "total_entries": 0,
            "sentiment_breakdown": [],
            "average_sentiment_score": 0.0,
        }

        assert client.get("/stats").json() == {
            "total_entries": 0,
            "sentiment_breakdown": [],
            "average_sentiment_score": 0.0,
        }

    def test_trending_keywords(self, client, fake_db):
        fake_db.stats.get_trending_keywords.return_value = [
            {"keyword": "software", "count": 3},
            {"keyword": "testing", "count": 2},
        ]

        response = client.get("/keywords/trending", params={"limit": 5})

        assert response.status_code == 200
        assert response.json() == [
            {"keyword": "software", "count": 3},
            {"keyword": "testing", "count": 2},
        ]
        fake_db.stats.get_trending_keywords.assert_called_once_with(limit=5)


class TestOperational:

    def test_setup_creates_schema(self, client, fake_db):
        response = client.post("/setup")

        assert response.status_code == 200
        assert response.json()["status"] == "success"
        fake_db.setup_schema.assert_called_once_with()

    def test_health_without_database(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "unavailable"}

    def test_health_with_open_pool(self, app, client, fake_db):
        app.state.db = fake_db

        assert client.get("/health").json()["database"] == "connected"


# ============================================================
# Error handling and correlation
# ============================================================

class TestErrorHandling:

    def test_database_failure(self, client, fake_db):
        fake_db.entries.list = MagicMock(side_effect=DatabaseError("connection lost", operation="query"))

        response = client.get("/entries")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "DATABASE_ERROR"
        assert error["details"] == {"reason": "connection lost", "operation": "query"}

    def test_unexpected_failure(self, client, fake_db):
        fake_db.stats.get_stats.side_effect = RuntimeError("boom")

        response = client.get("/stats")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
        assert "boom" not in response.text

    def test_correlation_id_is_echoed(self, client):
        response = client.get(f"/entries/{MISSING_ID}", headers={"X-Correlation-ID": "abc12345"})

        assert response.headers["X-Correlation-ID"] == "abc12345"
        assert response.json()["error"]["correlation_id"] == "abc12345"

    def test_correlation_id_is_generated(self, client):
        response = client.get("/entries")

        assert len(response.headers["X-Correlation-ID"]) == 8
