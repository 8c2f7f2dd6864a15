"""
Stats Repository - aggregate queries over journal entries.

Feeds the dashboard: entry count, mood distribution, average model
confidence and trending keywords.
"""

import logging
from typing import Dict, List

from journal_service.core.database import DatabasePool

logger = logging.getLogger("Journal.Database.Stats")

DEFAULT_TRENDING_LIMIT = 20
MAX_TRENDING_LIMIT = 100


class StatsRepository:
    """Read-only aggregates; each method is a handful of single statements."""

    def __init__(self, pool: DatabasePool):
        self.pool = pool

    def get_stats(self) -> Dict:
        """
        Total entries, per-sentiment breakdown and average sentiment score.

        Percentages are of the total entry count; with no entries the
        breakdown is empty and every number is zero.
        """
        with self.pool.cursor("stats") as cur:
            cur.execute("SELECT COUNT(*) AS total FROM journal_entries")
            total = int(cur.fetchone()["total"])

            cur.execute(
                """SELECT sentiment::text AS sentiment, COUNT(*) AS count
                   FROM journal_entries
                   GROUP BY sentiment
                   ORDER BY sentiment::text ASC"""
            )
            breakdown_rows = cur.fetchall()

            cur.execute(
                """SELECT AVG(sentiment_score) AS average_score
                   FROM journal_entries
                   WHERE sentiment_score IS NOT NULL"""
            )
            average = cur.fetchone()["average_score"]

        breakdown = []
        for row in breakdown_rows:
            count = int(row["count"])
            breakdown.append({
                "sentiment": row["sentiment"],
                "count": count,
                "percentage": (count / total) * 100 if total > 0 else 0.0,
            })

        return {
            "total_entries": total,
            "sentiment_breakdown": breakdown,
            "average_sentiment_score": float(average) if average is not None else 0.0,
        }

    def get_trending_keywords(self, limit: int = DEFAULT_TRENDING_LIMIT) -> List[Dict]:
        """
        Most frequent keywords across all entries.

        Ties on count are broken alphabetically so the order is stable.
        """
        limit = min(max(int(limit), 1), MAX_TRENDING_LIMIT)
        with self.pool.cursor("stats") as cur:
            cur.execute(
                """SELECT keyword, COUNT(*) AS count
                   FROM (SELECT unnest(keywords) AS keyword FROM journal_entries) AS unnested_keywords
                   GROUP BY keyword
                   ORDER BY count DESC, keyword ASC
                   LIMIT %s""",
                (limit,),
            )
            return [
                {"keyword": row["keyword"], "count": int(row["count"])}
                for row in cur.fetchall()
            ]
