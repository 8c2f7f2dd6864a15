from typing import List

from fastapi import APIRouter, Depends, Query

from journal_service.api.dependencies import get_database
from journal_service.api.models import StatsResponse, TrendingKeyword
from journal_service.features.database import DatabaseClient

router = APIRouter(tags=["Stats"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: DatabaseClient = Depends(get_database)):
    """Entry count, mood distribution and average sentiment score."""
    return db.stats.get_stats()


@router.get("/keywords/trending", response_model=List[TrendingKeyword])
def get_trending_keywords(
    limit: int = Query(20, description="Number of keywords, clamped to 1..100"),
    db: DatabaseClient = Depends(get_database),
):
    """Most frequent keywords across all entries."""
    return db.stats.get_trending_keywords(limit=limit)
