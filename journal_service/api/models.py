from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from journal_service.services.normalizer import Sentiment


# =========================================================================
# ENTRY MODELS
# =========================================================================

class EntryRequest(BaseModel):
    # Length is checked by the journal service so every write path
    # reports the same message
    content: Optional[str] = None


class EntryResponse(BaseModel):
    id: str
    content: str
    sentiment: Sentiment
    sentiment_score: Optional[float] = None
    keywords: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# =========================================================================
# STATS MODELS
# =========================================================================

class SentimentBreakdownItem(BaseModel):
    sentiment: Sentiment
    count: int
    percentage: float


class StatsResponse(BaseModel):
    total_entries: int
    sentiment_breakdown: List[SentimentBreakdownItem] = Field(default_factory=list)
    average_sentiment_score: float = 0.0


class TrendingKeyword(BaseModel):
    keyword: str
    count: int


class SetupResponse(BaseModel):
    status: str
    message: str
