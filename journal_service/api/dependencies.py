from fastapi import Depends, Request

from journal_service.core.config import settings
from journal_service.features.database import DatabaseClient
from journal_service.features.journal import JournalService
from journal_service.services.inference import HuggingFaceClient


def get_database(request: Request) -> DatabaseClient:
    """Database client built on the pool opened in the app lifespan."""
    return request.app.state.db


def get_analyzer(request: Request) -> HuggingFaceClient:
    """Inference client sharing the app's pooled HTTP client."""
    return request.app.state.analyzer


def get_journal_service(
    db: DatabaseClient = Depends(get_database),
    analyzer: HuggingFaceClient = Depends(get_analyzer),
) -> JournalService:
    return JournalService(db, analyzer, min_content_length=settings.MIN_CONTENT_LENGTH)
