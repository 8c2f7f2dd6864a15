import logging

from fastapi import APIRouter, Depends

from journal_service.api.dependencies import get_database
from journal_service.api.models import SetupResponse
from journal_service.features.database import DatabaseClient

router = APIRouter(tags=["Setup"])
logger = logging.getLogger("Journal.API.Setup")


@router.post("/setup", response_model=SetupResponse)
def setup_database(db: DatabaseClient = Depends(get_database)):
    """Create the journal_entries table if it does not exist yet. Safe to repeat."""
    logger.info("Initializing database schema")
    db.setup_schema()
    return SetupResponse(
        status="success",
        message='Database setup successful. The "journal_entries" table exists.',
    )
