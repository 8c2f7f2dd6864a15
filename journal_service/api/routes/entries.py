"""
Journal entry routes.

Writes (POST/PUT) are async because they await the inference API; reads
and deletes are plain ``def`` so FastAPI runs their blocking database
calls in the threadpool. Errors are raised as domain exceptions and
rendered by the app's exception handlers.
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from journal_service.api.dependencies import get_journal_service
from journal_service.api.models import EntryRequest, EntryResponse
from journal_service.features.journal import JournalService

router = APIRouter(tags=["Entries"])
logger = logging.getLogger("Journal.API.Entries")


@router.get("/entries", response_model=List[EntryResponse])
def list_entries(
    search: Optional[str] = Query(None, description="Case-insensitive substring match on content"),
    limit: int = Query(20, description="Page size, clamped to 1..50"),
    offset: int = Query(0, description="Rows to skip, clamped to >= 0"),
    service: JournalService = Depends(get_journal_service),
):
    """Entries, newest first."""
    return service.list_entries(search=search, limit=limit, offset=offset)


@router.post("/entries", response_model=EntryResponse, status_code=201)
async def create_entry(
    request: EntryRequest,
    service: JournalService = Depends(get_journal_service),
):
    """Analyse and store a new entry."""
    return await service.create_entry(request.content)


# Declared before /entries/{entry_id} so "by-date" is not taken for an id
@router.get("/entries/by-date", response_model=List[EntryResponse])
def list_entries_by_date(
    start_date: date,
    end_date: date,
    service: JournalService = Depends(get_journal_service),
):
    """Entries created from start_date through the whole of end_date."""
    return service.list_entries_by_date(start_date, end_date)


@router.get("/entries/{entry_id}", response_model=EntryResponse)
def get_entry(entry_id: str, service: JournalService = Depends(get_journal_service)):
    return service.get_entry(entry_id)


@router.put("/entries/{entry_id}", response_model=EntryResponse)
async def update_entry(
    entry_id: str,
    request: EntryRequest,
    service: JournalService = Depends(get_journal_service),
):
    """Replace an entry's content and re-run the analysis."""
    return await service.update_entry(entry_id, request.content)


@router.delete("/entries/{entry_id}", status_code=204)
def delete_entry(entry_id: str, service: JournalService = Depends(get_journal_service)):
    service.delete_entry(entry_id)
    return Response(status_code=204)
