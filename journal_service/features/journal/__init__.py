"""
Journal feature module.

Entry lifecycle: validation, content analysis and persistence.
"""

from journal_service.features.journal.service import (
    ContentValidationError,
    EntryNotFoundError,
    JournalService,
    validate_content,
)

__all__ = [
    "ContentValidationError",
    "EntryNotFoundError",
    "JournalService",
    "validate_content",
]
