"""
Map domain exceptions to the standard error bodies.

Route handlers raise; these handlers log and translate, so every route
reports validation, not-found, inference and database failures the same way.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from journal_service.core.database import DatabaseError
from journal_service.features.journal import ContentValidationError, EntryNotFoundError
from journal_service.services.inference import InferenceAPIError
from journal_service.shared.errors import (
    database_error,
    entry_not_found,
    inference_error,
    internal_error,
    validation_error,
)

logger = logging.getLogger("Journal.API.Errors")


async def handle_request_validation(request: Request, exc: RequestValidationError):
    fields = {
        ".".join(str(part) for part in error.get("loc", ())): error.get("msg", "invalid")
        for error in exc.errors()
    }
    logger.info(f"Rejected request to {request.url.path}: {fields}")
    return validation_error("Invalid request", details=fields, request=request)


async def handle_content_validation(request: Request, exc: ContentValidationError):
    logger.info(f"Rejected content on {request.url.path}: {exc}")
    return validation_error(str(exc), request=request)


async def handle_not_found(request: Request, exc: EntryNotFoundError):
    return entry_not_found(exc.entry_id, request=request)


async def handle_inference_error(request: Request, exc: InferenceAPIError):
    logger.error(
        f"Content analysis failed on {request.url.path}: {exc}",
        extra={"model": exc.model, "upstream_status": exc.status_code},
        exc_info=exc,
    )
    return inference_error(exc.model, str(exc), request=request)


async def handle_database_error(request: Request, exc: DatabaseError):
    logger.error(f"Database failure on {request.url.path}: {exc}", exc_info=exc)
    return database_error(str(exc), operation=exc.operation, request=request)


async def handle_unexpected(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return internal_error(request=request)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(ContentValidationError, handle_content_validation)
    app.add_exception_handler(EntryNotFoundError, handle_not_found)
    app.add_exception_handler(InferenceAPIError, handle_inference_error)
    app.add_exception_handler(DatabaseError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected)
