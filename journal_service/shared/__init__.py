# Shared request-scoped utilities: correlation IDs, logging, error bodies
from .correlation import CorrelationMiddleware, get_correlation_id
from .logging_config import setup_logging, sanitize_for_logging

__all__ = [
    "CorrelationMiddleware",
    "get_correlation_id",
    "setup_logging",
    "sanitize_for_logging",
]
