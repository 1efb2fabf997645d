"""Explicit result values returned by the public operations.

Services raise CutSheetError subclasses internally; ``returns_result``
converts them into an OperationResult at the public boundary.
"""
import functools
import logging
from dataclasses import dataclass
from typing import Any, Optional

from django.db import DatabaseError

from .exceptions import CutSheetError, PersistenceFailure

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Result of a public cut sheet operation."""

    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    data: Any = None
    audit_gap: bool = False

    @classmethod
    def ok(cls, data: Any = None, audit_gap: bool = False) -> "OperationResult":
        return cls(success=True, data=data, audit_gap=audit_gap)

    @classmethod
    def fail(cls, error: str, error_code: str = 'error') -> "OperationResult":
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def from_error(cls, exc: CutSheetError) -> "OperationResult":
        return cls.fail(exc.message, exc.code)

    def __bool__(self):
        return self.success


def returns_result(func):
    """Convert CutSheetError and database errors raised by ``func`` into results.

    The wrapped function returns an OperationResult itself on success.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CutSheetError as exc:
            logger.debug("%s failed: %s", func.__name__, exc.code)
            return OperationResult.from_error(exc)
        except DatabaseError:
            logger.exception("%s: primary write failed", func.__name__)
            return OperationResult.from_error(PersistenceFailure(f"Failed to {func.__name__.replace('_', ' ')}"))

    return wrapper
