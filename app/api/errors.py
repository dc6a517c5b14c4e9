"""
app/api/errors.py

Translation of ledger and persistence errors into HTTP responses.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from db.repositories.errors import PersistenceError
from ledger.bulk import BulkStatus
from ledger.errors import (
    IncompatibleUnitFamily,
    InsufficientStock,
    LedgerError,
    LinkedRecordConflict,
    NotFound,
    ProcessingLimitExceeded,
    ValidationError,
)

BULK_STATUS_CODES: dict[BulkStatus, int] = {
    BulkStatus.SUCCESS: status.HTTP_200_OK,
    BulkStatus.PARTIAL: status.HTTP_207_MULTI_STATUS,
    BulkStatus.FAILURE: status.HTTP_409_CONFLICT,
}


def to_http_exception(exc: Exception) -> HTTPException:
    """
    Map one domain error to the HTTPException a router should raise.
    Unknown errors are not handled here; callers let them propagate.
    """

    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict())
    if isinstance(exc, (IncompatibleUnitFamily, InsufficientStock)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    if isinstance(exc, (LinkedRecordConflict, ProcessingLimitExceeded)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message)
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, PersistenceError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist the requested change.",
        )
    if isinstance(exc, LedgerError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    raise TypeError(f"No HTTP mapping for {type(exc).__name__}") from exc


HANDLED_ERRORS = (LedgerError, PersistenceError)
