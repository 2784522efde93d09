from fastapi import HTTPException

from pullup.rsvps.dtos import (
    CapacityExceededError,
    DuplicateRsvpError,
    NotFoundError,
    RsvpError,
    ValidationError,
)


def to_http_error(exc: RsvpError) -> HTTPException:
    """Translate a booking error into the HTTP error the caller sees."""
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"field": exc.field, "message": exc.message},
        )
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, CapacityExceededError):
        return HTTPException(
            status_code=409,
            detail={
                "message": str(exc),
                "requested": exc.requested,
                "available": exc.available,
            },
        )
    if isinstance(exc, DuplicateRsvpError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
