"""Translate data-access errors into HTTP errors."""

from http import HTTPStatus

from fastapi import HTTPException, status
from loguru import logger

from voter_api.services.voter_history_service import PollAlreadyExistsError, PollNotFoundError
from voter_api.services.voter_service import (
    VoterAlreadyExistsError,
    VoterNotFoundError,
    VoterStoreError,
)

_STATUS_BY_ERROR: dict[type[VoterStoreError], int] = {
    VoterNotFoundError: status.HTTP_404_NOT_FOUND,
    PollNotFoundError: status.HTTP_404_NOT_FOUND,
    VoterAlreadyExistsError: status.HTTP_409_CONFLICT,
    PollAlreadyExistsError: status.HTTP_409_CONFLICT,
}


def http_error(status_code: int) -> HTTPException:
    """Build an HTTPException whose detail is the standard reason phrase."""
    return HTTPException(status_code=status_code, detail=HTTPStatus(status_code).phrase)


def store_error_to_http(exc: VoterStoreError, action: str) -> HTTPException:
    """Log a data-access failure and return the matching HTTPException.

    Args:
        exc: The error raised by the service layer.
        action: Short description of what was attempted, for the log line.
    """
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"Error {action}: {exc}")
    else:
        logger.warning(f"Error {action}: {exc}")
    return http_error(status_code)
