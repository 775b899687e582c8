"""Vote accounting errors and their translation to HTTP responses."""

import logging

from fastapi import Request, status
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class VoteError(Exception):
    """Base class for errors raised by the vote ledger and quota policy.

    Each subclass maps to one HTTP status and a stable ``code`` string so
    clients can branch on it without parsing the message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "vote_error"
    default_detail: str = "Vote could not be processed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(VoteError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "You must be signed in to vote"


class UserNotFound(VoteError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "user_not_found"
    default_detail = "User not found"


class TrackNotFound(VoteError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "track_not_found"
    default_detail = "Track not found"


class QuotaExceeded(VoteError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "quota_exceeded"
    default_detail = "You have no votes left"


class DuplicateVote(VoteError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_vote"
    default_detail = "You already voted for this track"


class NotVoted(VoteError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "not_voted"
    default_detail = "You have not voted for this track"


class StoreFailure(VoteError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_failure"
    default_detail = "Vote could not be saved, please try again"


def vote_error_handler(request: Request, exc: VoteError) -> JSONResponse:
    """Translate a VoteError into a structured JSON error payload."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )
