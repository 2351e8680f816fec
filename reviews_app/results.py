"""
Typed outcomes of the review services.

Service functions never raise for expected failures; they return one of these objects and
the caller (usually an API view) branches on `success` / `error`.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional


class ReviewErrorCode(str, Enum):
    DUPLICATE_REVIEW = 'duplicate_review'
    CAMPSITE_NOT_ELIGIBLE = 'campsite_not_eligible'
    SELF_REPORT = 'self_report'
    ALREADY_REPORTED = 'already_reported'
    REVIEW_NOT_FOUND = 'review_not_found'
    NOT_AUTHORIZED = 'not_authorized'
    STORE_FAILURE = 'store_failure'
    # Admin workflows on campsites and owner requests.
    NOT_PENDING = 'not_pending'


ERROR_MESSAGES = {
    ReviewErrorCode.DUPLICATE_REVIEW: "You have already reviewed this campsite",
    ReviewErrorCode.CAMPSITE_NOT_ELIGIBLE: "Campsite not found or not available for reviews",
    ReviewErrorCode.SELF_REPORT: "You cannot report your own review",
    ReviewErrorCode.ALREADY_REPORTED: "You have already reported this review",
    ReviewErrorCode.REVIEW_NOT_FOUND: "Review not found",
    ReviewErrorCode.NOT_AUTHORIZED: "You are not authorized to respond to this review",
    ReviewErrorCode.STORE_FAILURE: "The operation could not be completed, please try again",
    ReviewErrorCode.NOT_PENDING: "Not found or not pending",
}


@dataclass(frozen=True)
class ServiceError:
    code: ReviewErrorCode
    message: str

    @classmethod
    def of(cls, code: ReviewErrorCode, message: Optional[str] = None) -> 'ServiceError':
        return cls(code=code, message=message or ERROR_MESSAGES[code])


@dataclass(frozen=True)
class ServiceResult:
    """Success flag plus either the payload (`data`) or the error descriptor."""
    success: bool
    data: Any = None
    error: Optional[ServiceError] = None

    @classmethod
    def ok(cls, data: Any = None) -> 'ServiceResult':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, code: ReviewErrorCode, message: Optional[str] = None) -> 'ServiceResult':
        return cls(success=False, error=ServiceError.of(code, message))

    @property
    def error_code(self) -> Optional[ReviewErrorCode]:
        return self.error.code if self.error else None


@dataclass(frozen=True)
class HelpfulVoteResult:
    """
    Outcome of a helpful-vote toggle. On failure `voted` is the state that was attempted
    and `helpful_count` is 0.
    """
    success: bool
    voted: bool
    helpful_count: int
    error: Optional[ServiceError] = None

    @property
    def error_code(self) -> Optional[ReviewErrorCode]:
        return self.error.code if self.error else None


class ReviewPage(NamedTuple):
    """One page of reviews plus the total number of matching reviews."""
    reviews: list
    total: int

    @classmethod
    def empty(cls) -> 'ReviewPage':
        return cls(reviews=[], total=0)
