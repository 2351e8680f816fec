from rest_framework import status
from rest_framework.response import Response

from ..results import ReviewErrorCode

# HTTP status for every service error code.
ERROR_STATUS = {
    ReviewErrorCode.DUPLICATE_REVIEW: status.HTTP_409_CONFLICT,
    ReviewErrorCode.CAMPSITE_NOT_ELIGIBLE: status.HTTP_400_BAD_REQUEST,
    ReviewErrorCode.SELF_REPORT: status.HTTP_400_BAD_REQUEST,
    ReviewErrorCode.ALREADY_REPORTED: status.HTTP_409_CONFLICT,
    ReviewErrorCode.REVIEW_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ReviewErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ReviewErrorCode.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ReviewErrorCode.NOT_PENDING: status.HTTP_404_NOT_FOUND,
}


def error_response(error):
    """
    Turns a service error descriptor into an API response.

    The body carries the machine-readable `error` code and a human-readable `detail`.
    """
    return Response(
        {'error': error.code.value, 'detail': error.message},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )
