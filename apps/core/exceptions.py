# apps/core/exceptions.py
import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BookingError(APIException):
    """
    Base for the errors an engine operation can reject a request with.
    Batch operations catch this type to record a per-item failure.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed.'
    default_code = 'booking_error'

    def __init__(self, detail=None, code=None, data=None):
        super().__init__(detail, code)
        self.data = data


class ValidationFailed(BookingError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = 'Invalid input.'
    default_code = 'invalid'


class AuthorizationError(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Unauthorized. Admin access required.'
    default_code = 'forbidden'


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class BusinessRuleViolation(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violated.'
    default_code = 'business_rule'


class TransactionFailure(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'The operation failed and was rolled back.'
    default_code = 'transaction_failure'


def _message_from(detail):
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return _message_from(detail[0])
    if isinstance(detail, dict) and 'detail' in detail:
        return _message_from(detail['detail'])
    return 'Invalid input.'


def envelope_exception_handler(exc, context):
    """
    Render every error as {status: "error", message, data}.
    Serializer validation errors are reported as 422.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        return Response(
            {'status': 'error', 'message': 'An unexpected error occurred.', 'data': None},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        response.data = {
            'status': 'error',
            'message': 'Validation failed.',
            'data': exc.detail,
        }
        return response

    response.data = {
        'status': 'error',
        'message': _message_from(getattr(exc, 'detail', str(exc))),
        'data': getattr(exc, 'data', None),
    }
    return response
