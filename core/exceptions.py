import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class MarketplaceError(APIException):
    """Base class for failures raised by the job, bid, payment and chat services."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed.'
    default_code = 'marketplace_error'


class ValidationError(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'validation_error'


class NotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class NotAuthorized(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not authorized.'
    default_code = 'not_authorized'


class InvalidState(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'invalid_state'


class DuplicateBid(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'You have already placed a bid for this job.'
    default_code = 'duplicate_bid'


class InternalError(MarketplaceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Server error'
    default_code = 'internal_error'


def api_exception_handler(exc, context):
    """Render every failure as {"error": ...}.

    Internal and unexpected failures are logged with their traceback and
    returned as an opaque message; everything else carries its own detail.
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view else 'unknown view'

    if isinstance(exc, InternalError):
        logger.error(f"Internal error in {view_name}: {exc.detail}", exc_info=exc)
        return Response({'error': str(InternalError.default_detail)}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        logger.error(f"Unhandled error in {view_name}: {str(exc)}", exc_info=exc)
        return Response({'error': str(InternalError.default_detail)},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, MarketplaceError):
        response.data = {'error': str(exc.detail)}
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'error': str(response.data['detail'])}
    return response
