"""
Service error taxonomy and the DRF exception handler that renders it.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors raised by the service layer"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = 'INTERNAL_ERROR'
    default_message = 'Internal server error'

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 'VALIDATION_ERROR'
    default_message = 'Validation error'


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 'NOT_FOUND'
    default_message = 'Resource not found'


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = 'CONFLICT'
    default_message = 'Conflict'


class GatewayError(ServiceError):
    """Payment provider unreachable or answered with an unexpected shape"""
    status_code = status.HTTP_502_BAD_GATEWAY
    code = 'GATEWAY_ERROR'
    default_message = 'Payment gateway error'

    def __init__(self, message=None, raw_response=None, http_status=None):
        super().__init__(message)
        self.raw_response = raw_response
        self.http_status = http_status


class PersistenceError(ServiceError):
    code = 'PERSISTENCE_ERROR'
    default_message = 'Failed to persist changes'


class InternalError(ServiceError):
    pass


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error responses
    """
    if isinstance(exc, ServiceError):
        if exc.status_code >= 500:
            logger.error(f"Service error: {exc.code}: {exc.message}", exc_info=True)
        else:
            logger.info(f"Service error: {exc.code}: {exc.message}")

        data = {
            'code': exc.status_code,
            'msg': exc.message,
            'errors': exc.errors or {'code': exc.code},
        }
        if exc.status_code >= 500:
            # Don't expose internal errors to customers
            request = context.get('request')
            if not request or not getattr(request.user, 'is_staff', False):
                data['msg'] = 'Internal server error'
                data['errors'] = {'code': exc.code}
        return Response(data, status=exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        logger.warning(f"API Exception: {exc}")

        custom_response_data = {
            'code': response.status_code,
            'msg': 'An error occurred',
            'errors': response.data
        }

        if response.status_code == status.HTTP_400_BAD_REQUEST:
            custom_response_data['msg'] = 'Validation error'
        elif response.status_code == status.HTTP_401_UNAUTHORIZED:
            custom_response_data['msg'] = 'Authentication required'
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            custom_response_data['msg'] = 'Permission denied'
        elif response.status_code == status.HTTP_404_NOT_FOUND:
            custom_response_data['msg'] = 'Resource not found'
        elif response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            custom_response_data['msg'] = 'Method not allowed'
        elif response.status_code >= 500:
            custom_response_data['msg'] = 'Internal server error'

        response.data = custom_response_data

    return response
