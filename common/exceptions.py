"""Common exceptions and the exception handler for the project."""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

__all__ = [
    'ConflictError',
    'NotFoundError',
    'StateError',
    'ValidationError',
    'custom_exception_handler',
]


class ConflictError(APIException):
    """A write would break a uniqueness or run-once policy."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource conflicts with an existing record.'
    default_code = 'conflict'


class NotFoundError(NotFound):
    default_detail = 'Resource not found.'


class StateError(APIException):
    """The object is in a state that does not allow the requested transition."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid state transition.'
    default_code = 'invalid_state'


def custom_exception_handler(exc, context):
    """Return a consistent error response structure."""
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        exc = ValidationError(detail=detail)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled API error",
            extra={'view': view.__class__.__name__ if view else None},
        )
        return Response(
            {"errors": [str(exc)]}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({"errors": response.data}, status=response.status_code)
