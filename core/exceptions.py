"""
Core: Exception Handling

Ledger exceptions and the DRF exception handler producing the standard
API error envelope.

@file core/exceptions.py
"""

import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('stockledger')


# ---------------------------------------------------------------------------
# Ledger exceptions
# ---------------------------------------------------------------------------

class ValidationError(APIException):
    """Missing or malformed input. Raised before any state is touched."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Missing or invalid fields.'
    default_code = 'VALIDATION_ERROR'


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Product not found.'
    default_code = 'RESOURCE_NOT_FOUND'


class InsufficientStockError(APIException):
    """Raised when an outbound quantity exceeds the product's current stock."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Insufficient stock.'
    default_code = 'INSUFFICIENT_STOCK'


class PersistenceError(APIException):
    """
    The snapshot write failed after the in-memory mutation was applied.
    Memory and disk have diverged until the next successful write or a
    reload from disk.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Change applied in memory but could not be saved.'
    default_code = 'PERSISTENCE_ERROR'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "errors": {...}, "code": "ERROR_CODE" }
    """
    if isinstance(exc, Http404):
        exc = NotFoundError()
    elif isinstance(exc, exceptions.ValidationError):
        # Serializer field errors share the ledger's validation kind.
        errors = exc.detail if isinstance(exc.detail, dict) else {'detail': exc.detail}
        return Response(
            {'success': False, 'errors': errors, 'code': ValidationError.default_code},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, PersistenceError):
        logger.error('Persistence failure surfaced to client: %s', exc.detail)

    response = exception_handler(exc, context)

    if response is not None:
        errors = {}
        code = getattr(exc, 'default_code', 'ERROR')

        if isinstance(response.data, dict):
            errors = response.data
            code = response.data.pop('code', code) if 'code' in response.data else code
        elif isinstance(response.data, list):
            errors = {'detail': response.data}
        else:
            errors = {'detail': [str(response.data)]}

        response.data = {
            'success': False,
            'errors': errors,
            'code': code,
        }

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {'success': False, 'errors': {'detail': ['Internal server error.']}, 'code': 'INTERNAL_ERROR'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return response
