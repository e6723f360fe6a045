"""
Core: Exception handler and renderer tests

Error envelope codes and the success envelope.

@file core/tests/test_exceptions.py
"""

import json

import pytest
from django.http import Http404
from rest_framework import serializers
from rest_framework.response import Response

from core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    standard_exception_handler,
)
from core.renderers import StandardJSONRenderer


class TestStandardExceptionHandler:

    @pytest.mark.parametrize('exc, status_code, code', [
        (ValidationError(), 400, 'VALIDATION_ERROR'),
        (NotFoundError(), 404, 'RESOURCE_NOT_FOUND'),
        (InsufficientStockError(), 400, 'INSUFFICIENT_STOCK'),
        (PersistenceError(), 500, 'PERSISTENCE_ERROR'),
        (Http404(), 404, 'RESOURCE_NOT_FOUND'),
    ])
    def test_ledger_errors(self, exc, status_code, code):
        response = standard_exception_handler(exc, {})
        assert response.status_code == status_code
        assert response.data['success'] is False
        assert response.data['code'] == code
        assert 'detail' in response.data['errors']

    def test_serializer_errors_are_validation_errors(self):
        exc = serializers.ValidationError({'quantity': ['A valid integer is required.']})
        response = standard_exception_handler(exc, {})
        assert response.status_code == 400
        assert response.data['code'] == 'VALIDATION_ERROR'
        assert 'quantity' in response.data['errors']

    def test_custom_detail_kept(self):
        exc = InsufficientStockError(detail='Insufficient stock: available=1, requested=2.')
        response = standard_exception_handler(exc, {})
        assert response.data['errors']['detail'] == 'Insufficient stock: available=1, requested=2.'

    def test_unhandled_exception(self, caplog):
        response = standard_exception_handler(RuntimeError('boom'), {})
        assert response.status_code == 500
        assert response.data['code'] == 'INTERNAL_ERROR'
        assert 'Unhandled exception' in caplog.text


class TestStandardJSONRenderer:

    def _render(self, data, status_code=200):
        context = {'response': Response(status=status_code)}
        return json.loads(StandardJSONRenderer().render(data, renderer_context=context))

    def test_wraps_success(self):
        assert self._render([1, 2]) == {'success': True, 'data': [1, 2]}

    def test_passes_existing_envelope(self):
        assert self._render({'success': True}) == {'success': True}

    def test_errors_not_wrapped(self):
        body = {'success': False, 'errors': {}, 'code': 'X'}
        assert self._render(body, status_code=400) == body
