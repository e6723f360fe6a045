"""
StockLedger: Root URL Configuration

All API endpoints are namespaced under /api/v1/.

@file config/urls.py
"""

from django.urls import include, path
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.reverse import reverse

from core.constants import EXPORT_KINDS


@api_view(['GET'])
def api_root(request, format=None):
    """StockLedger API v1: endpoint directory."""
    return Response({
        'products': reverse('api-v1:inventory:product-list', request=request, format=format),
        'low_stock': reverse('api-v1:inventory:product-low-stock', request=request, format=format),
        'inbound': reverse('api-v1:inventory:inbound-list', request=request, format=format),
        'outbound': reverse('api-v1:inventory:outbound-list', request=request, format=format),
        'statistics': reverse('api-v1:inventory:statistics', request=request),
        'export': {
            kind: reverse('api-v1:inventory:export', args=[kind], request=request)
            for kind in EXPORT_KINDS
        },
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('', include('inventory.urls', namespace='inventory')),
]

urlpatterns = [
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
