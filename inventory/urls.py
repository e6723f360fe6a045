"""
Inventory: URL Configuration

@file inventory/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ExportView, InboundViewSet, OutboundViewSet, ProductViewSet, StatisticsView

app_name = 'inventory'

router = DefaultRouter()
router.include_root_view = False
router.register('products', ProductViewSet, basename='product')
router.register('inbound', InboundViewSet, basename='inbound')
router.register('outbound', OutboundViewSet, basename='outbound')

urlpatterns = [
    path('statistics/', StatisticsView.as_view(), name='statistics'),
    path('export/<str:kind>/', ExportView.as_view(), name='export'),
    path('', include(router.urls)),
]
