"""
Inventory: Views

DRF ViewSets over the inventory ledger. Views only translate requests
into ledger calls; all rules live in inventory/services.py.

@file inventory/views.py
"""

from django.http import HttpResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from core.constants import XLSX_CONTENT_TYPE

from .apps import get_ledger
from .exports import export_bytes, export_filename
from .serializers import (
    InboundRecordReadSerializer,
    InboundRecordWriteSerializer,
    OutboundRecordReadSerializer,
    OutboundRecordWriteSerializer,
    ProductReadSerializer,
    ProductWriteSerializer,
    StatisticsSerializer,
)


class ProductViewSet(viewsets.ViewSet):
    """
    Product catalog. Stock is read-only here; it only moves through
    inbound and outbound records.
    """

    def list(self, request):
        products = get_ledger().list_products()
        return Response(ProductReadSerializer(products, many=True).data)

    def retrieve(self, request, pk=None):
        product = get_ledger().get_product(pk)
        return Response(ProductReadSerializer(product).data)

    def create(self, request):
        ser = ProductWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        product = get_ledger().create_product(**ser.to_ledger_kwargs())
        return Response(ProductReadSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = ProductWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        product = get_ledger().update_product(pk, **ser.to_ledger_kwargs())
        return Response(ProductReadSerializer(product).data)

    def destroy(self, request, pk=None):
        get_ledger().delete_product(pk)
        return Response({'success': True})

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        products = get_ledger().low_stock_products()
        return Response(ProductReadSerializer(products, many=True).data)


class InboundViewSet(viewsets.ViewSet):
    """Receiving: most recent records first."""

    def list(self, request):
        records = get_ledger().list_inbound()
        return Response(InboundRecordReadSerializer(records, many=True).data)

    def create(self, request):
        ser = InboundRecordWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = get_ledger().record_inbound(**ser.to_ledger_kwargs())
        return Response(InboundRecordReadSerializer(record).data, status=status.HTTP_201_CREATED)


class OutboundViewSet(viewsets.ViewSet):
    """Shipping: most recent records first. Rejected when stock is short."""

    def list(self, request):
        records = get_ledger().list_outbound()
        return Response(OutboundRecordReadSerializer(records, many=True).data)

    def create(self, request):
        ser = OutboundRecordWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = get_ledger().record_outbound(**ser.to_ledger_kwargs())
        return Response(OutboundRecordReadSerializer(record).data, status=status.HTTP_201_CREATED)


class StatisticsView(APIView):

    def get(self, request, format=None):
        stats = get_ledger().get_statistics()
        return Response(StatisticsSerializer(stats).data)


class ExportView(APIView):
    """Excel download of products, inbound, outbound, or all three sheets."""

    def get(self, request, kind, format=None):
        content = export_bytes(get_ledger(), kind)
        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{export_filename(kind)}"'
        return response
