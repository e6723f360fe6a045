"""
Inventory: Serializers

Read serializers render ledger entities; write serializers only shape the
request body. Required-field and stock rules are enforced by the ledger
itself, so direct callers get the same checks as the API.

@file inventory/serializers.py
"""

from rest_framework import serializers


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductReadSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    unit = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=None, decimal_places=None, read_only=True)
    stock = serializers.IntegerField(read_only=True)
    min_stock = serializers.IntegerField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class ProductWriteSerializer(serializers.Serializer):
    """
    min_stock is deliberately loose: anything that is not an integer falls
    back to the ledger default instead of failing the request.
    """

    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    unit = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = serializers.JSONField(required=False, allow_null=True)
    min_stock = serializers.JSONField(required=False, allow_null=True)

    def to_ledger_kwargs(self) -> dict:
        data = self.validated_data
        return {
            'name': data.get('name'),
            'category': data.get('category'),
            'unit': data.get('unit'),
            'price': data.get('price'),
            'min_stock': data.get('min_stock'),
        }


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

class _RecordReadSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    product_id = serializers.CharField(read_only=True)
    product_name = serializers.CharField(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    operator = serializers.CharField(read_only=True)
    note = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class InboundRecordReadSerializer(_RecordReadSerializer):
    supplier = serializers.CharField(read_only=True)


class OutboundRecordReadSerializer(_RecordReadSerializer):
    customer = serializers.CharField(read_only=True)


class _RecordWriteSerializer(serializers.Serializer):
    product_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    quantity = serializers.JSONField(required=False, allow_null=True)
    operator = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')


class InboundRecordWriteSerializer(_RecordWriteSerializer):
    supplier = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_ledger_kwargs(self) -> dict:
        data = self.validated_data
        return {
            'product_id': data.get('product_id'),
            'quantity': data.get('quantity'),
            'supplier': data.get('supplier'),
            'operator': data.get('operator'),
            'note': data.get('note'),
        }


class OutboundRecordWriteSerializer(_RecordWriteSerializer):
    customer = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_ledger_kwargs(self) -> dict:
        data = self.validated_data
        return {
            'product_id': data.get('product_id'),
            'quantity': data.get('quantity'),
            'customer': data.get('customer'),
            'operator': data.get('operator'),
            'note': data.get('note'),
        }


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

class StatisticsSerializer(serializers.Serializer):
    totalProducts = serializers.IntegerField(source='total_products')
    lowStockProducts = serializers.IntegerField(source='low_stock_products')
    totalValue = serializers.DecimalField(source='total_value', max_digits=None, decimal_places=None)
    todayInbound = serializers.IntegerField(source='today_inbound')
    todayOutbound = serializers.IntegerField(source='today_outbound')
