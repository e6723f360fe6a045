"""
Inventory: Models

Plain in-memory entities held by the ledger. Nothing here is backed by
the ORM: the ledger owns these objects and persists them as one JSON
snapshot (see inventory/store.py).

Stock is stored on the product but only ever changed by inbound and
outbound records, so that stock == SUM(inbound) - SUM(outbound) holds
for every product. Records are never modified after creation.

@file inventory/models.py
"""

import copy
import uuid
from dataclasses import dataclass, field
from decimal import Decimal

from django.utils import timezone


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Product:
    name: str
    category: str
    unit: str
    price: Decimal
    min_stock: int
    stock: int = 0
    id: str = field(default_factory=new_id)
    created_at: object = field(default_factory=timezone.localtime)

    @property
    def is_low_stock(self) -> bool:
        return self.stock < self.min_stock

    @property
    def stock_value(self) -> Decimal:
        return self.stock * self.price


@dataclass
class InboundRecord:
    """Receipt of goods from a supplier."""

    product_id: str
    product_name: str
    quantity: int
    supplier: str
    operator: str
    note: str = ''
    id: str = field(default_factory=new_id)
    created_at: object = field(default_factory=timezone.localtime)


@dataclass
class OutboundRecord:
    """Shipment of goods to a customer."""

    product_id: str
    product_name: str
    quantity: int
    customer: str
    operator: str
    note: str = ''
    id: str = field(default_factory=new_id)
    created_at: object = field(default_factory=timezone.localtime)


@dataclass
class LedgerState:
    """The whole aggregate. Transaction lists are kept most-recent-first."""

    products: list = field(default_factory=list)
    inbound_records: list = field(default_factory=list)
    outbound_records: list = field(default_factory=list)

    def copy(self) -> 'LedgerState':
        return copy.deepcopy(self)
