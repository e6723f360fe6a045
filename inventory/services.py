"""
Inventory: Service Layer

The inventory ledger: product catalog, inbound/outbound records and the
stock bookkeeping tying them together. Every mutation runs under one
lock across "validate -> check stock -> mutate -> persist", so two
outbound requests can never both pass the stock check on a stale value.

Validation, not-found and insufficient-stock errors are raised before
anything changes. PersistenceError is raised after the in-memory change
was applied (memory and disk have diverged until the next good write or
a reload()).

@file inventory/services.py
"""

import copy
import logging
import threading
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.utils import timezone

from core.constants import DEFAULT_MIN_STOCK
from core.exceptions import InsufficientStockError, NotFoundError, ValidationError

from .models import InboundRecord, LedgerState, OutboundRecord, Product

logger = logging.getLogger('stockledger')


# ---------------------------------------------------------------------------
# Input coercion
# ---------------------------------------------------------------------------

def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_text(fields: dict) -> dict:
    missing = sorted(name for name, value in fields.items() if _is_blank(value))
    if missing:
        raise ValidationError(detail=f'Missing required fields: {", ".join(missing)}.')
    return {name: str(value).strip() for name, value in fields.items()}


def _coerce_price(value) -> Decimal:
    if _is_blank(value) or isinstance(value, bool):
        raise ValidationError(detail='Missing required fields: price.')
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(detail=f'Invalid price: {value!r}.')
    if not price.is_finite() or price < 0:
        raise ValidationError(detail='Price must be a non-negative number.')
    return price


def _coerce_min_stock(value, default: int) -> int:
    """Fall back to the default when omitted, not a whole number, or negative."""
    if isinstance(value, bool) or _is_blank(value):
        return default
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        return default
    # 5, 5.0 and "5.0" are whole numbers; "5.7" is not.
    if not number.is_finite() or number != number.to_integral_value() or number < 0:
        return default
    return int(number)


def _coerce_quantity(value) -> int:
    if _is_blank(value) or isinstance(value, bool):
        raise ValidationError(detail='Missing required fields: quantity.')
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        quantity = int(str(value).strip())
    except ValueError:
        raise ValidationError(detail=f'Quantity must be a whole number, got {value!r}.')
    if quantity <= 0:
        raise ValidationError(detail='Quantity must be positive.')
    return quantity


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LedgerStatistics:
    total_products: int
    low_stock_products: int
    total_value: Decimal
    today_inbound: int
    today_outbound: int


@dataclass(frozen=True)
class StockDiscrepancy:
    product_id: str
    name: str
    stock: int
    expected: int


def _created_on(record, day) -> bool:
    return timezone.localtime(record.created_at).date() == day


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

class InventoryLedger:
    """
    Owns the in-memory ledger state and its snapshot store.

    All public methods return copies; callers never hold references into
    the live aggregate.
    """

    def __init__(self, store, *, default_min_stock: int = DEFAULT_MIN_STOCK):
        self.store = store
        self.default_min_stock = default_min_stock
        self._lock = threading.RLock()
        self._state = LedgerState()

    @classmethod
    def open(cls, store, **kwargs) -> 'InventoryLedger':
        """Create a ledger and load its state from the store."""
        ledger = cls(store, **kwargs)
        ledger.reload()
        return ledger

    def reload(self) -> None:
        """Replace in-memory state with whatever the store holds."""
        state = self.store.load()
        with self._lock:
            self._state = state

    def snapshot(self) -> LedgerState:
        """Consistent deep copy of the whole aggregate."""
        with self._lock:
            return self._state.copy()

    def _persist(self) -> None:
        self.store.persist(self._state)

    def _find_product(self, product_id) -> Product:
        for product in self._state.products:
            if product.id == str(product_id):
                return product
        raise NotFoundError(detail=f'Product {product_id} not found.')

    # --- Products ---

    def create_product(self, *, name, category, unit, price, min_stock=None) -> Product:
        text = _require_text({'name': name, 'category': category, 'unit': unit})
        product = Product(
            price=_coerce_price(price),
            min_stock=_coerce_min_stock(min_stock, self.default_min_stock),
            **text,
        )
        with self._lock:
            self._state.products.append(product)
            self._persist()
            logger.info('Product %s created: %s', product.id, product.name)
            return copy.copy(product)

    def get_product(self, product_id) -> Product:
        with self._lock:
            return copy.copy(self._find_product(product_id))

    def list_products(self) -> list:
        with self._lock:
            return [copy.copy(p) for p in self._state.products]

    def low_stock_products(self) -> list:
        with self._lock:
            return [copy.copy(p) for p in self._state.products if p.is_low_stock]

    def update_product(self, product_id, *, name, category, unit, price, min_stock=None) -> Product:
        """Replace the editable fields. Stock, id and created_at are kept."""
        text = _require_text({'name': name, 'category': category, 'unit': unit})
        price = _coerce_price(price)
        min_stock = _coerce_min_stock(min_stock, self.default_min_stock)

        with self._lock:
            product = self._find_product(product_id)
            product.name = text['name']
            product.category = text['category']
            product.unit = text['unit']
            product.price = price
            product.min_stock = min_stock
            self._persist()
            logger.info('Product %s updated.', product.id)
            return copy.copy(product)

    def delete_product(self, product_id) -> None:
        """Remove the product. Its transaction records stay as history."""
        with self._lock:
            product = self._find_product(product_id)
            self._state.products.remove(product)
            self._persist()
            logger.info('Product %s deleted: %s', product.id, product.name)

    # --- Transactions ---

    def record_inbound(self, *, product_id, quantity, supplier, operator, note=None) -> InboundRecord:
        text = _require_text({'product_id': product_id, 'supplier': supplier, 'operator': operator})
        quantity = _coerce_quantity(quantity)

        with self._lock:
            product = self._find_product(text['product_id'])
            record = InboundRecord(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                supplier=text['supplier'],
                operator=text['operator'],
                note=str(note or ''),
            )
            product.stock += quantity
            self._state.inbound_records.insert(0, record)
            self._persist()
            logger.info(
                'Inbound %s qty=%s product=%s stock=%s',
                record.id, quantity, product.id, product.stock,
            )
            return copy.copy(record)

    def record_outbound(self, *, product_id, quantity, customer, operator, note=None) -> OutboundRecord:
        text = _require_text({'product_id': product_id, 'customer': customer, 'operator': operator})
        quantity = _coerce_quantity(quantity)

        with self._lock:
            product = self._find_product(text['product_id'])
            if quantity > product.stock:
                logger.warning(
                    'Outbound rejected for product %s: stock=%s, requested=%s',
                    product.id, product.stock, quantity,
                )
                raise InsufficientStockError(
                    detail=f'Insufficient stock: available={product.stock}, requested={quantity}.',
                )
            record = OutboundRecord(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                customer=text['customer'],
                operator=text['operator'],
                note=str(note or ''),
            )
            product.stock -= quantity
            self._state.outbound_records.insert(0, record)
            self._persist()
            logger.info(
                'Outbound %s qty=%s product=%s stock=%s',
                record.id, quantity, product.id, product.stock,
            )
            return copy.copy(record)

    def list_inbound(self) -> list:
        with self._lock:
            return [copy.copy(r) for r in self._state.inbound_records]

    def list_outbound(self) -> list:
        with self._lock:
            return [copy.copy(r) for r in self._state.outbound_records]

    # --- Read-side aggregates ---

    def get_statistics(self) -> LedgerStatistics:
        today = timezone.localdate()
        with self._lock:
            products = self._state.products
            return LedgerStatistics(
                total_products=len(products),
                low_stock_products=sum(1 for p in products if p.is_low_stock),
                total_value=sum((p.stock_value for p in products), Decimal('0')),
                today_inbound=sum(1 for r in self._state.inbound_records if _created_on(r, today)),
                today_outbound=sum(1 for r in self._state.outbound_records if _created_on(r, today)),
            )

    def find_discrepancies(self) -> list:
        """Products whose stock differs from inbound minus outbound."""
        with self._lock:
            balances = {p.id: 0 for p in self._state.products}
            for record in self._state.inbound_records:
                if record.product_id in balances:
                    balances[record.product_id] += record.quantity
            for record in self._state.outbound_records:
                if record.product_id in balances:
                    balances[record.product_id] -= record.quantity
            return [
                StockDiscrepancy(product_id=p.id, name=p.name, stock=p.stock, expected=balances[p.id])
                for p in self._state.products
                if p.stock != balances[p.id]
            ]
