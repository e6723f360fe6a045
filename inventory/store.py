"""
Inventory: Snapshot Store

Loads and persists the whole ledger aggregate as a single JSON document:

  { "products": [...], "inbound_records": [...], "outbound_records": [...] }

Every write rewrites the full document (temp file + atomic replace), so
write cost grows with the total number of records. Fine for hundreds to
low thousands of records.

@file inventory/store.py
"""

import json
import logging
import tempfile
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from core.constants import SNAPSHOT_COLLECTIONS, SNAPSHOT_INBOUND, SNAPSHOT_OUTBOUND, SNAPSHOT_PRODUCTS
from core.exceptions import PersistenceError

from .models import InboundRecord, LedgerState, OutboundRecord, Product

logger = logging.getLogger('stockledger')


class SnapshotFormatError(ValueError):
    """The snapshot file exists but does not describe a ledger."""


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value)) if value else None
        if parsed is None:
            raise SnapshotFormatError(f'Invalid timestamp: {value!r}')
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _parse_decimal(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise SnapshotFormatError(f'Invalid price: {value!r}')


def _product_from_dict(raw: dict) -> Product:
    return Product(
        id=str(raw['id']),
        name=raw['name'],
        category=raw['category'],
        unit=raw['unit'],
        price=_parse_decimal(raw['price']),
        stock=int(raw['stock']),
        min_stock=int(raw['min_stock']),
        created_at=_parse_timestamp(raw['created_at']),
    )


def _inbound_from_dict(raw: dict) -> InboundRecord:
    return InboundRecord(
        id=str(raw['id']),
        product_id=str(raw['product_id']),
        product_name=raw['product_name'],
        quantity=int(raw['quantity']),
        supplier=raw['supplier'],
        operator=raw['operator'],
        note=raw.get('note') or '',
        created_at=_parse_timestamp(raw['created_at']),
    )


def _outbound_from_dict(raw: dict) -> OutboundRecord:
    return OutboundRecord(
        id=str(raw['id']),
        product_id=str(raw['product_id']),
        product_name=raw['product_name'],
        quantity=int(raw['quantity']),
        customer=raw['customer'],
        operator=raw['operator'],
        note=raw.get('note') or '',
        created_at=_parse_timestamp(raw['created_at']),
    )


def state_from_document(document) -> LedgerState:
    """Build a LedgerState from a decoded snapshot document."""
    if not isinstance(document, dict):
        raise SnapshotFormatError('Snapshot root must be an object.')

    collections = {}
    for name in SNAPSHOT_COLLECTIONS:
        items = document.get(name) or []
        if not isinstance(items, list):
            raise SnapshotFormatError(f'"{name}" must be a list.')
        collections[name] = items

    try:
        return LedgerState(
            products=[_product_from_dict(p) for p in collections[SNAPSHOT_PRODUCTS]],
            inbound_records=[_inbound_from_dict(r) for r in collections[SNAPSHOT_INBOUND]],
            outbound_records=[_outbound_from_dict(r) for r in collections[SNAPSHOT_OUTBOUND]],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotFormatError(f'Malformed entity: {exc}') from exc


def _entity_to_dict(entity) -> dict:
    data = asdict(entity)
    for key, value in data.items():
        # Full precision on both; the stock value total depends on exact prices.
        if isinstance(value, Decimal):
            data[key] = str(value)
        elif isinstance(value, datetime):
            data[key] = value.isoformat()
    return data


def state_to_document(state: LedgerState) -> dict:
    return {
        SNAPSHOT_PRODUCTS: [_entity_to_dict(p) for p in state.products],
        SNAPSHOT_INBOUND: [_entity_to_dict(r) for r in state.inbound_records],
        SNAPSHOT_OUTBOUND: [_entity_to_dict(r) for r in state.outbound_records],
    }


class JsonSnapshotStore:
    """Durable snapshot of the ledger in one JSON file."""

    def __init__(self, path):
        self.path = Path(path)

    def __repr__(self):
        return f'JsonSnapshotStore({str(self.path)!r})'

    def load(self) -> LedgerState:
        """
        Read the snapshot. A missing or malformed file yields an empty
        ledger; startup never fails because of the snapshot.
        """
        if not self.path.exists():
            logger.info('No snapshot at %s; starting with an empty ledger.', self.path)
            return LedgerState()

        try:
            document = json.loads(self.path.read_text(encoding='utf-8'))
            state = state_from_document(document)
        except (OSError, ValueError) as exc:
            logger.warning(
                'Snapshot %s could not be loaded (%s); starting with an empty ledger.',
                self.path, exc,
            )
            return LedgerState()

        logger.info(
            'Loaded snapshot %s: %d products, %d inbound, %d outbound.',
            self.path, len(state.products),
            len(state.inbound_records), len(state.outbound_records),
        )
        return state

    def persist(self, state: LedgerState) -> None:
        """Overwrite the snapshot with the full aggregate."""
        tmp_path = None
        try:
            payload = json.dumps(state_to_document(state), ensure_ascii=False, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w', delete=False, encoding='utf-8',
                dir=str(self.path.parent), prefix=f'.{self.path.name}.', suffix='.tmp',
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(payload)
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            logger.error('Failed to persist snapshot %s: %s', self.path, exc)
            raise PersistenceError(detail=f'Could not write {self.path.name}: {exc}') from exc
