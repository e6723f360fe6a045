"""
Inventory: Excel Export

Builds .xlsx workbooks from one consistent ledger snapshot. Read-only:
nothing here touches ledger state.

@file inventory/exports.py
"""

import io
import logging

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.constants import EXPORT_KINDS
from core.exceptions import ValidationError

logger = logging.getLogger('stockledger')

PRODUCT_COLUMNS = [
    ('Name', 'name', 24),
    ('Category', 'category', 16),
    ('Unit', 'unit', 8),
    ('Unit price', 'price', 12),
    ('Stock', 'stock', 10),
    ('Min stock', 'min_stock', 10),
    ('Stock value', 'stock_value', 14),
    ('Low stock', 'is_low_stock', 10),
    ('Created at', 'created_at', 20),
]

INBOUND_COLUMNS = [
    ('Date', 'created_at', 20),
    ('Product', 'product_name', 24),
    ('Quantity', 'quantity', 10),
    ('Supplier', 'supplier', 20),
    ('Operator', 'operator', 14),
    ('Note', 'note', 30),
]

OUTBOUND_COLUMNS = [
    ('Date', 'created_at', 20),
    ('Product', 'product_name', 24),
    ('Quantity', 'quantity', 10),
    ('Customer', 'customer', 20),
    ('Operator', 'operator', 14),
    ('Note', 'note', 30),
]


def _cell_value(entity, attr):
    value = getattr(entity, attr)
    if attr == 'created_at':
        # Excel has no time zone support; write local wall-clock time.
        return timezone.localtime(value).replace(tzinfo=None)
    if attr in ('price', 'stock_value'):
        return float(value)
    if attr == 'is_low_stock':
        return 'Yes' if value else 'No'
    if isinstance(value, str):
        # Control characters are not allowed in worksheet XML.
        return ILLEGAL_CHARACTERS_RE.sub('', value)
    return value


def _write_sheet(ws, title, columns, rows):
    ws.title = title
    ws.append([header for header, _, _ in columns])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    ws.freeze_panes = 'A2'

    for index, (_, _, width) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    for entity in rows:
        ws.append([_cell_value(entity, attr) for _, attr, _ in columns])
        # Text is written as text, never as a formula ("=1+1", "=HYPERLINK(...)").
        for cell in ws[ws.max_row]:
            if isinstance(cell.value, str):
                cell.data_type = 's'

    for row in range(2, len(rows) + 2):
        for index, (_, attr, _) in enumerate(columns, start=1):
            if attr == 'created_at':
                ws.cell(row=row, column=index).number_format = 'yyyy-mm-dd hh:mm:ss'
            elif attr in ('price', 'stock_value'):
                ws.cell(row=row, column=index).number_format = '#,##0.00'


SHEETS = {
    'products': ('Products', PRODUCT_COLUMNS, 'products'),
    'inbound': ('Inbound', INBOUND_COLUMNS, 'inbound_records'),
    'outbound': ('Outbound', OUTBOUND_COLUMNS, 'outbound_records'),
}


def build_workbook(ledger, kind: str) -> Workbook:
    """
    Workbook for one collection, or all three sheets for kind='all'.
    All sheets come from the same snapshot.
    """
    if kind not in EXPORT_KINDS:
        raise ValidationError(detail=f'Unknown export "{kind}". Expected one of: {", ".join(EXPORT_KINDS)}.')

    state = ledger.snapshot()
    kinds = list(SHEETS) if kind == 'all' else [kind]

    wb = Workbook()
    ws = wb.active
    for position, sheet_kind in enumerate(kinds):
        if position:
            ws = wb.create_sheet()
        title, columns, collection = SHEETS[sheet_kind]
        _write_sheet(ws, title, columns, getattr(state, collection))

    logger.info('Built %s export workbook (%s).', kind, ', '.join(kinds))
    return wb


def export_bytes(ledger, kind: str) -> bytes:
    buffer = io.BytesIO()
    build_workbook(ledger, kind).save(buffer)
    return buffer.getvalue()


def export_filename(kind: str) -> str:
    return f'{kind}-{timezone.localdate():%Y%m%d}.xlsx'
