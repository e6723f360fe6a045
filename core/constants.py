"""
Core: Constants

@file core/constants.py
"""

DEFAULT_MIN_STOCK = 10

# Snapshot collections, in the order they are written.
SNAPSHOT_PRODUCTS = 'products'
SNAPSHOT_INBOUND = 'inbound_records'
SNAPSHOT_OUTBOUND = 'outbound_records'
SNAPSHOT_COLLECTIONS = (SNAPSHOT_PRODUCTS, SNAPSHOT_INBOUND, SNAPSHOT_OUTBOUND)

EXPORT_KINDS = ('products', 'inbound', 'outbound', 'all')
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
