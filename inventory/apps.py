"""
Inventory: Application Configuration

The app config owns the process-wide ledger. It is opened once when
Django starts; views reach it through get_ledger().
"""

from django.apps import AppConfig, apps
from django.conf import settings


class InventoryConfig(AppConfig):
    name = 'inventory'
    verbose_name = 'Warehouse Inventory Ledger'

    ledger = None

    def ready(self):
        from .services import InventoryLedger
        from .store import JsonSnapshotStore

        self.ledger = InventoryLedger.open(
            JsonSnapshotStore(settings.LEDGER_DATA_FILE),
            default_min_stock=settings.LEDGER_DEFAULT_MIN_STOCK,
        )


def get_ledger():
    return apps.get_app_config('inventory').ledger
