"""
StockLedger: Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from django.apps import apps
from rest_framework.test import APIClient

from inventory.services import InventoryLedger
from inventory.store import JsonSnapshotStore


@pytest.fixture
def snapshot_path(tmp_path):
    """Snapshot file inside a per-test temporary directory."""
    return tmp_path / 'data' / 'inventory.json'


@pytest.fixture
def ledger(snapshot_path):
    """Empty ledger persisting to snapshot_path."""
    return InventoryLedger.open(JsonSnapshotStore(snapshot_path))


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def ledger_client(api_client, ledger, monkeypatch):
    """API client whose requests hit the per-test ledger."""
    monkeypatch.setattr(apps.get_app_config('inventory'), 'ledger', ledger)
    return api_client
