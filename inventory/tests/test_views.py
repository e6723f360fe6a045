"""
Tests: Inventory API endpoints (views), envelopes and error codes.

@file inventory/tests/test_views.py
"""

import io

import pytest
from django.urls import reverse
from openpyxl import load_workbook

from core.exceptions import PersistenceError
from tests.factories import InboundPayloadFactory, OutboundPayloadFactory, ProductPayloadFactory


def _create_product(client, **overrides):
    url = reverse('api-v1:inventory:product-list')
    resp = client.post(url, ProductPayloadFactory(**overrides), format='json')
    assert resp.status_code == 201
    return resp.data


def _receive(client, product_id, quantity):
    url = reverse('api-v1:inventory:inbound-list')
    return client.post(url, InboundPayloadFactory(product_id=product_id, quantity=quantity), format='json')


def _ship(client, product_id, quantity):
    url = reverse('api-v1:inventory:outbound-list')
    return client.post(url, OutboundPayloadFactory(product_id=product_id, quantity=quantity), format='json')


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class TestProductEndpoints:

    def test_create(self, ledger_client):
        url = reverse('api-v1:inventory:product-list')
        resp = ledger_client.post(
            url, {'name': 'Widget', 'category': 'Hardware', 'unit': 'pcs', 'price': 9.5}, format='json',
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body['success'] is True
        assert body['data']['stock'] == 0
        assert body['data']['min_stock'] == 10
        assert body['data']['price'] == 9.5
        assert body['data']['is_low_stock'] is True

    def test_create_missing_fields(self, ledger_client, ledger):
        url = reverse('api-v1:inventory:product-list')
        resp = ledger_client.post(url, {'name': 'Widget'}, format='json')
        assert resp.status_code == 400
        assert resp.json()['success'] is False
        assert resp.json()['code'] == 'VALIDATION_ERROR'
        assert ledger.list_products() == []

    def test_create_with_invalid_min_stock_uses_default(self, ledger_client):
        product = _create_product(ledger_client, min_stock='lots')
        assert product['min_stock'] == 10

    def test_list(self, ledger_client):
        _create_product(ledger_client, name='Bolt')
        _create_product(ledger_client, name='Anchor')
        resp = ledger_client.get(reverse('api-v1:inventory:product-list'))
        assert resp.status_code == 200
        assert [p['name'] for p in resp.data] == ['Bolt', 'Anchor']

    def test_retrieve(self, ledger_client):
        product = _create_product(ledger_client, name='Widget')
        resp = ledger_client.get(reverse('api-v1:inventory:product-detail', args=[product['id']]))
        assert resp.status_code == 200
        assert resp.data['name'] == 'Widget'

    def test_retrieve_unknown(self, ledger_client):
        resp = ledger_client.get(reverse('api-v1:inventory:product-detail', args=['missing']))
        assert resp.status_code == 404
        assert resp.json()['code'] == 'RESOURCE_NOT_FOUND'

    def test_update_keeps_stock(self, ledger_client):
        product = _create_product(ledger_client)
        _receive(ledger_client, product['id'], 7)

        url = reverse('api-v1:inventory:product-detail', args=[product['id']])
        resp = ledger_client.put(
            url,
            {'name': 'Renamed', 'category': 'Tools', 'unit': 'box', 'price': '3.10', 'min_stock': 1, 'stock': 500},
            format='json',
        )

        assert resp.status_code == 200
        assert resp.data['name'] == 'Renamed'
        assert resp.data['stock'] == 7
        assert resp.data['min_stock'] == 1

    def test_update_unknown(self, ledger_client):
        url = reverse('api-v1:inventory:product-detail', args=['missing'])
        resp = ledger_client.put(url, ProductPayloadFactory(), format='json')
        assert resp.status_code == 404

    def test_update_without_price_rejected(self, ledger_client):
        product = _create_product(ledger_client)
        url = reverse('api-v1:inventory:product-detail', args=[product['id']])
        resp = ledger_client.put(url, {'name': 'X', 'category': 'Y', 'unit': 'Z'}, format='json')
        assert resp.status_code == 400

    def test_delete(self, ledger_client, ledger):
        product = _create_product(ledger_client)
        url = reverse('api-v1:inventory:product-detail', args=[product['id']])
        resp = ledger_client.delete(url)
        assert resp.status_code == 200
        assert resp.json() == {'success': True}
        assert ledger.list_products() == []

    def test_delete_unknown(self, ledger_client):
        resp = ledger_client.delete(reverse('api-v1:inventory:product-detail', args=['missing']))
        assert resp.status_code == 404

    def test_low_stock(self, ledger_client):
        low = _create_product(ledger_client, min_stock=5)
        ok = _create_product(ledger_client, min_stock=5)
        _receive(ledger_client, ok['id'], 5)

        resp = ledger_client.get(reverse('api-v1:inventory:product-low-stock'))

        assert resp.status_code == 200
        assert [p['id'] for p in resp.data] == [low['id']]


# ---------------------------------------------------------------------------
# Inbound / outbound
# ---------------------------------------------------------------------------

class TestTransactionEndpoints:

    def test_inbound(self, ledger_client, ledger):
        product = _create_product(ledger_client, name='Widget')
        resp = _receive(ledger_client, product['id'], 50)
        assert resp.status_code == 201
        assert resp.data['product_name'] == 'Widget'
        assert resp.data['quantity'] == 50
        assert ledger.get_product(product['id']).stock == 50

    def test_inbound_unknown_product(self, ledger_client):
        resp = _receive(ledger_client, 'missing', 5)
        assert resp.status_code == 404

    def test_inbound_missing_fields(self, ledger_client):
        product = _create_product(ledger_client)
        url = reverse('api-v1:inventory:inbound-list')
        resp = ledger_client.post(url, {'product_id': product['id'], 'quantity': 5}, format='json')
        assert resp.status_code == 400
        assert resp.json()['code'] == 'VALIDATION_ERROR'

    def test_outbound_insufficient_stock(self, ledger_client, ledger):
        product = _create_product(ledger_client)
        _receive(ledger_client, product['id'], 50)

        resp = _ship(ledger_client, product['id'], 70)

        assert resp.status_code == 400
        body = resp.json()
        assert body['code'] == 'INSUFFICIENT_STOCK'
        assert 'available=50' in body['errors']['detail']
        assert ledger.get_product(product['id']).stock == 50
        assert ledger.list_outbound() == []

    def test_outbound(self, ledger_client, ledger):
        product = _create_product(ledger_client)
        _receive(ledger_client, product['id'], 50)
        resp = _ship(ledger_client, product['id'], 30)
        assert resp.status_code == 201
        assert 'customer' in resp.data
        assert ledger.get_product(product['id']).stock == 20

    def test_lists_most_recent_first(self, ledger_client):
        product = _create_product(ledger_client)
        first = _receive(ledger_client, product['id'], 1).data
        second = _receive(ledger_client, product['id'], 2).data

        resp = ledger_client.get(reverse('api-v1:inventory:inbound-list'))

        assert [r['id'] for r in resp.data] == [second['id'], first['id']]

    def test_history_kept_after_product_delete(self, ledger_client):
        product = _create_product(ledger_client, name='Widget')
        _receive(ledger_client, product['id'], 3)
        ledger_client.delete(reverse('api-v1:inventory:product-detail', args=[product['id']]))

        resp = ledger_client.get(reverse('api-v1:inventory:inbound-list'))

        assert resp.data[0]['product_name'] == 'Widget'

    def test_persistence_failure_is_distinct(self, ledger_client, ledger, monkeypatch):
        product = _create_product(ledger_client)

        def fail(state):
            raise PersistenceError(detail='disk full')

        monkeypatch.setattr(ledger.store, 'persist', fail)
        resp = _receive(ledger_client, product['id'], 5)

        assert resp.status_code == 500
        assert resp.json()['code'] == 'PERSISTENCE_ERROR'


# ---------------------------------------------------------------------------
# Statistics / export / root
# ---------------------------------------------------------------------------

class TestStatisticsEndpoint:

    def test_widget_statistics(self, ledger_client):
        product = _create_product(
            ledger_client, name='Widget', category='Hardware', unit='pcs', price=9.5,
        )
        _receive(ledger_client, product['id'], 50)
        _ship(ledger_client, product['id'], 30)

        resp = ledger_client.get(reverse('api-v1:inventory:statistics'))

        assert resp.status_code == 200
        data = resp.json()['data']
        assert data == {
            'totalProducts': 1,
            'lowStockProducts': 0,
            'totalValue': 190.0,
            'todayInbound': 1,
            'todayOutbound': 1,
        }

    @pytest.mark.parametrize('price', ['100000000000000000', '1' + '0' * 30])
    def test_large_total_value(self, ledger_client, price):
        product = _create_product(ledger_client, price=price)
        _receive(ledger_client, product['id'], 3)

        resp = ledger_client.get(reverse('api-v1:inventory:statistics'))

        assert resp.status_code == 200
        assert resp.json()['data']['totalValue'] == pytest.approx(float(price) * 3)


class TestExportEndpoint:

    @pytest.mark.parametrize('kind, sheets', [
        ('products', ['Products']),
        ('inbound', ['Inbound']),
        ('outbound', ['Outbound']),
        ('all', ['Products', 'Inbound', 'Outbound']),
    ])
    def test_export(self, ledger_client, kind, sheets):
        product = _create_product(ledger_client)
        _receive(ledger_client, product['id'], 4)

        resp = ledger_client.get(reverse('api-v1:inventory:export', args=[kind]))

        assert resp.status_code == 200
        assert resp['Content-Type'].startswith('application/vnd.openxmlformats')
        assert f'filename="{kind}-' in resp['Content-Disposition']
        wb = load_workbook(io.BytesIO(resp.content))
        assert wb.sheetnames == sheets

    def test_unknown_kind(self, ledger_client):
        resp = ledger_client.get(reverse('api-v1:inventory:export', args=['suppliers']))
        assert resp.status_code == 400


class TestApiRoot:

    def test_directory(self, ledger_client):
        resp = ledger_client.get(reverse('api-v1:api-root'))
        assert resp.status_code == 200
        assert resp.data['products'].endswith('/api/v1/products/')
        assert set(resp.data['export']) == {'products', 'inbound', 'outbound', 'all'}
