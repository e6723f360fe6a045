"""
Inventory: Management Command: check_stock

Verifies that every product's stock equals its inbound total minus its
outbound total. Run it after a persistence failure or a hand-edited
snapshot.

Usage::

    python manage.py check_stock

Exits with an error when any product is out of balance.

@file inventory/management/commands/check_stock.py
"""

from django.core.management.base import BaseCommand, CommandError

from inventory.apps import get_ledger


class Command(BaseCommand):
    help = 'Check stock levels against the transaction history.'

    def handle(self, *args, **options):
        ledger = get_ledger()
        discrepancies = ledger.find_discrepancies()

        if not discrepancies:
            count = len(ledger.list_products())
            self.stdout.write(self.style.SUCCESS(f'All {count} products balance.'))
            return

        for item in discrepancies:
            self.stdout.write(
                f'{item.product_id}  {item.name}: stock={item.stock}, expected={item.expected}'
            )
        raise CommandError(f'{len(discrepancies)} product(s) out of balance.')
