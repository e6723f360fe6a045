"""
Inventory: Management Command: export_inventory

Writes an Excel workbook of the current ledger to disk.

Usage::

    python manage.py export_inventory --kind all --output inventory.xlsx

Read-only: safe to run while the API is serving requests.

@file inventory/management/commands/export_inventory.py
"""

from pathlib import Path

from django.core.management.base import BaseCommand

from core.constants import EXPORT_KINDS
from inventory.apps import get_ledger
from inventory.exports import build_workbook, export_filename


class Command(BaseCommand):
    help = 'Export products, inbound or outbound records (or all three) to .xlsx.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--kind',
            choices=EXPORT_KINDS,
            default='all',
            help='Which collection to export (default: all).',
        )
        parser.add_argument(
            '--output',
            type=str,
            help='Destination file (default: <kind>-<YYYYMMDD>.xlsx in the current directory).',
        )

    def handle(self, *args, **options):
        kind = options['kind']
        output = Path(options.get('output') or export_filename(kind))
        output.parent.mkdir(parents=True, exist_ok=True)

        build_workbook(get_ledger(), kind).save(output)

        self.stdout.write(self.style.SUCCESS(f'Exported {kind} to {output}'))
