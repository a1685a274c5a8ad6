from django.core.management.base import BaseCommand
from django.utils.dateparse import parse_date

from dues.services.ledger_service import LedgerService


class Command(BaseCommand):
    help = 'Re-derive payment status of open dues so overdue dues are marked as such'

    def add_arguments(self, parser):
        parser.add_argument(
            '--as-of',
            type=str,
            default=None,
            help='Evaluate statuses as of this date (YYYY-MM-DD, default: today)',
        )

    def handle(self, *args, **options):
        today = parse_date(options['as_of']) if options['as_of'] else None
        changed = LedgerService.refresh_statuses(today=today)
        if changed:
            self.stdout.write(self.style.SUCCESS(f'Updated payment status of {changed} dues'))
        else:
            self.stdout.write('All due statuses are up to date')
