from django.core.management.base import BaseCommand
from django.utils.dateparse import parse_date

from dues.services.recurring_service import RecurringDueService


class Command(BaseCommand):
    help = 'Create the next period for paid recurring dues whose next due date has arrived'

    def add_arguments(self, parser):
        parser.add_argument(
            '--as-of',
            type=str,
            default=None,
            help='Reference date (YYYY-MM-DD, default: today)',
        )

    def handle(self, *args, **options):
        today = parse_date(options['as_of']) if options['as_of'] else None
        result = RecurringDueService.generate_due(today=today)

        self.stdout.write(self.style.SUCCESS(f"Created {len(result['created'])} recurring dues"))
        for item in result['skipped']:
            self.stdout.write(self.style.WARNING(f"  - due {item['due_id']} skipped: {item['error']}"))
