from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import APIException

from events.services.attendance_service import AttendanceService


class Command(BaseCommand):
    help = 'Apply the yearly meeting-attendance penalty to members (once per year)'

    def add_arguments(self, parser):
        parser.add_argument('year', type=int, help='Calendar year to evaluate')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show the report without applying penalties',
        )

    def handle(self, *args, **options):
        year = options['year']

        if options['dry_run']:
            report = AttendanceService.evaluate(year)
            if not report.evaluable:
                self.stdout.write(self.style.WARNING(f'No meetings in {year}; nothing to evaluate'))
                return
            for entry in report.penalized:
                self.stdout.write(f'  - {entry.name}: rate {entry.attendance_rate}, penalty {entry.penalty}')
            self.stdout.write(self.style.WARNING(f'Would penalize {len(report.penalized)} members'))
            return

        try:
            report, run = AttendanceService.calculate_penalties(year)
        except APIException as exc:
            raise CommandError(str(exc.detail))

        self.stdout.write(
            self.style.SUCCESS(
                f'Penalized {run.members_penalized} of {run.members_evaluated} members '
                f'(total {run.total_penalty}) for {year}'
            )
        )
