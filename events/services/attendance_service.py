import csv
import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from common.enums import AttendanceStatus, EventType
from common.exceptions import ConflictError, ValidationError
from events.models import AttendancePenaltyRun, Event, EventAttendee
from users.models import User
from users.utils import send_attendance_warning_email

logger = logging.getLogger(__name__)

CSV_HEADERS = ['Name', 'Email', 'Status', 'Registration Date']


def penalty_threshold():
    return Decimal(str(getattr(settings, 'ATTENDANCE_PENALTY_THRESHOLD', '0.5')))


def penalty_fraction():
    return Decimal(str(getattr(settings, 'ATTENDANCE_PENALTY_FRACTION', '0.5')))


@dataclass
class AttendanceEntry:
    user_id: int
    name: str
    email: str
    present_count: int
    attendance_rate: Decimal
    penalty: Decimal

    def as_dict(self):
        return {
            'user_id': self.user_id,
            'name': self.name,
            'email': self.email,
            'present_count': self.present_count,
            'attendance_rate': self.attendance_rate,
            'penalty': self.penalty,
        }


@dataclass
class AttendanceReport:
    year: int
    meetings_count: int
    entries: list = field(default_factory=list)

    @property
    def evaluable(self):
        return self.meetings_count > 0

    @property
    def penalized(self):
        return [e for e in self.entries if e.penalty > 0]

    def as_dict(self):
        return {
            'year': self.year,
            'meetings_count': self.meetings_count,
            'evaluable': self.evaluable,
            'entries': [e.as_dict() for e in self.entries],
        }


class AttendanceService:
    """
    Meeting attendance evaluation for members.

    A member's rate is present meetings over all meetings in the year. Below
    the configured threshold the member owes a fraction of their annual dues.
    """

    @staticmethod
    def meetings_for_year(year):
        return Event.objects.filter(
            is_deleted=False,
            event_type=EventType.MEETINGS,
            start_date__year=year,
        )

    @staticmethod
    def evaluate(year):
        """
        Read-only attendance report for every member.

        Years without meetings are not evaluable and yield no entries.

        Returns:
            AttendanceReport
        """
        meetings = AttendanceService.meetings_for_year(year)
        meetings_count = meetings.count()
        report = AttendanceReport(year=year, meetings_count=meetings_count)
        if not meetings_count:
            return report

        threshold = penalty_threshold()
        fraction = penalty_fraction()
        members = User.objects.members().annotate(
            present_count=Count(
                'event_attendances',
                filter=Q(
                    event_attendances__status=AttendanceStatus.PRESENT,
                    event_attendances__is_deleted=False,
                    event_attendances__event__in=meetings,
                ),
            )
        ).order_by('id')

        for member in members:
            rate = (Decimal(member.present_count) / Decimal(meetings_count)).quantize(Decimal('0.0001'))
            penalty = Decimal('0.00')
            if rate < threshold:
                penalty = ((member.annual_dues or Decimal('0')) * fraction).quantize(Decimal('0.01'))
            report.entries.append(AttendanceEntry(
                user_id=member.pk,
                name=member.full_name,
                email=member.email or '',
                present_count=member.present_count,
                attendance_rate=rate,
                penalty=penalty,
            ))
        return report

    @staticmethod
    def calculate_penalties(year, processed_by=None):
        """
        Apply attendance penalties for a year, at most once.

        Returns:
            tuple: (AttendanceReport, AttendancePenaltyRun)
        """
        if AttendancePenaltyRun.objects.filter(year=year).exists():
            raise ConflictError(f"Attendance penalties for {year} have already been applied")
        report = AttendanceService.evaluate(year)
        if not report.evaluable:
            raise ValidationError({'year': f"No meetings were held in {year}; attendance cannot be evaluated"})

        penalized = report.penalized
        try:
            with transaction.atomic():
                run = AttendancePenaltyRun.objects.create(
                    year=year,
                    processed_by=processed_by,
                    meetings_count=report.meetings_count,
                    members_evaluated=len(report.entries),
                    members_penalized=len(penalized),
                    total_penalty=sum((e.penalty for e in penalized), Decimal('0.00')),
                )
                now = timezone.now()
                for entry in penalized:
                    User.objects.filter(pk=entry.user_id).update(
                        pending_dues=F('pending_dues') + entry.penalty,
                        attendance_warned=True,
                        attendance_warned_at=now,
                    )
        except IntegrityError:
            raise ConflictError(f"Attendance penalties for {year} have already been applied")

        logger.info(
            "Attendance penalties applied",
            extra={
                'year': year,
                'members_evaluated': run.members_evaluated,
                'members_penalized': run.members_penalized,
                'total_penalty': str(run.total_penalty),
            },
        )
        return report, run

    @staticmethod
    def send_warnings(year):
        report = AttendanceService.evaluate(year)
        if not report.evaluable:
            raise ValidationError({'year': f"No meetings were held in {year}; attendance cannot be evaluated"})

        threshold = penalty_threshold()
        users = User.objects.in_bulk([e.user_id for e in report.entries])
        results = []
        for entry in report.entries:
            below = entry.attendance_rate < threshold
            sent = False
            if below:
                user = users[entry.user_id]
                if user.email:
                    sent = bool(send_attendance_warning_email(user, year, entry.attendance_rate, threshold))
                user.mark_attendance_warned()
            results.append({
                'user_id': entry.user_id,
                'name': entry.name,
                'attendance_rate': entry.attendance_rate,
                'warning_sent': sent,
            })

        logger.info(
            "Attendance warnings sent",
            extra={'year': year, 'sent': sum(1 for r in results if r['warning_sent'])},
        )
        return results

    @staticmethod
    def mark_attendance(event, rows):
        """
        Record presence for a list of {user_id, present} rows.

        Users without an attendee row for the event get one.
        """
        updated = []
        with transaction.atomic():
            for row in rows:
                status = AttendanceStatus.PRESENT if row['present'] else AttendanceStatus.ABSENT
                attendee, _ = EventAttendee.objects.update_or_create(
                    event=event,
                    user_id=row['user_id'],
                    defaults={'status': status, 'is_deleted': False, 'deleted_at': None},
                )
                updated.append(attendee)
        logger.info("Attendance updated", extra={'event_id': event.pk, 'rows': len(updated)})
        return updated

    @staticmethod
    def export_attendance_csv(event):
        attendees = event.attendees.filter(is_deleted=False).select_related('user').order_by('registered_at', 'id')
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_HEADERS)
        for attendee in attendees:
            writer.writerow([
                attendee.user.full_name,
                attendee.user.email or '',
                attendee.status,
                timezone.localtime(attendee.registered_at).date().isoformat(),
            ])
        return buffer.getvalue()
