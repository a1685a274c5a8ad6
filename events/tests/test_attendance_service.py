import datetime
from decimal import Decimal
from io import StringIO

from django.core import mail
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone

from common.enums import AttendanceStatus, EventType, UserRole
from common.exceptions import ConflictError, ValidationError
from events.models import AttendancePenaltyRun, EventAttendee
from events.services.attendance_service import AttendanceService
from tests.factories import AttendeeFactory, EventFactory, UserFactory


def meeting_on(month, **kwargs):
    start = timezone.make_aware(datetime.datetime(2024, month, 5, 10, 0))
    return EventFactory(start_date=start, end_date=start + datetime.timedelta(hours=2), **kwargs)


class AttendanceEvaluationTests(TestCase):

    def setUp(self):
        self.meetings = [meeting_on(month) for month in (2, 5, 8, 11)]
        self.absentee = UserFactory(annual_dues=Decimal('10000.00'))
        self.regular = UserFactory(annual_dues=Decimal('10000.00'))
        AttendeeFactory(event=self.meetings[0], user=self.absentee, status=AttendanceStatus.PRESENT)
        for meeting in self.meetings[:3]:
            AttendeeFactory(event=meeting, user=self.regular, status=AttendanceStatus.PRESENT)

    def entries(self, report):
        return {e.user_id: e for e in report.entries}

    def test_rates_and_penalties(self):
        report = AttendanceService.evaluate(2024)

        self.assertTrue(report.evaluable)
        self.assertEqual(report.meetings_count, 4)
        entries = self.entries(report)
        self.assertEqual(entries[self.absentee.pk].attendance_rate, Decimal('0.25'))
        self.assertEqual(entries[self.absentee.pk].penalty, Decimal('5000.00'))
        self.assertEqual(entries[self.regular.pk].attendance_rate, Decimal('0.75'))
        self.assertEqual(entries[self.regular.pk].penalty, Decimal('0'))

    def test_only_meetings_of_the_year_count(self):
        start = timezone.make_aware(datetime.datetime(2024, 6, 1, 10, 0))
        workshop = EventFactory(event_type=EventType.WORKSHOP, start_date=start, end_date=start)
        AttendeeFactory(event=workshop, user=self.absentee, status=AttendanceStatus.PRESENT)
        last_year = timezone.make_aware(datetime.datetime(2023, 6, 1, 10, 0))
        old = EventFactory(start_date=last_year, end_date=last_year)
        AttendeeFactory(event=old, user=self.absentee, status=AttendanceStatus.PRESENT)

        report = AttendanceService.evaluate(2024)

        self.assertEqual(report.meetings_count, 4)
        self.assertEqual(self.entries(report)[self.absentee.pk].present_count, 1)

    def test_registered_but_not_present_does_not_count(self):
        AttendeeFactory(event=self.meetings[1], user=self.absentee, status=AttendanceStatus.REGISTERED)
        report = AttendanceService.evaluate(2024)
        self.assertEqual(self.entries(report)[self.absentee.pk].present_count, 1)

    def test_deleted_attendance_rows_do_not_count(self):
        AttendeeFactory(event=self.meetings[1], user=self.absentee, status=AttendanceStatus.PRESENT).soft_delete()
        report = AttendanceService.evaluate(2024)
        self.assertEqual(self.entries(report)[self.absentee.pk].present_count, 1)
        self.assertEqual(self.entries(report)[self.absentee.pk].penalty, Decimal('5000.00'))

    def test_non_members_are_not_evaluated(self):
        admin = UserFactory(role=UserRole.ADMIN)
        report = AttendanceService.evaluate(2024)
        self.assertNotIn(admin.pk, self.entries(report))

    def test_unset_annual_dues_means_zero_penalty(self):
        lazy = UserFactory()
        report = AttendanceService.evaluate(2024)
        self.assertEqual(self.entries(report)[lazy.pk].attendance_rate, Decimal('0'))
        self.assertEqual(self.entries(report)[lazy.pk].penalty, Decimal('0.00'))

    def test_year_without_meetings_is_not_evaluable(self):
        report = AttendanceService.evaluate(2030)
        self.assertFalse(report.evaluable)
        self.assertEqual(report.entries, [])
        with self.assertRaises(ValidationError):
            AttendanceService.calculate_penalties(2030)
        self.assertFalse(AttendancePenaltyRun.objects.exists())

    @override_settings(ATTENDANCE_PENALTY_THRESHOLD='0.8')
    def test_threshold_is_configurable(self):
        report = AttendanceService.evaluate(2024)
        self.assertEqual(self.entries(report)[self.regular.pk].penalty, Decimal('5000.00'))


class CalculatePenaltiesTests(TestCase):

    def setUp(self):
        self.meetings = [meeting_on(month) for month in (3, 9)]
        self.member = UserFactory(annual_dues=Decimal('8000.00'), pending_dues=Decimal('1000.00'))
        self.good = UserFactory(annual_dues=Decimal('8000.00'))
        for meeting in self.meetings:
            AttendeeFactory(event=meeting, user=self.good, status=AttendanceStatus.PRESENT)

    def test_penalty_is_added_to_pending_dues(self):
        report, run = AttendanceService.calculate_penalties(2024)

        self.member.refresh_from_db()
        self.good.refresh_from_db()
        self.assertEqual(self.member.pending_dues, Decimal('5000.00'))
        self.assertTrue(self.member.attendance_warned)
        self.assertEqual(self.good.pending_dues, Decimal('0.00'))
        self.assertFalse(self.good.attendance_warned)
        self.assertEqual(run.members_penalized, 1)
        self.assertEqual(run.total_penalty, Decimal('4000.00'))

    def test_second_run_for_same_year_is_refused(self):
        AttendanceService.calculate_penalties(2024)

        with self.assertRaises(ConflictError):
            AttendanceService.calculate_penalties(2024)

        self.member.refresh_from_db()
        self.assertEqual(self.member.pending_dues, Decimal('5000.00'))

    def test_management_command(self):
        out = StringIO()
        call_command('calculate_attendance_penalties', '2024', stdout=out)
        self.assertIn('Penalized 1 of 2 members', out.getvalue())
        self.assertTrue(AttendancePenaltyRun.objects.filter(year=2024).exists())


class WarningsAndAttendanceTests(TestCase):

    def setUp(self):
        self.meeting = meeting_on(4)
        self.member = UserFactory(email='absent@example.com')
        self.present = UserFactory()
        AttendeeFactory(event=self.meeting, user=self.present, status=AttendanceStatus.PRESENT)

    def test_warnings_are_emailed_to_low_attendance_members(self):
        results = {r['user_id']: r for r in AttendanceService.send_warnings(2024)}

        self.assertTrue(results[self.member.pk]['warning_sent'])
        self.assertFalse(results[self.present.pk]['warning_sent'])
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['absent@example.com'])
        self.member.refresh_from_db()
        self.assertTrue(self.member.attendance_warned)
        self.assertIsNotNone(self.member.attendance_warned_at)

    def test_mark_attendance_upserts_rows(self):
        AttendanceService.mark_attendance(self.meeting, [
            {'user_id': self.member.pk, 'present': True},
            {'user_id': self.present.pk, 'present': False},
        ])

        statuses = dict(EventAttendee.objects.filter(event=self.meeting).values_list('user_id', 'status'))
        self.assertEqual(statuses, {
            self.member.pk: AttendanceStatus.PRESENT,
            self.present.pk: AttendanceStatus.ABSENT,
        })

    def test_marking_revives_a_deleted_row(self):
        AttendeeFactory(event=self.meeting, user=self.member, status=AttendanceStatus.ABSENT).soft_delete()

        AttendanceService.mark_attendance(self.meeting, [{'user_id': self.member.pk, 'present': True}])

        attendee = EventAttendee.objects.get(event=self.meeting, user=self.member)
        self.assertFalse(attendee.is_deleted)
        self.assertEqual(attendee.status, AttendanceStatus.PRESENT)

    def test_csv_export(self):
        csv_text = AttendanceService.export_attendance_csv(self.meeting)
        lines = csv_text.strip().splitlines()
        self.assertEqual(lines[0], 'Name,Email,Status,Registration Date')
        self.assertEqual(len(lines), 2)
        self.assertIn(self.present.email, lines[1])
        self.assertIn('present', lines[1])
