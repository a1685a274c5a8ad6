# tests/test_events_api.py
import datetime
from decimal import Decimal

import pytest
from django.core import mail
from django.utils import timezone

from common.enums import AttendanceStatus
from events.models import AttendancePenaltyRun, EventAttendee
from tests.factories import AttendeeFactory, EventFactory, UserFactory

EVENTS_URL = '/api/events/'


@pytest.fixture
def meeting():
    return EventFactory()


@pytest.mark.django_db
class TestEventEndpoints:

    def test_secretary_creates_event(self, secretary_client):
        start = timezone.make_aware(datetime.datetime(2024, 6, 1, 9, 0))
        response = secretary_client.post(EVENTS_URL, {
            'title': 'Mid-year AGM',
            'event_type': 'meetings',
            'start_date': start.isoformat(),
            'end_date': (start + datetime.timedelta(hours=3)).isoformat(),
        }, format='json')
        assert response.status_code == 201
        assert response.data['title'] == 'Mid-year AGM'
        assert response.data['created_by']['username']

    def test_end_before_start_is_rejected(self, secretary_client):
        start = timezone.make_aware(datetime.datetime(2024, 6, 1, 9, 0))
        response = secretary_client.post(EVENTS_URL, {
            'title': 'Backwards',
            'event_type': 'meetings',
            'start_date': start.isoformat(),
            'end_date': (start - datetime.timedelta(hours=1)).isoformat(),
        }, format='json')
        assert response.status_code == 400
        assert 'end_date' in response.data['errors']

    def test_member_can_read_but_not_write(self, member_client, meeting):
        assert member_client.get(EVENTS_URL).status_code == 200
        response = member_client.patch(f'{EVENTS_URL}{meeting.pk}/', {'title': 'Hijacked'}, format='json')
        assert response.status_code == 403

    def test_filter_by_year(self, member_client, meeting):
        last_year = timezone.make_aware(datetime.datetime(2023, 3, 1, 10, 0))
        EventFactory(start_date=last_year, end_date=last_year)
        response = member_client.get(EVENTS_URL, {'year': 2024})
        assert [e['id'] for e in response.data['results']] == [meeting.pk]


@pytest.mark.django_db
class TestAttendanceEndpoints:

    def test_mark_attendance(self, secretary_client, meeting):
        present, absent = UserFactory(), UserFactory()
        response = secretary_client.post(f'{EVENTS_URL}{meeting.pk}/attendance/', {
            'attendance_data': [
                {'user_id': present.pk, 'present': True},
                {'user_id': absent.pk, 'present': False},
            ],
        }, format='json')

        assert response.status_code == 200
        assert len(response.data['attendees']) == 2
        assert EventAttendee.objects.get(event=meeting, user=present).status == AttendanceStatus.PRESENT

    def test_mark_attendance_unknown_user(self, secretary_client, meeting):
        response = secretary_client.post(f'{EVENTS_URL}{meeting.pk}/attendance/', {
            'attendance_data': [{'user_id': 999999, 'present': True}],
        }, format='json')
        assert response.status_code == 400

    def test_member_cannot_mark_attendance(self, member_client, meeting, member):
        response = member_client.post(f'{EVENTS_URL}{meeting.pk}/attendance/', {
            'attendance_data': [{'user_id': member.pk, 'present': True}],
        }, format='json')
        assert response.status_code == 403

    def test_attendees_listing(self, member_client, meeting):
        AttendeeFactory(event=meeting)
        response = member_client.get(f'{EVENTS_URL}{meeting.pk}/attendees/')
        assert response.status_code == 200
        assert len(response.data) == 1

    def test_export_csv(self, secretary_client, meeting):
        AttendeeFactory(event=meeting, status=AttendanceStatus.PRESENT)
        response = secretary_client.get(f'{EVENTS_URL}{meeting.pk}/export/')

        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/csv')
        assert 'attachment' in response['Content-Disposition']
        lines = response.content.decode().strip().splitlines()
        assert lines[0] == 'Name,Email,Status,Registration Date'
        assert len(lines) == 2


@pytest.mark.django_db
class TestAttendancePenalties:

    @pytest.fixture
    def absentee(self, meeting):
        user = UserFactory(annual_dues=Decimal('6000.00'), email='absentee@example.com')
        AttendeeFactory(event=meeting, user=user, status=AttendanceStatus.ABSENT)
        return user

    def test_report_does_not_write(self, secretary_client, absentee):
        response = secretary_client.get(f'{EVENTS_URL}attendance/report/', {'year': 2024})

        assert response.status_code == 200
        assert response.data['meetings_count'] == 1
        entry = next(e for e in response.data['entries'] if e['user_id'] == absentee.pk)
        assert entry['penalty'] == Decimal('3000.00')
        absentee.refresh_from_db()
        assert absentee.pending_dues == Decimal('0.00')

    def test_calculate_penalties_once_per_year(self, secretary_client, absentee):
        url = f'{EVENTS_URL}attendance/calculate-penalties/'

        first = secretary_client.post(url, {'year': 2024}, format='json')
        second = secretary_client.post(url, {'year': 2024}, format='json')

        assert first.status_code == 201
        assert first.data['run']['year'] == 2024
        assert second.status_code == 409
        absentee.refresh_from_db()
        assert absentee.pending_dues == Decimal('3000.00')
        assert AttendancePenaltyRun.objects.count() == 1

    def test_year_without_meetings(self, secretary_client):
        response = secretary_client.post(
            f'{EVENTS_URL}attendance/calculate-penalties/', {'year': 2031}, format='json',
        )
        assert response.status_code == 400

    def test_send_warnings(self, secretary_client, absentee):
        response = secretary_client.post(f'{EVENTS_URL}attendance/send-warnings/', {'year': 2024}, format='json')

        assert response.status_code == 200
        assert any(w['user_id'] == absentee.pk and w['warning_sent'] for w in response.data['warnings'])
        assert 'absentee@example.com' in [m.to[0] for m in mail.outbox]

    def test_runs_listing(self, secretary_client, absentee):
        secretary_client.post(f'{EVENTS_URL}attendance/calculate-penalties/', {'year': 2024}, format='json')
        response = secretary_client.get(f'{EVENTS_URL}attendance/runs/')
        assert [r['year'] for r in response.data] == [2024]

    def test_member_cannot_calculate(self, member_client, absentee):
        response = member_client.post(
            f'{EVENTS_URL}attendance/calculate-penalties/', {'year': 2024}, format='json',
        )
        assert response.status_code == 403
