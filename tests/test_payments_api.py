# tests/test_payments_api.py
from decimal import Decimal

import pytest

from common.enums import DuePaymentStatus, SubmissionStatus
from tests.factories import DueFactory, PaymentSubmissionFactory

PAYMENTS_URL = '/api/payments/'


@pytest.mark.django_db
class TestPaymentReview:

    def test_approve_credits_due(self, admin_client, admin_user):
        due = DueFactory(amount=Decimal('5000.00'))
        payment = PaymentSubmissionFactory(due=due, amount=Decimal('5000.00'))

        response = admin_client.post(f'{PAYMENTS_URL}{payment.pk}/approve/')

        assert response.status_code == 200
        assert response.data['status'] == SubmissionStatus.APPROVED
        assert response.data['approved_by']['id'] == admin_user.pk
        due.refresh_from_db()
        assert due.amount_paid == Decimal('5000.00')
        assert due.payment_status == DuePaymentStatus.PAID

    def test_second_approve_is_invalid_state(self, admin_client):
        payment = PaymentSubmissionFactory(amount=Decimal('100.00'))
        admin_client.post(f'{PAYMENTS_URL}{payment.pk}/approve/')

        response = admin_client.post(f'{PAYMENTS_URL}{payment.pk}/approve/')

        assert response.status_code == 400
        payment.due.refresh_from_db()
        assert payment.due.amount_paid == Decimal('100.00')

    def test_reject_requires_reason(self, admin_client):
        payment = PaymentSubmissionFactory()
        response = admin_client.post(f'{PAYMENTS_URL}{payment.pk}/reject/', {}, format='json')
        assert response.status_code == 400

    def test_reject(self, admin_client):
        payment = PaymentSubmissionFactory()
        response = admin_client.post(
            f'{PAYMENTS_URL}{payment.pk}/reject/', {'reason': 'Receipt unreadable'}, format='json',
        )
        assert response.status_code == 200
        assert response.data['status'] == SubmissionStatus.REJECTED
        assert response.data['rejection_reason'] == 'Receipt unreadable'
        assert response.data['approved_at'] is None

    def test_member_cannot_approve_own_payment(self, member_client, pharmacy):
        payment = PaymentSubmissionFactory(due=DueFactory(pharmacy=pharmacy))
        response = member_client.post(f'{PAYMENTS_URL}{payment.pk}/approve/')
        assert response.status_code == 403

    def test_unknown_payment_is_404(self, admin_client):
        response = admin_client.post(f'{PAYMENTS_URL}999999/approve/')
        assert response.status_code == 404


@pytest.mark.django_db
class TestPaymentListing:

    def test_pending_queue(self, admin_client):
        pending = PaymentSubmissionFactory()
        PaymentSubmissionFactory(status=SubmissionStatus.REJECTED, rejection_reason='Duplicate')

        response = admin_client.get(f'{PAYMENTS_URL}pending/')

        assert response.status_code == 200
        assert [p['id'] for p in response.data['results']] == [pending.pk]

    def test_filter_by_status(self, admin_client):
        PaymentSubmissionFactory()
        PaymentSubmissionFactory(status=SubmissionStatus.REJECTED, rejection_reason='Duplicate')
        response = admin_client.get(PAYMENTS_URL, {'status': 'rejected'})
        assert response.data['count'] == 1

    def test_member_sees_own_submissions(self, member_client, pharmacy):
        mine = PaymentSubmissionFactory(due=DueFactory(pharmacy=pharmacy))
        PaymentSubmissionFactory()

        response = member_client.get(PAYMENTS_URL)

        assert [p['id'] for p in response.data['results']] == [mine.pk]
