from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from common.enums import DuePaymentStatus, PaymentMethod, SubmissionStatus
from common.exceptions import StateError, ValidationError
from dues.models import PaymentSubmission
from dues.services.payment_service import PaymentService
from tests.factories import AdminFactory, DueFactory, PaymentSubmissionFactory

RECEIPT = "https://files.example.com/receipts/r-1.jpg"


class PaymentSubmissionTests(TestCase):

    def setUp(self):
        self.admin = AdminFactory()
        self.due = DueFactory(amount=Decimal('5000.00'))
        self.owner = self.due.pharmacy.owner

    def submit(self, amount):
        return PaymentService.submit_payment(
            self.due, amount, PaymentMethod.BANK_TRANSFER, RECEIPT, self.owner,
        )

    def test_submission_is_pending_and_leaves_ledger_alone(self):
        payment = self.submit(Decimal('2000'))

        self.assertEqual(payment.status, SubmissionStatus.PENDING)
        self.assertEqual(payment.pharmacy, self.due.pharmacy)
        self.due.refresh_from_db()
        self.assertEqual(self.due.amount_paid, Decimal('0.00'))
        self.assertEqual(self.due.balance, Decimal('5000.00'))

    def test_amount_above_balance_is_rejected_and_due_unchanged(self):
        before = (self.due.total_amount, self.due.amount_paid, self.due.balance, self.due.version)

        with self.assertRaises(ValidationError):
            self.submit(Decimal('5000.01'))

        self.due.refresh_from_db()
        self.assertEqual((self.due.total_amount, self.due.amount_paid, self.due.balance, self.due.version), before)
        self.assertFalse(PaymentSubmission.objects.exists())

    def test_non_positive_amount_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.submit(Decimal('0'))

    def test_receipt_is_required(self):
        with self.assertRaises(ValidationError):
            PaymentService.submit_payment(self.due, Decimal('10'), PaymentMethod.CASH, '', self.owner)

    def test_unknown_method_is_rejected(self):
        with self.assertRaises(ValidationError):
            PaymentService.submit_payment(self.due, Decimal('10'), 'barter', RECEIPT, self.owner)


class PaymentReviewTests(TestCase):

    def setUp(self):
        self.admin = AdminFactory()
        self.due = DueFactory(amount=Decimal('5000.00'))

    def test_approval_credits_due(self):
        payment = PaymentSubmissionFactory(due=self.due, amount=Decimal('2000.00'))

        approved = PaymentService.approve_payment(payment, self.admin)

        self.assertEqual(approved.status, SubmissionStatus.APPROVED)
        self.assertEqual(approved.approved_by, self.admin)
        self.assertIsNotNone(approved.approved_at)
        self.assertEqual(approved.rejection_reason, '')
        self.due.refresh_from_db()
        self.assertEqual(self.due.amount_paid, Decimal('2000.00'))
        self.assertEqual(self.due.balance, Decimal('3000.00'))
        self.assertEqual(self.due.payment_status, DuePaymentStatus.PARTIALLY_PAID)

    def test_full_payment_marks_due_paid(self):
        payment = PaymentSubmissionFactory(due=self.due, amount=Decimal('5000.00'))
        PaymentService.approve_payment(payment, self.admin)
        self.due.refresh_from_db()
        self.assertEqual(self.due.balance, Decimal('0.00'))
        self.assertEqual(self.due.payment_status, DuePaymentStatus.PAID)

    def test_second_approval_fails_without_double_credit(self):
        payment = PaymentSubmissionFactory(due=self.due, amount=Decimal('1500.00'))
        PaymentService.approve_payment(payment, self.admin)

        with self.assertRaises(StateError):
            PaymentService.approve_payment(payment, self.admin)

        self.due.refresh_from_db()
        self.assertEqual(self.due.amount_paid, Decimal('1500.00'))

    def test_approval_rechecks_balance(self):
        first = PaymentSubmissionFactory(due=self.due, amount=Decimal('4000.00'))
        second = PaymentSubmissionFactory(due=self.due, amount=Decimal('4000.00'))
        PaymentService.approve_payment(first, self.admin)

        with self.assertRaises(ValidationError):
            PaymentService.approve_payment(second, self.admin)

        second.refresh_from_db()
        self.assertEqual(second.status, SubmissionStatus.PENDING)
        self.due.refresh_from_db()
        self.assertEqual(self.due.balance, Decimal('1000.00'))

    def test_rejection_is_terminal_and_has_no_ledger_effect(self):
        payment = PaymentSubmissionFactory(due=self.due, amount=Decimal('1000.00'))

        rejected = PaymentService.reject_payment(payment, self.admin, 'Receipt does not match')

        self.assertEqual(rejected.status, SubmissionStatus.REJECTED)
        self.assertEqual(rejected.rejection_reason, 'Receipt does not match')
        self.assertIsNone(rejected.approved_at)
        with self.assertRaises(StateError):
            PaymentService.approve_payment(payment, self.admin)
        with self.assertRaises(StateError):
            PaymentService.reject_payment(payment, self.admin, 'Again')
        self.due.refresh_from_db()
        self.assertEqual(self.due.amount_paid, Decimal('0.00'))

    def test_rejection_requires_reason(self):
        payment = PaymentSubmissionFactory(due=self.due)
        with self.assertRaises(ValidationError):
            PaymentService.reject_payment(payment, self.admin, '')

    def test_database_refuses_inconsistent_review_state(self):
        payment = PaymentSubmissionFactory(due=self.due)
        payment.status = SubmissionStatus.APPROVED
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                payment.save()

        payment.refresh_from_db()
        payment.status = SubmissionStatus.REJECTED
        payment.approved_at = timezone.now()
        payment.rejection_reason = 'No'
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                payment.save()
