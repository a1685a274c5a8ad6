import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from common.enums import PaymentMethod, SubmissionStatus
from common.exceptions import StateError, ValidationError
from dues.models import PaymentSubmission
from dues.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Review workflow for payment submissions.

    pending --approve--> approved (credits the due)
    pending --reject---> rejected (no ledger effect)
    """

    @staticmethod
    def submit_payment(due, amount, payment_method, receipt_url, submitted_by, payment_reference=''):
        """
        Record a claimed payment against a due.

        The amount is checked against the balance at submission time; it is
        checked again on approval since other payments may land in between.

        Returns:
            PaymentSubmission in pending state
        """
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, TypeError):
            raise ValidationError({'amount': 'A valid payment amount is required'})
        if amount <= 0:
            raise ValidationError({'amount': 'Payment amount must be greater than zero'})
        if payment_method not in PaymentMethod.values:
            raise ValidationError({'payment_method': f"Unsupported payment method '{payment_method}'"})
        if not receipt_url:
            raise ValidationError({'receipt_url': 'A payment receipt is required'})

        with transaction.atomic():
            locked = LedgerService.lock(due.pk)
            if amount > locked.balance:
                raise ValidationError({
                    'amount': f"Payment amount {amount} exceeds the outstanding balance {locked.balance}"
                })
            payment = PaymentSubmission.objects.create(
                due=locked,
                pharmacy=locked.pharmacy,
                amount=amount,
                payment_method=payment_method,
                payment_reference=payment_reference or '',
                receipt_url=receipt_url,
                submitted_by=submitted_by,
            )

        logger.info(
            "Payment submitted",
            extra={'payment_id': payment.pk, 'due_id': locked.pk, 'amount': str(amount)},
        )
        return payment

    @staticmethod
    def _lock_pending(payment):
        locked = PaymentSubmission.objects.select_for_update().get(pk=payment.pk)
        if locked.status != SubmissionStatus.PENDING:
            raise StateError(f"Payment submission has already been {locked.status}")
        return locked

    @staticmethod
    def approve_payment(payment, approved_by):
        with transaction.atomic():
            locked = PaymentService._lock_pending(payment)
            due = LedgerService.lock(locked.due_id)
            if locked.amount > due.balance:
                raise ValidationError({
                    'amount': f"Payment amount {locked.amount} exceeds the outstanding balance {due.balance}"
                })
            locked.status = SubmissionStatus.APPROVED
            locked.approved_by = approved_by
            locked.approved_at = timezone.now()
            locked.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
            LedgerService.recompute(due)

        logger.info(
            "Payment approved",
            extra={'payment_id': locked.pk, 'due_id': due.pk, 'balance': str(due.balance)},
        )
        return locked

    @staticmethod
    def reject_payment(payment, rejected_by, reason):
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError({'reason': 'A rejection reason is required'})

        with transaction.atomic():
            locked = PaymentService._lock_pending(payment)
            locked.status = SubmissionStatus.REJECTED
            locked.rejected_by = rejected_by
            locked.rejected_at = timezone.now()
            locked.rejection_reason = reason
            locked.save(update_fields=['status', 'rejected_by', 'rejected_at', 'rejection_reason', 'updated_at'])

        logger.info("Payment rejected", extra={'payment_id': locked.pk, 'due_id': locked.due_id})
        return locked
