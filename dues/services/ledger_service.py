import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db.models import F, Sum
from django.utils import timezone

from common.enums import DuePaymentStatus, SubmissionStatus
from common.exceptions import ValidationError
from dues.models import ZERO, Due

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    total_amount: Decimal
    amount_paid: Decimal
    balance: Decimal
    payment_status: str


class LedgerService:
    """
    Balance reconciliation for dues.

    A due's derived fields are always rebuilt from its base amount, its
    penalties and its approved payment submissions. Nothing is accumulated
    incrementally, so recomputing twice gives the same answer.
    """

    @staticmethod
    def compute_status(amount_paid, total_amount, due_date, today):
        if total_amount - amount_paid <= 0:
            return DuePaymentStatus.PAID
        if today > due_date:
            return DuePaymentStatus.OVERDUE
        if amount_paid > 0:
            return DuePaymentStatus.PARTIALLY_PAID
        return DuePaymentStatus.PENDING

    @staticmethod
    def compute_snapshot(amount, penalty_amounts, approved_amounts, due_date, today):
        """
        Pure reconciliation of one due.

        Args:
            amount: base amount of the due
            penalty_amounts: iterable of penalty amounts
            approved_amounts: iterable of approved payment amounts
            due_date: the due's date
            today: reference date for the overdue rule

        Returns:
            LedgerSnapshot
        """
        total_amount = Decimal(amount) + sum((Decimal(p) for p in penalty_amounts), ZERO)
        amount_paid = sum((Decimal(p) for p in approved_amounts), ZERO)
        if amount_paid < 0:
            raise ValidationError({'amount_paid': 'Approved payments cannot be negative'})
        balance = total_amount - amount_paid
        if balance < 0:
            raise ValidationError({'amount': 'Approved payments exceed the total amount of the due'})
        status = LedgerService.compute_status(amount_paid, total_amount, due_date, today)
        return LedgerSnapshot(
            total_amount=total_amount,
            amount_paid=amount_paid,
            balance=balance,
            payment_status=status,
        )

    @staticmethod
    def snapshot_for(due, today=None):
        today = today or timezone.localdate()
        penalties = due.penalties.values_list('amount', flat=True)
        approved = due.payments.filter(status=SubmissionStatus.APPROVED).values_list('amount', flat=True)
        return LedgerService.compute_snapshot(due.amount, penalties, approved, due.due_date, today)

    @staticmethod
    def lock(due_id):
        """Re-read a due with a row lock. Must be called inside transaction.atomic."""
        return Due.objects.select_for_update().select_related('pharmacy', 'due_type').get(pk=due_id)

    @staticmethod
    def recompute(due, today=None):
        """Write the reconciled fields back to the due and bump its version."""
        snapshot = LedgerService.snapshot_for(due, today=today)
        due.total_amount = snapshot.total_amount
        due.amount_paid = snapshot.amount_paid
        due.balance = snapshot.balance
        due.payment_status = snapshot.payment_status
        due.version = F('version') + 1
        due.save(update_fields=[
            'total_amount', 'amount_paid', 'balance', 'payment_status', 'version', 'updated_at',
        ])
        due.refresh_from_db(fields=['version'])
        return snapshot

    @staticmethod
    def refresh_statuses(today=None):
        """
        Re-derive payment_status for every open due.

        Overdue depends on the calendar, so stored statuses go stale without
        any write to the due itself.

        Returns:
            int: number of dues whose status changed
        """
        today = today or timezone.localdate()
        changed = 0
        open_dues = Due.objects.filter(is_deleted=False).exclude(payment_status=DuePaymentStatus.PAID)
        for due in open_dues.iterator():
            status = LedgerService.compute_status(due.amount_paid, due.total_amount, due.due_date, today)
            if status != due.payment_status:
                Due.objects.filter(pk=due.pk).update(payment_status=status)
                changed += 1
        logger.info("Refreshed due statuses", extra={'changed': changed, 'as_of': str(today)})
        return changed

    @staticmethod
    def penalty_total(due):
        return due.penalties.aggregate(total=Sum('amount'))['total'] or ZERO
