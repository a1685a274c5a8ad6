import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction

from common.exceptions import ValidationError
from dues.models import Penalty
from dues.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


class PenaltyService:

    @staticmethod
    def add_penalty(due, amount, reason, added_by):
        """
        Append a penalty to a due and reconcile it.

        There is no inverse operation; penalties are never edited or removed.

        Args:
            due: Due instance (or anything with a pk)
            amount: positive penalty amount
            reason: non-empty reason
            added_by: User adding the penalty

        Returns:
            Penalty instance
        """
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, TypeError):
            raise ValidationError({'amount': 'A valid penalty amount is required'})
        if amount <= 0:
            raise ValidationError({'amount': 'Penalty amount must be greater than zero'})
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError({'reason': 'Penalty reason is required'})

        with transaction.atomic():
            locked = LedgerService.lock(due.pk)
            penalty = Penalty.objects.create(
                due=locked,
                amount=amount,
                reason=reason,
                added_by=added_by,
            )
            LedgerService.recompute(locked)

        logger.info(
            "Penalty added",
            extra={'due_id': locked.pk, 'amount': str(amount), 'added_by': getattr(added_by, 'pk', None)},
        )
        return penalty
