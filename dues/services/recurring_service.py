import logging

from django.db import transaction
from django.utils import timezone

from common.enums import DuePaymentStatus
from common.exceptions import ConflictError, ValidationError
from dues.models import Due
from dues.services.assignment_service import DueAssignmentService

logger = logging.getLogger(__name__)


class RecurringDueService:
    """Instantiates the next period of recurring dues without touching the paid one."""

    @staticmethod
    def instantiate_next(due, assigned_by=None):
        if not due.is_recurring:
            raise ValidationError({'is_recurring': 'Due is not recurring'})
        if not due.next_due_date:
            raise ValidationError({'next_due_date': 'Recurring due has no next due date'})
        if Due.objects.filter(previous_due=due).exists():
            raise ConflictError('The next period of this due has already been created')
        if due.due_type_id:
            DueAssignmentService.check_due_type(due.due_type)

        following = None
        if not (due.due_type_id and due.due_type.is_recurring):
            # No period to derive from; repeat the gap between the two dates
            following = due.next_due_date + (due.next_due_date - due.due_date)

        with transaction.atomic():
            next_due = DueAssignmentService.create_due(
                due.pharmacy,
                due.due_type,
                due.next_due_date,
                due.amount,
                due.title,
                due.description,
                due.assignment_type,
                assigned_by or due.assigned_by,
                True,
                following,
                previous_due=due,
            )

        logger.info("Recurring due instantiated", extra={'due_id': next_due.pk, 'previous_due_id': due.pk})
        return next_due

    @staticmethod
    def generate_due(today=None):
        """
        Create the next period for every paid recurring due whose next date has come.

        Returns:
            dict: created due ids and per-due failures
        """
        today = today or timezone.localdate()
        candidates = Due.objects.filter(
            is_deleted=False,
            is_recurring=True,
            payment_status=DuePaymentStatus.PAID,
            next_due_date__isnull=False,
            next_due_date__lte=today,
            next_due__isnull=True,
        ).select_related('pharmacy', 'due_type', 'assigned_by')

        created, skipped = [], []
        for due in candidates:
            try:
                created.append(RecurringDueService.instantiate_next(due).pk)
            except (ConflictError, ValidationError) as exc:
                skipped.append({'due_id': due.pk, 'error': str(exc.detail)})

        logger.info(
            "Recurring dues generated",
            extra={'created': len(created), 'skipped': len(skipped), 'as_of': str(today)},
        )
        return {'created': created, 'skipped': skipped}
