import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from dateutil.relativedelta import relativedelta
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import APIException

from common.enums import DueAssignmentType, RecurringPeriod, RegistrationStatus
from common.exceptions import ConflictError, ValidationError
from dues.models import Due, billing_period
from pharmacies.models import Pharmacy

logger = logging.getLogger(__name__)

PERIOD_DELTAS = {
    RecurringPeriod.MONTHLY: relativedelta(months=1),
    RecurringPeriod.QUARTERLY: relativedelta(months=3),
    RecurringPeriod.SEMI_ANNUAL: relativedelta(months=6),
    RecurringPeriod.ANNUAL: relativedelta(years=1),
}

FILTER_LOOKUPS = {
    'registration_status': 'registration_status__iexact',
    'location': 'location__icontains',
    'ward_area': 'ward_area__iexact',
    'registration_year': 'registration_date__year',
}


def next_period_date(due_date, recurring_period):
    delta = PERIOD_DELTAS.get(recurring_period)
    if delta is None:
        return None
    return due_date + delta


@dataclass
class AssignmentResult:
    pharmacy_id: int
    success: bool
    due_id: int = None
    error: str = ''
    code: str = ''

    def as_dict(self):
        return {
            'pharmacy_id': self.pharmacy_id,
            'success': self.success,
            'due_id': self.due_id,
            'error': self.error,
            'code': self.code,
        }


@dataclass
class BulkAssignmentReport:
    due_type_id: int
    results: list = field(default_factory=list)

    @property
    def created(self):
        return [r for r in self.results if r.success]

    @property
    def failed(self):
        return [r for r in self.results if not r.success]

    def as_dict(self):
        return {
            'due_type_id': self.due_type_id,
            'total': len(self.results),
            'created_count': len(self.created),
            'failed_count': len(self.failed),
            'results': [r.as_dict() for r in self.results],
        }


class DueAssignmentService:
    """Creates dues for pharmacies, one at a time or as a best-effort batch."""

    @staticmethod
    def resolve_targets(pharmacy_ids=None, filters=None):
        """
        Pick the pharmacies a bulk assignment applies to.

        An explicit id selection wins over filter criteria. With neither, every
        active pharmacy is targeted.
        """
        qs = Pharmacy.objects.filter(is_deleted=False)
        if pharmacy_ids:
            return qs.filter(pk__in=pharmacy_ids).order_by('pk')

        filters = {k: v for k, v in (filters or {}).items() if v not in (None, '')}
        unknown = set(filters) - set(FILTER_LOOKUPS)
        if unknown:
            raise ValidationError({'filters': f"Unknown filter(s): {', '.join(sorted(unknown))}"})
        if not filters:
            return qs.filter(registration_status=RegistrationStatus.ACTIVE).order_by('pk')
        lookups = {FILTER_LOOKUPS[key]: value for key, value in filters.items()}
        return qs.filter(**lookups).order_by('pk')

    @staticmethod
    def check_due_type(due_type):
        if due_type is None:
            raise ValidationError({'due_type': 'A due type is required'})
        if not due_type.is_active:
            raise ValidationError({'due_type': f"Due type '{due_type.name}' is inactive"})

    @staticmethod
    def _resolve_amount(amount, due_type):
        if amount in (None, ''):
            if due_type is None:
                raise ValidationError({'amount': 'Amount is required for dues without a due type'})
            return due_type.default_amount
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, TypeError):
            raise ValidationError({'amount': 'A valid amount is required'})
        if amount < 0:
            raise ValidationError({'amount': 'Amount cannot be negative'})
        return amount

    @staticmethod
    def _ensure_unique(pharmacy, due_type, due_date):
        if due_type is None:
            return
        period = billing_period(due_date, due_type.recurring_period if due_type.is_recurring else None)
        exists = Due.objects.filter(
            pharmacy=pharmacy, due_type=due_type, period=period, is_deleted=False,
        ).exists()
        if exists:
            raise ConflictError(
                f"{pharmacy.name} already has a '{due_type.name}' due for {period}"
            )

    @staticmethod
    def resolve_next_due_date(due_type, due_date, is_recurring, next_due_date):
        if not is_recurring:
            return None
        if next_due_date is None and due_type is not None and due_type.is_recurring:
            next_due_date = next_period_date(due_date, due_type.recurring_period)
        if next_due_date is None:
            raise ValidationError({'next_due_date': 'Recurring dues need a next due date'})
        return next_due_date

    @staticmethod
    def create_due(pharmacy, due_type, due_date, amount, title, description, assignment_type,
                   assigned_by, is_recurring, next_due_date, previous_due=None):
        DueAssignmentService._ensure_unique(pharmacy, due_type, due_date)
        next_due_date = DueAssignmentService.resolve_next_due_date(due_type, due_date, is_recurring, next_due_date)
        try:
            with transaction.atomic():
                return Due.objects.create(
                    pharmacy=pharmacy,
                    due_type=due_type,
                    title=title,
                    description=description or '',
                    amount=amount,
                    due_date=due_date,
                    assignment_type=assignment_type,
                    assigned_by=assigned_by,
                    assigned_at=timezone.now(),
                    is_recurring=bool(is_recurring),
                    next_due_date=next_due_date,
                    previous_due=previous_due,
                )
        except IntegrityError:
            # Lost a race with a concurrent assignment for the same period
            raise ConflictError(f"{pharmacy.name} already has a due for this period")

    @staticmethod
    def assign_individual(pharmacy, assigned_by, due_date, due_type=None, amount=None, title=None,
                          description='', is_recurring=None, next_due_date=None):
        if due_type is not None:
            DueAssignmentService.check_due_type(due_type)
        amount = DueAssignmentService._resolve_amount(amount, due_type)
        title = title or (due_type.name if due_type else None)
        if not title:
            raise ValidationError({'title': 'Title is required for dues without a due type'})
        if is_recurring is None:
            is_recurring = bool(due_type and due_type.is_recurring)

        due = DueAssignmentService.create_due(
            pharmacy, due_type, due_date, amount, title, description,
            DueAssignmentType.INDIVIDUAL, assigned_by, is_recurring, next_due_date,
        )
        logger.info(
            "Due assigned",
            extra={'due_id': due.pk, 'pharmacy_id': pharmacy.pk, 'due_type_id': getattr(due_type, 'pk', None)},
        )
        return due

    @staticmethod
    def bulk_assign(due_type, due_date, assigned_by, pharmacy_ids=None, filters=None, amount=None,
                    title=None, description='', is_recurring=None):
        """
        Fan one due type out to many pharmacies.

        Each pharmacy is written in its own savepoint; a failure for one
        pharmacy is recorded in the report and the batch carries on.

        Returns:
            BulkAssignmentReport
        """
        DueAssignmentService.check_due_type(due_type)
        amount = DueAssignmentService._resolve_amount(amount, due_type)
        title = title or due_type.name
        if is_recurring is None:
            is_recurring = due_type.is_recurring
        DueAssignmentService.resolve_next_due_date(due_type, due_date, is_recurring, None)

        targets = list(DueAssignmentService.resolve_targets(pharmacy_ids, filters))
        report = BulkAssignmentReport(due_type_id=due_type.pk)

        if pharmacy_ids:
            found = {p.pk for p in targets}
            for missing in sorted(set(int(pk) for pk in pharmacy_ids) - found):
                report.results.append(AssignmentResult(
                    pharmacy_id=missing, success=False,
                    error=f"Pharmacy not found with id of {missing}", code='not_found',
                ))

        for pharmacy in targets:
            try:
                due = DueAssignmentService.create_due(
                    pharmacy, due_type, due_date, amount, title, description,
                    DueAssignmentType.BULK, assigned_by, is_recurring, None,
                )
            except APIException as exc:
                report.results.append(AssignmentResult(
                    pharmacy_id=pharmacy.pk, success=False,
                    error=str(exc.detail), code=exc.get_codes() if isinstance(exc.get_codes(), str) else 'invalid',
                ))
                continue
            report.results.append(AssignmentResult(pharmacy_id=pharmacy.pk, success=True, due_id=due.pk))

        logger.info(
            "Bulk due assignment finished",
            extra={
                'due_type_id': due_type.pk,
                'created': len(report.created),
                'failed': len(report.failed),
            },
        )
        return report
