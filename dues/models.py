from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from common.enums import (
    DueAssignmentType,
    DuePaymentStatus,
    PaymentMethod,
    RecurringPeriod,
    SubmissionStatus,
)
from core.models import BaseModel, SingletonBaseModel
from pharmacies.models import Pharmacy
from users.models import User

ZERO = Decimal('0.00')


def billing_period(due_date, recurring_period=None):
    """
    Key used for the one-due-per-period policy.

    Non-recurring and annual types collapse to the calendar year, so the
    policy reads as (pharmacy, due_type, year) for them.
    """
    if recurring_period == RecurringPeriod.MONTHLY:
        return f"{due_date.year}-{due_date.month:02d}"
    if recurring_period == RecurringPeriod.QUARTERLY:
        return f"{due_date.year}-Q{(due_date.month - 1) // 3 + 1}"
    if recurring_period == RecurringPeriod.SEMI_ANNUAL:
        return f"{due_date.year}-H{1 if due_date.month <= 6 else 2}"
    return str(due_date.year)


class DueType(BaseModel):
    """Template from which concrete dues are instantiated."""
    name = models.CharField(max_length=150, unique=True)
    description = models.TextField(blank=True)
    default_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    is_recurring = models.BooleanField(default=False)
    recurring_period = models.CharField(
        max_length=20,
        choices=RecurringPeriod.choices,
        blank=True,
    )
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_due_types',
    )

    class Meta:
        ordering = ['name']
        indexes = [models.Index(fields=['is_active'], name='duetype_active_idx')]

    def __str__(self):
        return self.name

    def clean(self):
        if self.is_recurring and not self.recurring_period:
            raise ValidationError({'recurring_period': 'Recurring due types need a recurring period'})
        if not self.is_recurring and self.recurring_period:
            raise ValidationError({'recurring_period': 'Only recurring due types can have a recurring period'})


class Due(BaseModel):
    """
    One obligation owed by one pharmacy.

    total_amount, amount_paid, balance and payment_status are derived fields;
    only LedgerService.recompute() writes them after creation.
    """
    pharmacy = models.ForeignKey(Pharmacy, on_delete=models.PROTECT, related_name='dues')
    due_type = models.ForeignKey(
        DueType,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='dues',
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    due_date = models.DateField()
    year = models.PositiveIntegerField(editable=False)
    period = models.CharField(max_length=10, editable=False)

    assignment_type = models.CharField(max_length=20, choices=DueAssignmentType.choices)
    assigned_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='assigned_dues',
    )
    assigned_at = models.DateTimeField(default=timezone.now)

    is_recurring = models.BooleanField(default=False)
    next_due_date = models.DateField(null=True, blank=True)
    previous_due = models.OneToOneField(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='next_due',
    )

    # Derived ledger fields
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    payment_status = models.CharField(
        max_length=20,
        choices=DuePaymentStatus.choices,
        default=DuePaymentStatus.PENDING,
    )
    version = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['-due_date', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['pharmacy', 'due_type', 'period'],
                condition=Q(due_type__isnull=False, is_deleted=False),
                name='unique_due_per_pharmacy_type_period',
            ),
            models.CheckConstraint(
                condition=Q(amount_paid__gte=0) & Q(balance__gte=0),
                name='due_non_negative_balance',
            ),
            models.CheckConstraint(
                condition=Q(total_amount=F('amount_paid') + F('balance')),
                name='due_balance_reconciles',
            ),
        ]
        indexes = [
            models.Index(fields=['pharmacy', 'year'], name='due_pharmacy_year_idx'),
            models.Index(fields=['payment_status'], name='due_status_idx'),
            models.Index(fields=['due_date'], name='due_date_idx'),
        ]

    def __str__(self):
        return f"{self.title} - {self.pharmacy.name} ({self.year})"

    def save(self, *args, **kwargs):
        if self.due_date:
            self.year = self.due_date.year
            self.period = billing_period(
                self.due_date,
                self.due_type.recurring_period if self.due_type_id and self.due_type.is_recurring else None,
            )
        if self._state.adding and not self.pk:
            # No penalties or approved payments can exist yet
            self.total_amount = self.amount
            self.amount_paid = ZERO
            self.balance = self.amount
        super().save(*args, **kwargs)

    @property
    def penalty_total(self):
        return self.total_amount - self.amount

    @property
    def is_overdue(self):
        return self.balance > 0 and timezone.localdate() > self.due_date


class Penalty(BaseModel):
    """Append-only surcharge attached to a due."""
    due = models.ForeignKey(Due, on_delete=models.CASCADE, related_name='penalties')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    reason = models.CharField(max_length=500)
    added_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='added_penalties',
    )
    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['added_at', 'id']
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name='penalty_amount_positive'),
        ]
        verbose_name_plural = 'penalties'

    def __str__(self):
        return f"{self.amount} on {self.due_id}: {self.reason}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError('Penalties are immutable once recorded')
        super().save(*args, **kwargs)


class PaymentSubmission(BaseModel):
    """
    A claimed payment against a due awaiting administrator review.

    pending -> approved (credits the due) or pending -> rejected (no ledger
    effect). Both outcomes are terminal.
    """
    due = models.ForeignKey(Due, on_delete=models.PROTECT, related_name='payments')
    pharmacy = models.ForeignKey(Pharmacy, on_delete=models.PROTECT, related_name='payment_submissions')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_reference = models.CharField(max_length=120, blank=True)
    receipt_url = models.URLField(max_length=500)

    status = models.CharField(
        max_length=20,
        choices=SubmissionStatus.choices,
        default=SubmissionStatus.PENDING,
    )
    approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_payment_submissions',
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rejected_payment_submissions',
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)

    submitted_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='payment_submissions',
    )
    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-submitted_at', '-id']
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name='submission_amount_positive'),
            models.CheckConstraint(
                condition=(
                    Q(status=SubmissionStatus.PENDING, approved_at__isnull=True, rejection_reason='')
                    | Q(status=SubmissionStatus.APPROVED, approved_at__isnull=False, rejection_reason='')
                    | (Q(status=SubmissionStatus.REJECTED, approved_at__isnull=True) & ~Q(rejection_reason=''))
                ),
                name='submission_review_state_consistent',
            ),
        ]
        indexes = [
            models.Index(fields=['status'], name='submission_status_idx'),
            models.Index(fields=['due', 'status'], name='submission_due_status_idx'),
        ]

    def __str__(self):
        return f"{self.amount} for due {self.due_id} ({self.status})"

    @property
    def is_terminal(self):
        return self.status != SubmissionStatus.PENDING


class CertificateCounter(SingletonBaseModel):
    last_number = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"Certificate #{self.last_number}"
