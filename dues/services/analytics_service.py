from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.utils import timezone

from common.enums import DuePaymentStatus
from dues.models import ZERO, Due, PaymentSubmission


class DueAnalyticsService:
    """Read-only reporting over the due ledger."""

    @staticmethod
    def _summarize(qs):
        totals = qs.aggregate(
            total_dues=Count('id'),
            total_amount=Sum('total_amount'),
            total_paid=Sum('amount_paid'),
            outstanding=Sum('balance'),
            pending_count=Count('id', filter=Q(payment_status=DuePaymentStatus.PENDING)),
            partially_paid_count=Count('id', filter=Q(payment_status=DuePaymentStatus.PARTIALLY_PAID)),
            paid_count=Count('id', filter=Q(payment_status=DuePaymentStatus.PAID)),
            overdue_count=Count('id', filter=Q(payment_status=DuePaymentStatus.OVERDUE)),
        )
        for key in ('total_amount', 'total_paid', 'outstanding'):
            totals[key] = totals[key] or ZERO
        if totals['total_amount'] > 0:
            rate = (totals['total_paid'] / totals['total_amount'] * 100).quantize(Decimal('0.01'))
        else:
            rate = ZERO
        totals['collection_rate'] = rate
        return totals

    @staticmethod
    def get_due_analytics(year=None):
        """
        Summary and per-type breakdown for one year of dues.

        Args:
            year: calendar year, defaults to the current one

        Returns:
            dict: year, summary and dues_by_type
        """
        year = year or timezone.localdate().year
        qs = Due.objects.filter(is_deleted=False, year=year)

        by_type = (
            qs.values('due_type_id', 'due_type__name')
            .annotate(
                count=Count('id'),
                total_amount=Sum('total_amount'),
                amount_paid=Sum('amount_paid'),
                outstanding=Sum('balance'),
            )
            .order_by('due_type__name')
        )
        dues_by_type = [
            {
                'due_type_id': row['due_type_id'],
                'due_type_name': row['due_type__name'] or 'Ad hoc',
                'count': row['count'],
                'total_amount': row['total_amount'] or ZERO,
                'amount_paid': row['amount_paid'] or ZERO,
                'outstanding': row['outstanding'] or ZERO,
            }
            for row in by_type
        ]
        return {
            'year': year,
            'summary': DueAnalyticsService._summarize(qs),
            'dues_by_type': dues_by_type,
        }

    @staticmethod
    def get_pharmacy_analytics(pharmacy):
        qs = Due.objects.filter(is_deleted=False, pharmacy=pharmacy)
        data = DueAnalyticsService._summarize(qs)
        data['pharmacy_id'] = pharmacy.pk
        data['pharmacy_name'] = pharmacy.name
        return data

    @staticmethod
    def overdue_dues(today=None):
        today = today or timezone.localdate()
        return (
            Due.objects.filter(is_deleted=False, balance__gt=0, due_date__lt=today)
            .select_related('pharmacy', 'due_type')
            .order_by('due_date', 'id')
        )

    @staticmethod
    def payment_history(pharmacy):
        payments = (
            PaymentSubmission.objects.filter(pharmacy=pharmacy, is_deleted=False)
            .select_related('due', 'approved_by', 'submitted_by')
        )
        dues = Due.objects.filter(pharmacy=pharmacy, is_deleted=False).select_related('due_type')
        return payments, dues
