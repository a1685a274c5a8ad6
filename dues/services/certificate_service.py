import datetime
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from common.enums import DuePaymentStatus, SubmissionStatus
from common.exceptions import ValidationError
from dues.models import CertificateCounter

logger = logging.getLogger(__name__)


class CertificateService:

    @staticmethod
    def next_certificate_number():
        with transaction.atomic():
            counter = CertificateCounter.load()
            CertificateCounter.objects.filter(pk=counter.pk).update(last_number=F('last_number') + 1)
            counter.refresh_from_db(fields=['last_number'])
        return f"{counter.last_number:04d}"

    @staticmethod
    def clearance_certificate(due):
        """Certificate data for a fully paid due. Valid until the end of the current year."""
        if due.payment_status != DuePaymentStatus.PAID:
            raise ValidationError({'payment_status': 'Due must be fully paid to generate certificate'})

        last_payment = (
            due.payments.filter(status=SubmissionStatus.APPROVED)
            .order_by('-approved_at')
            .first()
        )
        today = timezone.localdate()
        data = {
            'due_id': due.pk,
            'pharmacy_id': due.pharmacy_id,
            'pharmacy_name': due.pharmacy.name,
            'registration_number': due.pharmacy.registration_number,
            'due_type': due.due_type.name if due.due_type_id else due.title,
            'amount': due.total_amount,
            'currency': settings.DUES_CURRENCY,
            'paid_date': last_payment.approved_at if last_payment else due.updated_at,
            'valid_until': datetime.date(today.year, 12, 31),
            'certificate_number': CertificateService.next_certificate_number(),
        }
        logger.info(
            "Clearance certificate issued",
            extra={'due_id': due.pk, 'certificate_number': data['certificate_number']},
        )
        return data
