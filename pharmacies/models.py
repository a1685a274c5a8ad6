from django.db import models
from django.utils import timezone

from common.enums import RegistrationStatus
from core.models import BaseModel
from users.models import User


class Pharmacy(BaseModel):
    """A registered pharmacy premises; the unit that owes association dues."""
    name = models.CharField(max_length=255)
    registration_number = models.CharField(max_length=100, unique=True)
    location = models.CharField(max_length=255, blank=True)
    address = models.TextField(blank=True)
    ward_area = models.CharField(max_length=120, blank=True, help_text="Ward or area within the region")

    registration_status = models.CharField(
        max_length=20,
        choices=RegistrationStatus.choices,
        default=RegistrationStatus.PENDING,
    )
    registration_date = models.DateField(default=timezone.localdate)

    owner = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='pharmacies',
    )
    superintendent_name = models.CharField(max_length=255, blank=True)
    director_name = models.CharField(max_length=255, blank=True)
    pcn_license = models.CharField(max_length=100, blank=True, help_text="Pharmacists Council licence number")

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'pharmacies'
        indexes = [
            models.Index(fields=['registration_status'], name='pharmacy_status_idx'),
            models.Index(fields=['ward_area'], name='pharmacy_ward_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.registration_number})"

    @property
    def registration_year(self):
        return self.registration_date.year if self.registration_date else None
