# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from common.enums import UserRole, UserStatus
from .managers import AssociationUserManager


class User(AbstractUser):
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)

    Role = UserRole

    role = models.CharField(max_length=30, choices=UserRole.choices, default=UserRole.MEMBER)
    status = models.CharField(max_length=20, choices=UserStatus.choices, default=UserStatus.ACTIVE)

    # Dues accounting used by the attendance evaluator
    annual_dues = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    pending_dues = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    attendance_warned = models.BooleanField(default=False)
    attendance_warned_at = models.DateTimeField(null=True, blank=True)

    objects = AssociationUserManager()

    REQUIRED_FIELDS = []
    USERNAME_FIELD = 'username'

    @property
    def full_name(self):
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username

    @property
    def is_member(self):
        return self.role == UserRole.MEMBER

    def mark_attendance_warned(self):
        self.attendance_warned = True
        self.attendance_warned_at = timezone.now()
        self.save(update_fields=['attendance_warned', 'attendance_warned_at'])
