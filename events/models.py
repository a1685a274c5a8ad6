from django.db import models
from django.utils import timezone

from common.enums import AttendanceStatus, EventStatus, EventType
from core.models import BaseModel
from users.models import User


class Event(BaseModel):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    event_type = models.CharField(max_length=20, choices=EventType.choices, default=EventType.MEETINGS)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    location = models.CharField(max_length=255, blank=True)
    organizer = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=EventStatus.choices, default=EventStatus.DRAFT)
    is_attendance_required = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='created_events',
    )

    class Meta:
        ordering = ['start_date']
        indexes = [models.Index(fields=['event_type', 'start_date'], name='event_type_start_idx')]

    def __str__(self):
        return self.title

    @property
    def is_meeting(self):
        return self.event_type == EventType.MEETINGS


class EventAttendee(BaseModel):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='attendees')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='event_attendances')
    status = models.CharField(
        max_length=20,
        choices=AttendanceStatus.choices,
        default=AttendanceStatus.REGISTERED,
    )
    registered_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['registered_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['event', 'user'], name='unique_attendee_per_event'),
        ]

    def __str__(self):
        return f"{self.user} @ {self.event} ({self.status})"


class AttendancePenaltyRun(BaseModel):
    """Marks a year whose attendance penalties have been applied."""
    year = models.PositiveIntegerField(unique=True)
    processed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name='attendance_penalty_runs',
    )
    processed_at = models.DateTimeField(default=timezone.now)
    meetings_count = models.PositiveIntegerField(default=0)
    members_evaluated = models.PositiveIntegerField(default=0)
    members_penalized = models.PositiveIntegerField(default=0)
    total_penalty = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    class Meta:
        ordering = ['-year']

    def __str__(self):
        return f"Attendance penalties {self.year}"
