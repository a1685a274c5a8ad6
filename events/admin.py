from django.contrib import admin

from events.models import AttendancePenaltyRun, Event, EventAttendee


class EventAttendeeInline(admin.TabularInline):
    model = EventAttendee
    extra = 0
    raw_id_fields = ('user',)


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('title', 'event_type', 'start_date', 'status', 'is_attendance_required')
    list_filter = ('event_type', 'status')
    search_fields = ('title', 'location')
    inlines = [EventAttendeeInline]


@admin.register(AttendancePenaltyRun)
class AttendancePenaltyRunAdmin(admin.ModelAdmin):
    list_display = ('year', 'processed_by', 'processed_at', 'members_penalized', 'total_penalty')
    readonly_fields = (
        'year', 'processed_by', 'processed_at', 'meetings_count',
        'members_evaluated', 'members_penalized', 'total_penalty',
    )
