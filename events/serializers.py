from rest_framework import serializers

from events.models import AttendancePenaltyRun, Event, EventAttendee
from users.models import User
from users.serializers import UserBasicSerializer


class EventSerializer(serializers.ModelSerializer):
    created_by = UserBasicSerializer(read_only=True)
    attendee_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Event
        fields = [
            'id', 'uuid', 'title', 'description', 'event_type', 'start_date', 'end_date',
            'location', 'organizer', 'status', 'is_attendance_required', 'created_by',
            'attendee_count', 'created_at', 'updated_at',
        ]
        read_only_fields = ['uuid', 'created_by', 'attendee_count', 'created_at', 'updated_at']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before start date'})
        return attrs


class EventAttendeeSerializer(serializers.ModelSerializer):
    user = UserBasicSerializer(read_only=True)

    class Meta:
        model = EventAttendee
        fields = ['id', 'event', 'user', 'status', 'registered_at']
        read_only_fields = fields


class AttendanceRowSerializer(serializers.Serializer):
    user_id = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    present = serializers.BooleanField()


class MarkAttendanceSerializer(serializers.Serializer):
    attendance_data = AttendanceRowSerializer(many=True, allow_empty=False)

    def validate_attendance_data(self, rows):
        return [{'user_id': row['user_id'].pk, 'present': row['present']} for row in rows]


class AttendanceYearSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1900, max_value=9999)


class AttendancePenaltyRunSerializer(serializers.ModelSerializer):
    processed_by = UserBasicSerializer(read_only=True)

    class Meta:
        model = AttendancePenaltyRun
        fields = [
            'id', 'year', 'processed_by', 'processed_at', 'meetings_count',
            'members_evaluated', 'members_penalized', 'total_penalty',
        ]
        read_only_fields = fields
