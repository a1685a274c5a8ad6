from django.db.models import Count, Q
from django.http import HttpResponse
from django.utils.text import slugify
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsEventAdmin, IsEventAdminOrReadOnly
from events.filters import EventFilter
from events.models import AttendancePenaltyRun, Event
from events.serializers import (
    AttendancePenaltyRunSerializer,
    AttendanceYearSerializer,
    EventAttendeeSerializer,
    EventSerializer,
    MarkAttendanceSerializer,
)
from events.services.attendance_service import AttendanceService


class EventViewSet(viewsets.ModelViewSet):
    """
    Association events and meeting attendance.

    Attendance evaluation only counts events of type "meetings".
    """
    serializer_class = EventSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter, filters.SearchFilter]
    filterset_class = EventFilter
    ordering_fields = ['start_date', 'title', 'created_at']
    search_fields = ['title', 'location']
    lookup_value_regex = r'\d+'

    admin_actions = {
        'attendance', 'export', 'attendance_report', 'calculate_penalties', 'send_warnings', 'penalty_runs',
    }

    def get_queryset(self):
        return (
            Event.objects.filter(is_deleted=False)
            .select_related('created_by')
            .annotate(attendee_count=Count('attendees', filter=Q(attendees__is_deleted=False)))
        )

    def get_permissions(self):
        if self.action in self.admin_actions:
            return [IsAuthenticated(), IsEventAdmin()]
        return [IsEventAdminOrReadOnly()]

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_destroy(self, instance):
        instance.soft_delete()

    @action(detail=True, methods=['get'])
    def attendees(self, request, pk=None):
        event = self.get_object()
        qs = event.attendees.filter(is_deleted=False).select_related('user').order_by('registered_at', 'id')
        return Response(EventAttendeeSerializer(qs, many=True).data)

    @action(detail=True, methods=['post'])
    def attendance(self, request, pk=None):
        event = self.get_object()
        s = MarkAttendanceSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        updated = AttendanceService.mark_attendance(event, s.validated_data['attendance_data'])
        return Response({
            'message': 'Attendance updated successfully',
            'attendees': EventAttendeeSerializer(updated, many=True).data,
        })

    @action(detail=True, methods=['get'])
    def export(self, request, pk=None):
        event = self.get_object()
        response = HttpResponse(AttendanceService.export_attendance_csv(event), content_type='text/csv')
        filename = f"{slugify(event.title) or 'event'}-attendance.csv"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response

    @action(detail=False, methods=['get'], url_path='attendance/report')
    def attendance_report(self, request):
        s = AttendanceYearSerializer(data=request.query_params)
        s.is_valid(raise_exception=True)
        report = AttendanceService.evaluate(s.validated_data['year'])
        return Response(report.as_dict())

    @action(detail=False, methods=['post'], url_path='attendance/calculate-penalties')
    def calculate_penalties(self, request):
        s = AttendanceYearSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        report, run = AttendanceService.calculate_penalties(s.validated_data['year'], processed_by=request.user)
        return Response(
            {
                'run': AttendancePenaltyRunSerializer(run).data,
                'penalties': [entry.as_dict() for entry in report.entries],
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=['post'], url_path='attendance/send-warnings')
    def send_warnings(self, request):
        s = AttendanceYearSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response({'warnings': AttendanceService.send_warnings(s.validated_data['year'])})

    @action(detail=False, methods=['get'], url_path='attendance/runs')
    def penalty_runs(self, request):
        runs = AttendancePenaltyRun.objects.select_related('processed_by')
        return Response(AttendancePenaltyRunSerializer(runs, many=True).data)
