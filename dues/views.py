from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.enums import SubmissionStatus
from common.exceptions import ConflictError, ValidationError
from core.permissions import (
    FINANCE_ROLES,
    IsFinanceAdmin,
    IsFinanceAdminOrReadOnly,
    IsPharmacyOwnerOrFinanceAdmin,
    has_role,
)
from core.utils import get_or_not_found
from dues.filters import DueFilter, DueTypeFilter, PaymentSubmissionFilter
from dues.models import Due, DueType, PaymentSubmission
from dues.serializers import (
    AddPenaltySerializer,
    BulkAssignSerializer,
    DueAnalyticsQuerySerializer,
    DueAssignSerializer,
    DueSerializer,
    DueTypeSerializer,
    DueUpdateSerializer,
    PaymentSubmissionSerializer,
    RejectPaymentSerializer,
    SubmitPaymentSerializer,
)
from dues.services.analytics_service import DueAnalyticsService
from dues.services.assignment_service import DueAssignmentService
from dues.services.certificate_service import CertificateService
from dues.services.ledger_service import LedgerService
from dues.services.payment_service import PaymentService
from dues.services.penalty_service import PenaltyService
from dues.services.recurring_service import RecurringDueService
from pharmacies.models import Pharmacy


class DueTypeViewSet(viewsets.ModelViewSet):
    """Due templates. Deleting a type only deactivates it."""
    queryset = DueType.objects.filter(is_deleted=False).select_related('created_by')
    serializer_class = DueTypeSerializer
    permission_classes = [IsFinanceAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = DueTypeFilter
    ordering_fields = ['name', 'default_amount', 'created_at']

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])


class DueViewSet(viewsets.ModelViewSet):
    serializer_class = DueSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter, filters.SearchFilter]
    filterset_class = DueFilter
    ordering_fields = ['due_date', 'amount', 'balance', 'total_amount', 'created_at']
    search_fields = ['title', 'pharmacy__name', 'pharmacy__registration_number']
    lookup_value_regex = r'\d+'

    owner_actions = {
        'list', 'retrieve', 'pay', 'payments', 'certificate', 'pharmacy_analytics', 'pharmacy_history',
    }

    def get_queryset(self):
        qs = (
            Due.objects.filter(is_deleted=False)
            .select_related('pharmacy', 'due_type', 'assigned_by')
            .prefetch_related('penalties__added_by')
        )
        if has_role(self.request.user, FINANCE_ROLES):
            return qs
        return qs.filter(pharmacy__owner=self.request.user)

    def get_permissions(self):
        if self.action in self.owner_actions:
            return [IsAuthenticated(), IsPharmacyOwnerOrFinanceAdmin()]
        return [IsAuthenticated(), IsFinanceAdmin()]

    def get_serializer_class(self):
        if self.action == 'create':
            return DueAssignSerializer
        if self.action in ('update', 'partial_update'):
            return DueUpdateSerializer
        return DueSerializer

    def _get_pharmacy(self, pharmacy_id):
        pharmacy = get_or_not_found(Pharmacy, pharmacy_id, Pharmacy.objects.filter(is_deleted=False))
        self.check_object_permissions(self.request, pharmacy)
        return pharmacy

    def _due_response(self, due, status_code=status.HTTP_200_OK):
        due = (
            Due.objects.select_related('pharmacy', 'due_type', 'assigned_by')
            .prefetch_related('penalties__added_by')
            .get(pk=due.pk)
        )
        return Response(DueSerializer(due, context=self.get_serializer_context()).data, status=status_code)

    def _assign(self, request, pharmacy=None):
        s = DueAssignSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        pharmacy = pharmacy or data.get('pharmacy')
        if pharmacy is None:
            raise ValidationError({'pharmacy_id': ['This field is required.']})
        due = DueAssignmentService.assign_individual(
            pharmacy=pharmacy,
            assigned_by=request.user,
            due_date=data['due_date'],
            due_type=data.get('due_type'),
            amount=data.get('amount'),
            title=data.get('title'),
            description=data.get('description', ''),
            is_recurring=data.get('is_recurring'),
            next_due_date=data.get('next_due_date'),
        )
        return self._due_response(due, status.HTTP_201_CREATED)

    def create(self, request, *args, **kwargs):
        return self._assign(request)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        due = self.get_object()
        s = DueUpdateSerializer(due, data=request.data, partial=partial)
        s.is_valid(raise_exception=True)
        s.save()
        return self._due_response(due)

    def perform_destroy(self, instance):
        if instance.payments.exists():
            raise ConflictError('Dues with payment submissions cannot be deleted')
        instance.soft_delete()

    @action(detail=True, methods=['post'])
    def penalty(self, request, pk=None):
        due = self.get_object()
        s = AddPenaltySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        PenaltyService.add_penalty(
            due, s.validated_data['amount'], s.validated_data['reason'], request.user,
        )
        return self._due_response(due, status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        due = self.get_object()
        s = SubmitPaymentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        payment = PaymentService.submit_payment(
            due,
            amount=s.validated_data['amount'],
            payment_method=s.validated_data['payment_method'],
            receipt_url=s.validated_data['receipt_url'],
            submitted_by=request.user,
            payment_reference=s.validated_data.get('payment_reference', ''),
        )
        return Response(PaymentSubmissionSerializer(payment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        due = self.get_object()
        qs = due.payments.filter(is_deleted=False).select_related(
            'pharmacy', 'submitted_by', 'approved_by', 'rejected_by',
        )
        return Response(PaymentSubmissionSerializer(qs, many=True).data)

    @action(detail=True, methods=['get'])
    def certificate(self, request, pk=None):
        due = self.get_object()
        return Response(CertificateService.clearance_certificate(due))

    @action(detail=True, methods=['post'], url_path='next-period')
    def next_period(self, request, pk=None):
        due = self.get_object()
        next_due = RecurringDueService.instantiate_next(due, assigned_by=request.user)
        return self._due_response(next_due, status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='bulk-assign')
    def bulk_assign(self, request):
        s = BulkAssignSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        report = DueAssignmentService.bulk_assign(
            due_type=data['due_type'],
            due_date=data['due_date'],
            assigned_by=request.user,
            pharmacy_ids=data.get('pharmacy_ids'),
            filters=data.get('filters'),
            amount=data.get('amount'),
            title=data.get('title'),
            description=data.get('description', ''),
            is_recurring=data.get('is_recurring'),
        )
        code = status.HTTP_201_CREATED if report.created else status.HTTP_200_OK
        return Response(report.as_dict(), status=code)

    @action(detail=False, methods=['post'], url_path=r'assign/(?P<pharmacy_id>\d+)')
    def assign(self, request, pharmacy_id=None):
        pharmacy = get_or_not_found(Pharmacy, pharmacy_id, Pharmacy.objects.filter(is_deleted=False))
        return self._assign(request, pharmacy)

    @action(detail=False, methods=['get'])
    def analytics(self, request):
        q = DueAnalyticsQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        return Response(DueAnalyticsService.get_due_analytics(q.validated_data.get('year')))

    @action(detail=False, methods=['get'], url_path=r'analytics/pharmacy/(?P<pharmacy_id>\d+)')
    def pharmacy_analytics(self, request, pharmacy_id=None):
        pharmacy = self._get_pharmacy(pharmacy_id)
        return Response(DueAnalyticsService.get_pharmacy_analytics(pharmacy))

    @action(detail=False, methods=['get'])
    def overdue(self, request):
        qs = DueAnalyticsService.overdue_dues().prefetch_related('penalties__added_by')
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(DueSerializer(page, many=True).data)
        return Response(DueSerializer(qs, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'pharmacy/(?P<pharmacy_id>\d+)/history')
    def pharmacy_history(self, request, pharmacy_id=None):
        pharmacy = self._get_pharmacy(pharmacy_id)
        payments, dues = DueAnalyticsService.payment_history(pharmacy)
        return Response({
            'pharmacy_id': pharmacy.pk,
            'payments': PaymentSubmissionSerializer(payments, many=True).data,
            'dues': DueSerializer(dues.prefetch_related('penalties__added_by'), many=True).data,
        })

    @action(detail=False, methods=['post'], url_path='refresh-statuses')
    def refresh_statuses(self, request):
        changed = LedgerService.refresh_statuses()
        return Response({'updated': changed})


class PaymentSubmissionViewSet(viewsets.ReadOnlyModelViewSet):
    """Payment review queue. Members see their own submissions."""
    serializer_class = PaymentSubmissionSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = PaymentSubmissionFilter
    ordering_fields = ['submitted_at', 'amount', 'status']
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        qs = PaymentSubmission.objects.filter(is_deleted=False).select_related(
            'due', 'pharmacy', 'submitted_by', 'approved_by', 'rejected_by',
        )
        if has_role(self.request.user, FINANCE_ROLES):
            return qs
        return qs.filter(pharmacy__owner=self.request.user)

    def get_permissions(self):
        if self.action in ('list', 'retrieve'):
            return [IsAuthenticated(), IsPharmacyOwnerOrFinanceAdmin()]
        return [IsAuthenticated(), IsFinanceAdmin()]

    @action(detail=False, methods=['get'])
    def pending(self, request):
        qs = self.filter_queryset(self.get_queryset()).filter(status=SubmissionStatus.PENDING)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        payment = self.get_object()
        payment = PaymentService.approve_payment(payment, approved_by=request.user)
        return Response(self.get_serializer(payment).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        payment = self.get_object()
        s = RejectPaymentSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        payment = PaymentService.reject_payment(payment, rejected_by=request.user, reason=s.validated_data['reason'])
        return Response(self.get_serializer(payment).data)
