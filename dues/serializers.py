from rest_framework import serializers

from common.enums import PaymentMethod, RegistrationStatus
from dues.models import Due, DueType, PaymentSubmission, Penalty
from pharmacies.models import Pharmacy
from pharmacies.serializers import PharmacyBasicSerializer
from users.serializers import UserBasicSerializer


class DueTypeSerializer(serializers.ModelSerializer):
    created_by = UserBasicSerializer(read_only=True)

    class Meta:
        model = DueType
        fields = [
            'id', 'uuid', 'name', 'description', 'default_amount', 'is_recurring',
            'recurring_period', 'is_active', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['uuid', 'created_by', 'created_at', 'updated_at']

    def validate(self, attrs):
        is_recurring = attrs.get('is_recurring', getattr(self.instance, 'is_recurring', False))
        period = attrs.get('recurring_period', getattr(self.instance, 'recurring_period', ''))
        if is_recurring and not period:
            raise serializers.ValidationError({'recurring_period': 'Recurring due types need a recurring period'})
        if not is_recurring and period:
            raise serializers.ValidationError(
                {'recurring_period': 'Only recurring due types can have a recurring period'}
            )
        return attrs


class DueTypeBasicSerializer(serializers.ModelSerializer):
    class Meta:
        model = DueType
        fields = ['id', 'name', 'default_amount', 'is_recurring', 'recurring_period', 'is_active']
        read_only_fields = fields


class PenaltySerializer(serializers.ModelSerializer):
    added_by = UserBasicSerializer(read_only=True)

    class Meta:
        model = Penalty
        fields = ['id', 'amount', 'reason', 'added_by', 'added_at']
        read_only_fields = fields


class DueSerializer(serializers.ModelSerializer):
    """
    Due ledger entry.

    The type reference is exposed twice: due_type is always the id (or null
    for ad hoc dues) and due_type_detail is the expanded object.
    """
    pharmacy = PharmacyBasicSerializer(read_only=True)
    due_type_detail = DueTypeBasicSerializer(source='due_type', read_only=True)
    penalties = PenaltySerializer(many=True, read_only=True)
    assigned_by = UserBasicSerializer(read_only=True)
    penalty_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Due
        fields = [
            'id', 'uuid', 'pharmacy', 'due_type', 'due_type_detail', 'title', 'description',
            'amount', 'due_date', 'year', 'period', 'assignment_type', 'assigned_by', 'assigned_at',
            'is_recurring', 'next_due_date', 'previous_due', 'penalties', 'penalty_total',
            'amount_paid', 'balance', 'total_amount', 'payment_status', 'version',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class DueAssignSerializer(serializers.Serializer):
    """Input for assigning a single due to one pharmacy."""
    pharmacy_id = serializers.PrimaryKeyRelatedField(
        source='pharmacy', queryset=Pharmacy.objects.filter(is_deleted=False), required=False
    )
    due_type_id = serializers.PrimaryKeyRelatedField(
        source='due_type', queryset=DueType.objects.all(), required=False, allow_null=True
    )
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    due_date = serializers.DateField()
    is_recurring = serializers.BooleanField(required=False, allow_null=True, default=None)
    next_due_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        next_due_date = attrs.get('next_due_date')
        if next_due_date and next_due_date <= attrs['due_date']:
            raise serializers.ValidationError({'next_due_date': 'Next due date must be after the due date'})
        return attrs


class DueUpdateSerializer(serializers.ModelSerializer):
    """Descriptive fields only; ledger amounts go through penalties and payments."""

    class Meta:
        model = Due
        fields = ['title', 'description', 'next_due_date']


class BulkAssignFiltersSerializer(serializers.Serializer):
    registration_status = serializers.ChoiceField(choices=RegistrationStatus.choices, required=False)
    location = serializers.CharField(required=False, allow_blank=True)
    ward_area = serializers.CharField(required=False, allow_blank=True)
    registration_year = serializers.IntegerField(required=False, min_value=1900)


class BulkAssignSerializer(serializers.Serializer):
    due_type_id = serializers.PrimaryKeyRelatedField(source='due_type', queryset=DueType.objects.all())
    due_date = serializers.DateField()
    pharmacy_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    filters = BulkAssignFiltersSerializer(required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    is_recurring = serializers.BooleanField(required=False, allow_null=True, default=None)


class AddPenaltySerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    reason = serializers.CharField(max_length=500)


class PaymentSubmissionSerializer(serializers.ModelSerializer):
    pharmacy = PharmacyBasicSerializer(read_only=True)
    due_title = serializers.CharField(source='due.title', read_only=True)
    submitted_by = UserBasicSerializer(read_only=True)
    approved_by = UserBasicSerializer(read_only=True)
    rejected_by = UserBasicSerializer(read_only=True)

    class Meta:
        model = PaymentSubmission
        fields = [
            'id', 'uuid', 'due', 'due_title', 'pharmacy', 'amount', 'payment_method',
            'payment_reference', 'receipt_url', 'status', 'approved_by', 'approved_at',
            'rejected_by', 'rejected_at', 'rejection_reason', 'submitted_by', 'submitted_at',
        ]
        read_only_fields = fields


class SubmitPaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    payment_reference = serializers.CharField(max_length=120, required=False, allow_blank=True, default='')
    receipt_url = serializers.URLField(max_length=500)


class RejectPaymentSerializer(serializers.Serializer):
    reason = serializers.CharField()


class DueAnalyticsQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(required=False, min_value=1900)
