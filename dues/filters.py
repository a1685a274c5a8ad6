import django_filters

from dues.models import Due, DueType, PaymentSubmission


class DueTypeFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = DueType
        fields = ['is_active', 'is_recurring', 'recurring_period', 'name']


class DueFilter(django_filters.FilterSet):
    payment_status = django_filters.CharFilter()
    year = django_filters.NumberFilter()
    due_type = django_filters.NumberFilter(field_name='due_type_id')
    pharmacy = django_filters.NumberFilter(field_name='pharmacy_id')
    assignment_type = django_filters.CharFilter()
    due_date_after = django_filters.DateFilter(field_name='due_date', lookup_expr='gte')
    due_date_before = django_filters.DateFilter(field_name='due_date', lookup_expr='lte')

    class Meta:
        model = Due
        fields = [
            'payment_status', 'year', 'due_type', 'pharmacy', 'assignment_type',
            'is_recurring', 'due_date_after', 'due_date_before',
        ]


class PaymentSubmissionFilter(django_filters.FilterSet):
    status = django_filters.CharFilter()
    pharmacy = django_filters.NumberFilter(field_name='pharmacy_id')
    due = django_filters.NumberFilter(field_name='due_id')
    payment_method = django_filters.CharFilter()

    class Meta:
        model = PaymentSubmission
        fields = ['status', 'pharmacy', 'due', 'payment_method']
