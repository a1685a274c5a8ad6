import django_filters

from pharmacies.models import Pharmacy


class PharmacyFilter(django_filters.FilterSet):
    registration_status = django_filters.CharFilter(lookup_expr='iexact')
    location = django_filters.CharFilter(lookup_expr='icontains')
    ward_area = django_filters.CharFilter(lookup_expr='iexact')
    registration_year = django_filters.NumberFilter(field_name='registration_date', lookup_expr='year')
    name = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Pharmacy
        fields = ['registration_status', 'location', 'ward_area', 'registration_year', 'name']
