import django_filters

from events.models import Event


class EventFilter(django_filters.FilterSet):
    year = django_filters.NumberFilter(field_name='start_date', lookup_expr='year')
    event_type = django_filters.CharFilter()
    status = django_filters.CharFilter()
    title = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Event
        fields = ['year', 'event_type', 'status', 'title']
