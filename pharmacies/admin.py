from django.contrib import admin

from pharmacies.models import Pharmacy


@admin.register(Pharmacy)
class PharmacyAdmin(admin.ModelAdmin):
    list_display = ('name', 'registration_number', 'ward_area', 'registration_status', 'registration_date', 'owner')
    search_fields = ('name', 'registration_number', 'location', 'owner__username')
    list_filter = ('registration_status', 'ward_area')

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('owner')
