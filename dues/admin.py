from django.contrib import admin

from dues.models import CertificateCounter, Due, DueType, PaymentSubmission, Penalty


@admin.register(DueType)
class DueTypeAdmin(admin.ModelAdmin):
    list_display = ('name', 'default_amount', 'is_recurring', 'recurring_period', 'is_active')
    list_filter = ('is_active', 'is_recurring', 'recurring_period')
    search_fields = ('name',)


class PenaltyInline(admin.TabularInline):
    model = Penalty
    extra = 0
    can_delete = False
    readonly_fields = ('amount', 'reason', 'added_by', 'added_at')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Due)
class DueAdmin(admin.ModelAdmin):
    list_display = (
        'title', 'pharmacy', 'due_type', 'due_date', 'total_amount', 'amount_paid', 'balance', 'payment_status',
    )
    list_filter = ('payment_status', 'year', 'assignment_type', 'due_type')
    search_fields = ('title', 'pharmacy__name', 'pharmacy__registration_number')
    readonly_fields = ('year', 'period', 'total_amount', 'amount_paid', 'balance', 'payment_status', 'version')
    inlines = [PenaltyInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('pharmacy', 'due_type')


@admin.register(PaymentSubmission)
class PaymentSubmissionAdmin(admin.ModelAdmin):
    list_display = ('due', 'pharmacy', 'amount', 'payment_method', 'status', 'submitted_at')
    list_filter = ('status', 'payment_method')
    search_fields = ('pharmacy__name', 'payment_reference')
    readonly_fields = (
        'status', 'approved_by', 'approved_at', 'rejected_by', 'rejected_at', 'rejection_reason',
    )


admin.site.register(CertificateCounter)
