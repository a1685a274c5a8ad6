from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated

from core.permissions import FINANCE_ROLES, has_role
from pharmacies.filters import PharmacyFilter
from pharmacies.models import Pharmacy
from pharmacies.serializers import PharmacySerializer


class PharmacyViewSet(viewsets.ModelViewSet):
    """
    Pharmacy registry.

    Finance/admin roles see every pharmacy; members only see the pharmacies
    they own. Registration status and ward changes are admin-only.
    """
    serializer_class = PharmacySerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = PharmacyFilter
    ordering_fields = ['name', 'registration_date', 'registration_number']

    def get_queryset(self):
        qs = Pharmacy.objects.filter(is_deleted=False).select_related('owner')
        user = self.request.user
        if has_role(user, FINANCE_ROLES):
            return qs
        return qs.filter(owner=user)

    def perform_create(self, serializer):
        user = self.request.user
        if has_role(user, FINANCE_ROLES) and 'owner' in serializer.validated_data:
            serializer.save()
        else:
            serializer.save(owner=user)

    def perform_update(self, serializer):
        if not has_role(self.request.user, FINANCE_ROLES):
            serializer.validated_data.pop('registration_status', None)
            serializer.validated_data.pop('owner', None)
        serializer.save()

    def perform_destroy(self, instance):
        instance.soft_delete()
