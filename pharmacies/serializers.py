from rest_framework import serializers

from pharmacies.models import Pharmacy
from users.models import User
from users.serializers import UserBasicSerializer


class PharmacySerializer(serializers.ModelSerializer):
    owner = UserBasicSerializer(read_only=True)
    owner_id = serializers.PrimaryKeyRelatedField(
        source='owner', queryset=User.objects.all(), write_only=True, required=False
    )
    registration_year = serializers.ReadOnlyField()

    class Meta:
        model = Pharmacy
        fields = [
            'id', 'uuid', 'name', 'registration_number', 'location', 'address',
            'ward_area', 'registration_status', 'registration_date',
            'registration_year', 'owner', 'owner_id',
            'superintendent_name', 'director_name', 'pcn_license',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['uuid', 'registration_year', 'created_at', 'updated_at']


class PharmacyBasicSerializer(serializers.ModelSerializer):
    class Meta:
        model = Pharmacy
        fields = ['id', 'name', 'registration_number', 'location']
        read_only_fields = fields
