# users/serializers.py
from rest_framework import serializers

from users.models import User


class UserBasicSerializer(serializers.ModelSerializer):
    """Basic user info for nested serialization"""

    class Meta:
        model = User
        fields = ['id', 'username', 'first_name', 'last_name', 'email']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "phone",
            "first_name",
            "last_name",
            "full_name",
            "role",
            "status",
            "annual_dues",
            "pending_dues",
            "attendance_warned",
            "attendance_warned_at",
            "is_superuser",
        ]
        read_only_fields = [
            "role",
            "status",
            "annual_dues",
            "pending_dues",
            "attendance_warned",
            "attendance_warned_at",
            "is_superuser",
        ]
