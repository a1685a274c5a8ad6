# users/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('id', 'username', 'email', 'role', 'status', 'annual_dues', 'pending_dues', 'attendance_warned')
    list_filter = ('role', 'status', 'is_active', 'attendance_warned')
    search_fields = ('username', 'email', 'phone', 'first_name', 'last_name')
    ordering = ('-date_joined',)
    readonly_fields = ('pending_dues', 'attendance_warned_at')

    fieldsets = (
        (None, {'fields': ('username', 'password')}),
        ('Personal Info', {'fields': ('email', 'phone', 'first_name', 'last_name')}),
        ('Membership', {'fields': ('role', 'status', 'annual_dues', 'pending_dues', 'attendance_warned', 'attendance_warned_at')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )
