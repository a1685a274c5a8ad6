from rest_framework.permissions import BasePermission, SAFE_METHODS

FINANCE_ROLES = ('admin', 'superadmin', 'treasurer', 'financial_secretary')
EVENT_ROLES = ('admin', 'superadmin', 'secretary')


def has_role(user, roles):
    if not user or not user.is_authenticated:
        return False
    return user.is_superuser or user.role in roles


class IsFinanceAdmin(BasePermission):
    def has_permission(self, request, view):
        return has_role(request.user, FINANCE_ROLES)


class IsEventAdmin(BasePermission):
    def has_permission(self, request, view):
        return has_role(request.user, EVENT_ROLES)


class IsFinanceAdminOrReadOnly(BasePermission):
    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return has_role(request.user, FINANCE_ROLES)


class IsEventAdminOrReadOnly(BasePermission):
    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return has_role(request.user, EVENT_ROLES)


class IsPharmacyOwnerOrFinanceAdmin(BasePermission):
    """Object-level check for anything that exposes a pharmacy owner."""

    def has_object_permission(self, request, view, obj):
        if has_role(request.user, FINANCE_ROLES):
            return True
        pharmacy = getattr(obj, 'pharmacy', obj)
        return getattr(pharmacy, 'owner_id', None) == request.user.id
