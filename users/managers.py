# users/managers.py
from django.contrib.auth.models import UserManager


class AssociationUserManager(UserManager):
    def members(self):
        return self.get_queryset().filter(role='member', is_active=True)

    def finance_admins(self):
        return self.get_queryset().filter(
            role__in=['admin', 'superadmin', 'treasurer', 'financial_secretary']
        )
