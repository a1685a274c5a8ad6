from django.db import models


class BaseEnum(models.TextChoices):
    @classmethod
    def choices(cls):
        return [(choice.value, choice.label) for choice in cls]


class UserRole(BaseEnum):
    MEMBER = 'member', 'Member'
    ADMIN = 'admin', 'Admin'
    SUPERADMIN = 'superadmin', 'Super Admin'
    SECRETARY = 'secretary', 'Secretary'
    TREASURER = 'treasurer', 'Treasurer'
    FINANCIAL_SECRETARY = 'financial_secretary', 'Financial Secretary'


class UserStatus(BaseEnum):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'
    SUSPENDED = 'suspended', 'Suspended'
    PENDING = 'pending', 'Pending'
    REJECTED = 'rejected', 'Rejected'


class RegistrationStatus(BaseEnum):
    ACTIVE = 'active', 'Active'
    PENDING = 'pending', 'Pending'
    EXPIRED = 'expired', 'Expired'
    SUSPENDED = 'suspended', 'Suspended'


class RecurringPeriod(BaseEnum):
    MONTHLY = 'monthly', 'Monthly'
    QUARTERLY = 'quarterly', 'Quarterly'
    SEMI_ANNUAL = 'semi-annual', 'Semi-Annual'
    ANNUAL = 'annual', 'Annual'


class DueAssignmentType(BaseEnum):
    INDIVIDUAL = 'individual', 'Individual'
    BULK = 'bulk', 'Bulk'


class DuePaymentStatus(BaseEnum):
    PENDING = 'pending', 'Pending'
    PARTIALLY_PAID = 'partially_paid', 'Partially Paid'
    PAID = 'paid', 'Paid'
    OVERDUE = 'overdue', 'Overdue'


class PaymentMethod(BaseEnum):
    BANK_TRANSFER = 'bank_transfer', 'Bank Transfer'
    CASH = 'cash', 'Cash'
    CHEQUE = 'cheque', 'Cheque'
    MOBILE_PAYMENT = 'mobile_payment', 'Mobile Payment'


class SubmissionStatus(BaseEnum):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class EventType(BaseEnum):
    MEETINGS = 'meetings', 'Meetings'
    CONFERENCE = 'conference', 'Conference'
    WORKSHOP = 'workshop', 'Workshop'
    SEMINAR = 'seminar', 'Seminar'
    TRAINING = 'training', 'Training'
    SOCIAL = 'social', 'Social'
    STATE_EVENTS = 'state_events', 'State Events'
    OTHER = 'other', 'Other'


class EventStatus(BaseEnum):
    DRAFT = 'draft', 'Draft'
    PUBLISHED = 'published', 'Published'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class AttendanceStatus(BaseEnum):
    REGISTERED = 'registered', 'Registered'
    PRESENT = 'present', 'Present'
    ABSENT = 'absent', 'Absent'
    CANCELLED = 'cancelled', 'Cancelled'
