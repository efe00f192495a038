# backend/stayhub/domain/models/__init__.py

from stayhub.db.base import Base

from .tenant import Tenant, TenantMember, MemberStatus
from .customer import Customer
from .booking import Room, Booking, BookingStatus, PaymentStatus
from .notification import Notification, NotificationType, NotificationLinkType
from .notification_preference import NotificationPreference

__all__ = [
    "Base",
    "Tenant",
    "TenantMember",
    "MemberStatus",
    "Customer",
    "Room",
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "Notification",
    "NotificationType",
    "NotificationLinkType",
    "NotificationPreference",
]
