# backend/stayhub/domain/enums/__init__.py
from stayhub.domain.enums.notification_category import (
    PreferenceCategory,
    TYPE_TO_CATEGORY,
    LEGACY_CATEGORY_KEYS,
    CURRENT_FORMAT_MARKER,
    REFUND_NOTIFICATION_TYPES,
    DEFAULT_PREFERENCES,
    STAFF_NOTIFICATION_TYPES,
    CUSTOMER_NOTIFICATION_TYPES,
    category_of,
)

__all__ = [
    "PreferenceCategory",
    "TYPE_TO_CATEGORY",
    "LEGACY_CATEGORY_KEYS",
    "CURRENT_FORMAT_MARKER",
    "REFUND_NOTIFICATION_TYPES",
    "DEFAULT_PREFERENCES",
    "STAFF_NOTIFICATION_TYPES",
    "CUSTOMER_NOTIFICATION_TYPES",
    "category_of",
]
