# backend/stayhub/domain/enums/notification_category.py
"""
Notification 카테고리 / 기본 설정 테이블

- 타입 → 카테고리 매핑은 고정 (UI 설정 화면 그룹핑 + 예전 카테고리 포맷 변환용)
- 모든 테이블은 import 시 한 번 만들어지는 읽기 전용 매핑 (MappingProxyType)
- refund_* 타입은 카테고리는 있지만 설정 항목(DEFAULT_PREFERENCES)에는 없음
  → 항상 발송됨 (DESIGN.md 참고)
"""
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from stayhub.domain.models.notification import NotificationType


class PreferenceCategory(str, Enum):
    BOOKINGS = "bookings"
    PAYMENTS = "payments"
    REVIEWS = "reviews"
    SUPPORT = "support"
    SYSTEM = "system"
    MEMBERS = "members"
    REFUNDS = "refunds"


_T = NotificationType
_C = PreferenceCategory

TYPE_TO_CATEGORY: Mapping[NotificationType, PreferenceCategory] = MappingProxyType({
    # ===== bookings =====
    _T.booking_created: _C.BOOKINGS,
    _T.booking_cancelled: _C.BOOKINGS,
    _T.booking_modified: _C.BOOKINGS,
    _T.booking_checked_in: _C.BOOKINGS,
    _T.booking_checked_out: _C.BOOKINGS,
    _T.room_blocked: _C.BOOKINGS,
    _T.low_availability: _C.BOOKINGS,
    _T.booking_confirmed: _C.BOOKINGS,
    _T.booking_modified_customer: _C.BOOKINGS,
    _T.booking_reminder: _C.BOOKINGS,
    _T.check_in_reminder: _C.BOOKINGS,
    # ===== payments =====
    _T.payment_received: _C.PAYMENTS,
    _T.payment_proof_uploaded: _C.PAYMENTS,
    _T.payment_failed: _C.PAYMENTS,
    _T.invoice_generated: _C.PAYMENTS,
    _T.payment_confirmed: _C.PAYMENTS,
    _T.payment_overdue: _C.PAYMENTS,
    # ===== reviews =====
    _T.review_submitted: _C.REVIEWS,
    _T.review_requested: _C.REVIEWS,
    _T.review_response_added: _C.REVIEWS,
    # ===== support =====
    _T.support_ticket_created: _C.SUPPORT,
    _T.support_ticket_replied: _C.SUPPORT,
    _T.support_status_changed: _C.SUPPORT,
    # ===== system =====
    _T.sync_completed: _C.SYSTEM,
    _T.sync_failed: _C.SYSTEM,
    _T.export_completed: _C.SYSTEM,
    _T.portal_signup: _C.SYSTEM,
    _T.portal_welcome: _C.SYSTEM,
    # ===== members =====
    _T.member_invited: _C.MEMBERS,
    _T.member_joined: _C.MEMBERS,
    _T.member_role_changed: _C.MEMBERS,
    _T.member_removed: _C.MEMBERS,
    # ===== refunds =====
    _T.refund_requested: _C.REFUNDS,
    _T.refund_approved: _C.REFUNDS,
    _T.refund_rejected: _C.REFUNDS,
    _T.refund_completed: _C.REFUNDS,
    _T.refund_escalation: _C.REFUNDS,
})

# 예전(카테고리 단위) 설정 포맷의 키 (refunds 는 예전 포맷에 없었음)
LEGACY_CATEGORY_KEYS = frozenset({
    _C.BOOKINGS.value,
    _C.PAYMENTS.value,
    _C.REVIEWS.value,
    _C.SUPPORT.value,
    _C.SYSTEM.value,
    _C.MEMBERS.value,
})

# 현재 포맷인지 판별하는 키
CURRENT_FORMAT_MARKER = _T.booking_created.value

REFUND_NOTIFICATION_TYPES = frozenset({
    _T.refund_requested,
    _T.refund_approved,
    _T.refund_rejected,
    _T.refund_completed,
    _T.refund_escalation,
})

# 설정 화면에서 켜고 끌 수 있는 타입 (refund_* 제외)
DEFAULT_PREFERENCES: Mapping[str, bool] = MappingProxyType({
    t.value: True for t in NotificationType if t not in REFUND_NOTIFICATION_TYPES
})


STAFF_NOTIFICATION_TYPES = frozenset({
    _T.booking_created,
    _T.booking_cancelled,
    _T.booking_modified,
    _T.booking_checked_in,
    _T.booking_checked_out,
    _T.room_blocked,
    _T.low_availability,
    _T.payment_received,
    _T.payment_proof_uploaded,
    _T.payment_failed,
    _T.review_submitted,
    _T.support_ticket_created,
    _T.support_ticket_replied,
    _T.sync_completed,
    _T.sync_failed,
    _T.export_completed,
    _T.invoice_generated,
    _T.portal_signup,
    _T.member_invited,
    _T.member_joined,
    _T.member_role_changed,
    _T.member_removed,
    _T.refund_requested,
    _T.refund_escalation,
})

CUSTOMER_NOTIFICATION_TYPES = frozenset({
    _T.booking_confirmed,
    _T.booking_cancelled,
    _T.booking_modified_customer,
    _T.booking_reminder,
    _T.check_in_reminder,
    _T.payment_confirmed,
    _T.payment_overdue,
    _T.review_requested,
    _T.review_response_added,
    _T.support_ticket_replied,
    _T.support_status_changed,
    _T.portal_welcome,
    _T.refund_approved,
    _T.refund_rejected,
    _T.refund_completed,
})


def category_of(notification_type: str) -> PreferenceCategory:
    return TYPE_TO_CATEGORY[NotificationType(notification_type)]
