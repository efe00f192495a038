from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from stayhub.db.base import Base


class NotificationType(str, enum.Enum):
    # ===== 스태프 (대시보드) =====
    booking_created = "booking_created"
    booking_cancelled = "booking_cancelled"  # 고객 알림에서도 사용
    booking_modified = "booking_modified"
    booking_checked_in = "booking_checked_in"
    booking_checked_out = "booking_checked_out"
    room_blocked = "room_blocked"
    low_availability = "low_availability"
    payment_received = "payment_received"
    payment_proof_uploaded = "payment_proof_uploaded"
    payment_failed = "payment_failed"
    review_submitted = "review_submitted"
    support_ticket_created = "support_ticket_created"
    support_ticket_replied = "support_ticket_replied"  # 고객 알림에서도 사용
    sync_completed = "sync_completed"
    sync_failed = "sync_failed"
    export_completed = "export_completed"
    invoice_generated = "invoice_generated"
    portal_signup = "portal_signup"
    member_invited = "member_invited"
    member_joined = "member_joined"
    member_role_changed = "member_role_changed"
    member_removed = "member_removed"
    refund_requested = "refund_requested"
    refund_escalation = "refund_escalation"

    # ===== 고객 (포털) =====
    booking_confirmed = "booking_confirmed"
    booking_modified_customer = "booking_modified_customer"
    booking_reminder = "booking_reminder"    # 체크인 하루 전
    check_in_reminder = "check_in_reminder"  # 체크인 당일
    payment_confirmed = "payment_confirmed"
    payment_overdue = "payment_overdue"
    review_requested = "review_requested"
    review_response_added = "review_response_added"
    support_status_changed = "support_status_changed"
    portal_welcome = "portal_welcome"
    refund_approved = "refund_approved"
    refund_rejected = "refund_rejected"
    refund_completed = "refund_completed"


class NotificationLinkType(str, enum.Enum):
    booking = "booking"
    review = "review"
    support = "support"
    customer = "customer"
    room = "room"
    settings = "settings"
    refund = "refund"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )

    # 수신자 (member 또는 customer, 둘 중 하나만)
    member_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    customer_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    # 알림 내용
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # 연결 링크
    link_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    link_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    # 타입별 payload (domain/dtos/notification_payloads.py)
    data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # 상태
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # 타임스탬프
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "(member_id IS NOT NULL AND customer_id IS NULL) OR "
            "(member_id IS NULL AND customer_id IS NOT NULL)",
            name="notification_recipient_check",
        ),
        Index("idx_notifications_member", "member_id", "read_at"),
        Index("idx_notifications_customer", "customer_id", "read_at"),
        Index("idx_notifications_tenant", "tenant_id", "created_at"),
        Index("idx_notifications_type", "type"),
    )

    def __repr__(self) -> str:
        return f"<Notification {self.id} type={self.type}>"

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def to_dict(self) -> Dict[str, Any]:
        """WebSocket 전송용 (저장된 row 그대로)"""
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "member_id": self.member_id,
            "customer_id": self.customer_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "link_type": self.link_type,
            "link_id": self.link_id,
            "data": self.data,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
