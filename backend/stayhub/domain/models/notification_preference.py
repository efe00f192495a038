"""
알림 설정 (tenant, recipient) 단위 저장

preferences 컬럼은 JSON 그대로 저장한다.
- 예전 포맷: 카테고리 단위 {"bookings": true, "payments": false, ...}
- 현재 포맷: 타입 단위 {"booking_created": true, "payment_received": false, ...}
포맷 판별/변환은 NotificationPreferenceService 에서.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from stayhub.db.base import Base


class NotificationPreference(Base):
    __tablename__ = "notification_preferences"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )

    # upsert 키 (member_id 또는 customer_id)
    member_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, unique=True)
    customer_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, unique=True)

    preferences: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "(member_id IS NOT NULL AND customer_id IS NULL) OR "
            "(member_id IS NULL AND customer_id IS NOT NULL)",
            name="prefs_recipient_check",
        ),
    )

    def __repr__(self) -> str:
        owner = f"member={self.member_id}" if self.member_id else f"customer={self.customer_id}"
        return f"<NotificationPreference {self.id} tenant={self.tenant_id} {owner}>"
