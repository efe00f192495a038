"""
Tenant / TenantMember

- Tenant: 숙소 운영 조직 (방, 예약, 스태프, 고객 소유)
- TenantMember: 조직에 속한 스태프 계정 (user_id 로 실제 로그인 계정과 연결)

가입/초대/삭제 흐름은 이 서브시스템 밖이고, 여기서는 알림 수신자 계산에만 사용한다.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from stayhub.db.base import Base


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INVITED = "invited"      # 초대 수락 전
    INACTIVE = "inactive"
    REMOVED = "removed"


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # 오너는 tenant_members 에 active 로 없을 수도 있음 (RecipientResolver 참고)
    owner_user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Tenant {self.id} name={self.name}>"


class TenantMember(Base):
    __tablename__ = "tenant_members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MemberStatus.ACTIVE.value
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        Index("idx_tenant_members_tenant_status", "tenant_id", "status"),
        Index("idx_tenant_members_tenant_user", "tenant_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<TenantMember {self.id} tenant={self.tenant_id} status={self.status}>"
