# backend/stayhub/repositories/tenant_member_repository.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import asc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayhub.core.exceptions import StoreReadFailure
from stayhub.domain.models.tenant import MemberStatus, Tenant, TenantMember


class TenantMemberRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_tenant(self, tenant_id: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        try:
            return self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"tenant select failed: {e}") from e

    def list_active(self, tenant_id: str) -> List[TenantMember]:
        stmt = (
            select(TenantMember)
            .where(
                TenantMember.tenant_id == tenant_id,
                TenantMember.status == MemberStatus.ACTIVE.value,
            )
            .order_by(asc(TenantMember.created_at), asc(TenantMember.id))
        )
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"tenant_members select failed: {e}") from e

    def find_by_user(
        self,
        tenant_id: str,
        user_id: str,
        *,
        status: Optional[str] = None,
    ) -> Optional[TenantMember]:
        """(tenant, user) 의 member row. status 를 안 주면 상태 무관"""
        stmt = select(TenantMember).where(
            TenantMember.tenant_id == tenant_id,
            TenantMember.user_id == user_id,
        )
        if status:
            stmt = stmt.where(TenantMember.status == status)
        stmt = stmt.order_by(asc(TenantMember.created_at)).limit(1)

        try:
            return self.db.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"tenant_members select failed: {e}") from e
