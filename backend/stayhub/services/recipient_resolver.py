# backend/stayhub/services/recipient_resolver.py
"""
Recipient Resolver

tenant 전체 대상 알림(스태프 알림)의 수신 member 목록 계산.

- active member 전부
- + 오너: 오너가 active member 로 안 잡히는 경우가 있음
  (온보딩 중이거나 status 가 다른 row 만 있는 경우)
  → 상태 무관하게 오너의 member row 를 찾아서 추가 (중복 없이)
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from stayhub.core.exceptions import NotificationError
from stayhub.domain.models.tenant import MemberStatus
from stayhub.repositories.tenant_member_repository import TenantMemberRepository

logger = logging.getLogger(__name__)


class RecipientResolver:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TenantMemberRepository(db)

    def resolve_staff_recipients(self, tenant_id: str) -> List[str]:
        """알림 받을 member id 목록 (순서 유지, 중복 없음). 없으면 빈 리스트"""
        member_ids: List[str] = []
        member_user_ids = set()

        try:
            for member in self.repo.list_active(tenant_id):
                if member.id not in member_ids:
                    member_ids.append(member.id)
                member_user_ids.add(member.user_id)

            tenant = self.repo.get_tenant(tenant_id)
            owner_user_id = tenant.owner_user_id if tenant else None

            if owner_user_id and owner_user_id not in member_user_ids:
                # 오너가 active member 가 아님 → 상태 무관 member row 확인
                owner_member = self.repo.find_by_user(tenant_id, owner_user_id)
                if owner_member and owner_member.id not in member_ids:
                    member_ids.append(owner_member.id)
                    logger.debug(f"Added owner member to recipients: {owner_member.id}")

        except NotificationError as e:
            logger.error(f"Failed to resolve staff recipients for tenant {tenant_id}: {e}")

        return member_ids

    def resolve_member_id(self, tenant_id: str, user_id: str) -> Optional[str]:
        """
        로그인 user → 이 tenant 의 member id

        - 오너: 상태 무관하게 member row 가 있으면 그 id
        - 일반 스태프: active member 만
        """
        try:
            tenant = self.repo.get_tenant(tenant_id)
            if tenant and tenant.owner_user_id == user_id:
                member = self.repo.find_by_user(tenant_id, user_id)
            else:
                member = self.repo.find_by_user(
                    tenant_id, user_id, status=MemberStatus.ACTIVE.value
                )
        except NotificationError as e:
            logger.error(f"Failed to resolve member for user {user_id} (tenant={tenant_id}): {e}")
            return None

        return member.id if member else None
