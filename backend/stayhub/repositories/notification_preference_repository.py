# backend/stayhub/repositories/notification_preference_repository.py
"""
Notification Preference Repository
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayhub.core.exceptions import StoreReadFailure, StoreWriteFailure
from stayhub.domain.dtos.recipient import Recipient
from stayhub.domain.models.notification_preference import NotificationPreference


class NotificationPreferenceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_for_recipient(
        self,
        *,
        tenant_id: str,
        recipient: Recipient,
    ) -> Optional[NotificationPreference]:
        stmt = select(NotificationPreference).where(
            NotificationPreference.tenant_id == tenant_id
        )
        if recipient.is_member:
            stmt = stmt.where(NotificationPreference.member_id == recipient.member_id)
        else:
            stmt = stmt.where(NotificationPreference.customer_id == recipient.customer_id)

        try:
            return self.db.execute(stmt.limit(1)).scalars().first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"preference select failed: {e}") from e

    def get_by_owner(self, recipient: Recipient) -> Optional[NotificationPreference]:
        """upsert 키(member_id / customer_id) 기준 조회"""
        if recipient.is_member:
            stmt = select(NotificationPreference).where(
                NotificationPreference.member_id == recipient.member_id
            )
        else:
            stmt = select(NotificationPreference).where(
                NotificationPreference.customer_id == recipient.customer_id
            )
        try:
            return self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"preference select failed: {e}") from e

    def upsert(
        self,
        *,
        tenant_id: str,
        recipient: Recipient,
        preferences: Dict[str, Any],
    ) -> NotificationPreference:
        """설정 생성 또는 업데이트 (member_id / customer_id 기준)"""
        existing = self.get_by_owner(recipient)

        try:
            if existing:
                existing.tenant_id = tenant_id
                existing.preferences = dict(preferences)
                existing.updated_at = datetime.utcnow()
                record = existing
            else:
                record = NotificationPreference(
                    tenant_id=tenant_id,
                    member_id=recipient.member_id,
                    customer_id=recipient.customer_id,
                    preferences=dict(preferences),
                )
                self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreWriteFailure(f"preference upsert failed: {e}") from e
        return record
