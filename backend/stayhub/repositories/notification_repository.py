# backend/stayhub/repositories/notification_repository.py
"""
In-App Notification Repository

조회 범위 규칙 (member / customer):
- member: tenant_id 필수
- customer: tenant_id 는 선택 (없으면 모든 tenant 의 알림)
범위를 만들 수 없으면 None 을 돌려주고, 빈 결과 처리는 Service 에서 한다.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayhub.core.exceptions import StoreReadFailure, StoreWriteFailure
from stayhub.domain.models.notification import Notification


class NotificationRepository:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def recipient_filters(
        tenant_id: Optional[str],
        member_id: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> Optional[list]:
        if member_id:
            if not tenant_id:
                return None
            return [Notification.tenant_id == tenant_id, Notification.member_id == member_id]

        if customer_id:
            filters = [Notification.customer_id == customer_id]
            if tenant_id:
                filters.append(Notification.tenant_id == tenant_id)
            return filters

        return None

    # ------------------------------------------------------------------
    # 생성
    # ------------------------------------------------------------------

    def create(
        self,
        *,
        tenant_id: str,
        type: str,
        title: str,
        member_id: Optional[str] = None,
        customer_id: Optional[str] = None,
        message: Optional[str] = None,
        link_type: Optional[str] = None,
        link_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        notification = Notification(
            tenant_id=tenant_id,
            member_id=member_id,
            customer_id=customer_id,
            type=type,
            title=title,
            message=message,
            link_type=link_type,
            link_id=link_id,
            data=data,
            read_at=None,
        )
        try:
            self.db.add(notification)
            self.db.commit()
            self.db.refresh(notification)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreWriteFailure(f"notification insert failed: {e}") from e
        return notification

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    def list_for_recipient(
        self,
        filters: list,
        *,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Notification], int]:
        """(페이지 알림 목록, 필터 기준 전체 개수)"""
        conditions = list(filters)
        if unread_only:
            conditions.append(Notification.read_at.is_(None))

        stmt = (
            select(Notification)
            .where(*conditions)
            .order_by(desc(Notification.created_at))
            .limit(limit)
            .offset(offset)
        )
        count_stmt = select(func.count(Notification.id)).where(*conditions)

        try:
            rows = list(self.db.execute(stmt).scalars().all())
            total = self.db.execute(count_stmt).scalar() or 0
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"notification list failed: {e}") from e
        return rows, total

    def count_unread(self, filters: list) -> int:
        stmt = select(func.count(Notification.id)).where(
            *filters,
            Notification.read_at.is_(None),
        )
        try:
            return self.db.execute(stmt).scalar() or 0
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"unread count failed: {e}") from e

    # ------------------------------------------------------------------
    # 상태 변경
    # ------------------------------------------------------------------

    def mark_as_read(self, notification_id: str, filters: list) -> int:
        """읽음 처리된 row 수 (0 이면 대상 없음)"""
        stmt = (
            update(Notification)
            .where(Notification.id == notification_id, *filters)
            .values(read_at=datetime.utcnow())
        )
        return self._execute_update(stmt)

    def mark_all_as_read(self, filters: list) -> int:
        # 이미 읽은 알림은 read_at 유지
        stmt = (
            update(Notification)
            .where(*filters, Notification.read_at.is_(None))
            .values(read_at=datetime.utcnow())
        )
        return self._execute_update(stmt)

    def _execute_update(self, stmt) -> int:
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreWriteFailure(f"notification update failed: {e}") from e
        return result.rowcount or 0
