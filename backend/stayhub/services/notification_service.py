# backend/stayhub/services/notification_service.py
"""
In-App Notification Service

알림 1건(수신자 1명, 이벤트 1개) 생성 + 조회/읽음 처리.
다른 서비스에서는 NotificationEvents(이벤트별 헬퍼)를 통해 호출한다.

notify() 규칙:
1. 수신자 설정 조회 → 꺼져 있으면 아무것도 안 함
   (설정 항목에 없는 타입 = refund_* 는 항상 켜짐)
2. notifications row 저장
3. 저장된 row 그대로 WebSocket 전송 (member → 대시보드, customer → 포털)

알림은 best-effort. 저장/전송 실패는 로그만 남기고
호출한 비즈니스 로직(예약/결제 등)으로 절대 예외를 올리지 않는다.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.orm import Session

from stayhub.core.exceptions import (
    ChannelEmitFailure,
    NotificationError,
    ValidationFailure,
)
from stayhub.domain.dtos.notification_payloads import NotificationData
from stayhub.domain.dtos.recipient import Recipient
from stayhub.domain.models.notification import Notification, NotificationType
from stayhub.repositories.notification_repository import NotificationRepository
from stayhub.services.notification_preference_service import NotificationPreferenceService

logger = logging.getLogger(__name__)


class NotificationChannel(Protocol):
    """실시간 전송 채널 (기본: ws_manager)"""

    async def emit_dashboard(self, tenant_id: str, notification: Dict[str, Any]) -> Any: ...

    async def emit_customer(self, customer_id: str, notification: Dict[str, Any]) -> Any: ...


class NotifyStatus(str, enum.Enum):
    delivered = "delivered"
    disabled = "disabled"              # 수신자가 끈 알림
    persist_failed = "persist_failed"
    emit_failed = "emit_failed"        # 저장은 됨, 실시간 전송만 실패
    invalid = "invalid"


@dataclass
class NotifyResult:
    """notify 처리 결과 (테스트/로그용)"""
    status: NotifyStatus
    notification: Optional[Notification] = None
    error: Optional[Exception] = None

    @property
    def persisted(self) -> bool:
        return self.notification is not None


class NotificationService:
    def __init__(
        self,
        db: Session,
        channel: Optional[NotificationChannel] = None,
        preferences: Optional[NotificationPreferenceService] = None,
    ):
        self.db = db
        self.repo = NotificationRepository(db)
        self.preferences = preferences or NotificationPreferenceService(db)
        self._channel = channel

    @property
    def channel(self) -> NotificationChannel:
        """ws_manager lazy loading (import cycle 방지)"""
        if self._channel is None:
            from stayhub.services.ws_manager import ws_manager
            self._channel = ws_manager
        return self._channel

    # ------------------------------------------------------------------
    # 생성
    # ------------------------------------------------------------------

    async def notify(
        self,
        tenant_id: str,
        recipient: Recipient,
        type: NotificationType,
        title: str,
        message: Optional[str] = None,
        link_type: Optional[str] = None,
        link_id: Optional[str] = None,
        data: Optional[NotificationData] = None,
    ) -> None:
        """알림 생성 (fire-and-forget). 어떤 경우에도 예외를 던지지 않음"""
        try:
            result = await self.deliver(
                tenant_id,
                recipient,
                type,
                title,
                message=message,
                link_type=link_type,
                link_id=link_id,
                data=data,
            )
        except Exception as e:
            logger.exception(f"Unexpected error creating {_type_value(type)} notification: {e}")
            return

        if result.status in (NotifyStatus.persist_failed, NotifyStatus.invalid):
            logger.error(
                f"Notification {_type_value(type)} not created for "
                f"{_recipient_label(recipient)}: {result.error}"
            )
        elif result.status == NotifyStatus.emit_failed:
            logger.warning(
                f"Notification {result.notification.id} ({_type_value(type)}) saved but "
                f"real-time emit failed for {_recipient_label(recipient)}: {result.error}"
            )

    async def deliver(
        self,
        tenant_id: str,
        recipient: Recipient,
        type: NotificationType,
        title: str,
        *,
        message: Optional[str] = None,
        link_type: Optional[str] = None,
        link_id: Optional[str] = None,
        data: Optional[NotificationData] = None,
    ) -> NotifyResult:
        """notify 본체. 실패를 예외 대신 NotifyResult 로 돌려준다"""
        type_value = _type_value(type)

        if not tenant_id or not isinstance(recipient, Recipient):
            return NotifyResult(
                status=NotifyStatus.invalid,
                error=ValidationFailure("tenant_id and recipient are required"),
            )

        # 1) 설정 확인 (설정 항목에 없는 타입은 켜진 것으로 간주)
        preferences = self.preferences.resolve_preferences(tenant_id, recipient)
        if not preferences.get(type_value, True):
            logger.info(f"Notification {type_value} disabled by {recipient.label}, skipping")
            return NotifyResult(status=NotifyStatus.disabled)

        # 2) 저장
        try:
            notification = self.repo.create(
                tenant_id=tenant_id,
                member_id=recipient.member_id,
                customer_id=recipient.customer_id,
                type=type_value,
                title=title,
                message=message,
                link_type=_link_value(link_type),
                link_id=link_id,
                data=data.model_dump(mode="json") if data is not None else None,
            )
        except NotificationError as e:
            return NotifyResult(status=NotifyStatus.persist_failed, error=e)

        logger.info(f"Notification created: {notification.id} ({type_value}) for {recipient.label}")

        # 3) 실시간 전송 (실패해도 저장은 유지, 재시도 없음)
        payload = notification.to_dict()
        try:
            if recipient.is_member:
                await self.channel.emit_dashboard(tenant_id, payload)
            else:
                await self.channel.emit_customer(recipient.customer_id, payload)
        except Exception as e:
            error = ChannelEmitFailure(f"{e.__class__.__name__}: {e}")
            return NotifyResult(
                status=NotifyStatus.emit_failed,
                notification=notification,
                error=error,
            )

        return NotifyResult(status=NotifyStatus.delivered, notification=notification)

    # ------------------------------------------------------------------
    # 조회 / 읽음 처리
    # member: tenant_id 필수 / customer: tenant_id 선택
    # ------------------------------------------------------------------

    def list_notifications(
        self,
        tenant_id: Optional[str],
        member_id: Optional[str] = None,
        customer_id: Optional[str] = None,
        *,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> Dict[str, Any]:
        """알림 목록 {"notifications", "total", "unread"}"""
        empty = {"notifications": [], "total": 0, "unread": 0}

        filters = self.repo.recipient_filters(tenant_id, member_id, customer_id)
        if filters is None:
            return empty

        try:
            rows, total = self.repo.list_for_recipient(
                filters,
                unread_only=unread_only,
                limit=limit,
                offset=offset,
            )
            unread = self.repo.count_unread(filters)
        except NotificationError as e:
            logger.error(f"Error fetching notifications: {e}")
            return empty

        return {"notifications": rows, "total": total, "unread": unread}

    def count_unread(
        self,
        tenant_id: Optional[str],
        member_id: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> int:
        """미읽음 알림 개수 (Bell 뱃지용)"""
        filters = self.repo.recipient_filters(tenant_id, member_id, customer_id)
        if filters is None:
            return 0
        try:
            return self.repo.count_unread(filters)
        except NotificationError as e:
            logger.error(f"Error fetching unread count: {e}")
            return 0

    def mark_read(
        self,
        notification_id: str,
        tenant_id: Optional[str],
        member_id: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> bool:
        """알림 읽음 처리. 본인 알림이 아니거나 없으면 False"""
        filters = self.repo.recipient_filters(tenant_id, member_id, customer_id)
        if filters is None:
            return False
        try:
            return self.repo.mark_as_read(notification_id, filters) > 0
        except NotificationError as e:
            logger.error(f"Error marking notification {notification_id} as read: {e}")
            return False

    def mark_all_read(
        self,
        tenant_id: Optional[str],
        member_id: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> bool:
        """모든 알림 읽음 처리 (여러 번 호출해도 결과 동일)"""
        filters = self.repo.recipient_filters(tenant_id, member_id, customer_id)
        if filters is None:
            return False
        try:
            count = self.repo.mark_all_as_read(filters)
        except NotificationError as e:
            logger.error(f"Error marking all notifications as read: {e}")
            return False
        logger.debug(f"Marked {count} notifications as read")
        return True


def _type_value(notification_type: Any) -> str:
    return getattr(notification_type, "value", notification_type)


def _link_value(link_type: Any) -> Optional[str]:
    if link_type is None:
        return None
    return getattr(link_type, "value", link_type)


def _recipient_label(recipient: Any) -> str:
    return recipient.label if isinstance(recipient, Recipient) else repr(recipient)
