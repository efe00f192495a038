# backend/stayhub/services/notification_preference_service.py
"""
Notification Preference Service

(tenant, recipient) 단위 알림 설정 조회/저장.

저장 포맷이 두 가지:
- 예전 포맷: 카테고리 단위 {"bookings": false, "payments": true, ...}
- 현재 포맷: 타입 단위 {"booking_created": false, ...}

예전 포맷 판별 규칙:
    카테고리 키(bookings/payments/reviews/support/system/members)가 하나라도 있고
    "booking_created" 키가 없으면 예전 포맷으로 본다.
    → 카테고리 값을 그 카테고리에 속한 모든 타입에 펼쳐서 적용

NOTE: 버전 필드가 아니라 키 존재 여부로 판별하므로,
booking_created 없이 저장된 현재 포맷 row 는 예전 포맷으로 오판될 수 있다.

조회/저장 모두 예외를 밖으로 던지지 않는다. (조회 실패 → 기본값, 저장 실패 → False)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from stayhub.core.exceptions import NotificationError
from stayhub.domain.dtos.recipient import Recipient
from stayhub.domain.enums.notification_category import (
    CURRENT_FORMAT_MARKER,
    DEFAULT_PREFERENCES,
    LEGACY_CATEGORY_KEYS,
    TYPE_TO_CATEGORY,
    PreferenceCategory,
)
from stayhub.domain.models.notification import NotificationType
from stayhub.repositories.notification_preference_repository import (
    NotificationPreferenceRepository,
)

logger = logging.getLogger(__name__)


def is_legacy_format(stored: Mapping[str, Any]) -> bool:
    has_category_key = any(key in stored for key in LEGACY_CATEGORY_KEYS)
    return has_category_key and CURRENT_FORMAT_MARKER not in stored


class NotificationPreferenceService:
    def __init__(
        self,
        db: Session,
        *,
        defaults: Mapping[str, bool] = DEFAULT_PREFERENCES,
        type_to_category: Mapping[NotificationType, PreferenceCategory] = TYPE_TO_CATEGORY,
    ):
        self.db = db
        self.repo = NotificationPreferenceRepository(db)
        self._defaults = defaults
        self._type_to_category = type_to_category

    def default_preferences(self) -> Dict[str, bool]:
        return dict(self._defaults)

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    def resolve_preferences(
        self,
        tenant_id: Optional[str],
        recipient: Optional[Recipient],
    ) -> Dict[str, bool]:
        """유효 설정 (타입 → on/off). 실패해도 기본값(전부 True) 반환"""
        if not tenant_id or recipient is None:
            return self.default_preferences()

        try:
            record = self.repo.get_for_recipient(tenant_id=tenant_id, recipient=recipient)
        except NotificationError as e:
            logger.error(
                f"Failed to load notification preferences for {recipient.label} "
                f"(tenant={tenant_id}): {e}"
            )
            return self.default_preferences()

        if record is None or not isinstance(record.preferences, dict):
            return self.default_preferences()

        return self.expand(record.preferences)

    # HTTP 레이어용 이름
    get_preferences = resolve_preferences

    def expand(self, stored: Mapping[str, Any]) -> Dict[str, bool]:
        """저장된 JSON → 타입 단위 설정 (기본값 위에 덮어쓰기)"""
        resolved = self.default_preferences()

        if is_legacy_format(stored):
            for notification_type, category in self._type_to_category.items():
                key = notification_type.value
                if key not in resolved:
                    continue
                if category.value in stored:
                    resolved[key] = bool(stored[category.value])
            return resolved

        for key, value in stored.items():
            # 설정 항목에 없는 키(refund_* 등)는 무시
            if key in resolved:
                resolved[key] = bool(value)
        return resolved

    # ------------------------------------------------------------------
    # 저장
    # ------------------------------------------------------------------

    def update_preferences(
        self,
        tenant_id: Optional[str],
        partial: Mapping[str, Any],
        recipient: Optional[Recipient],
    ) -> bool:
        """현재 유효 설정 + partial 병합 후 upsert. 성공 여부만 반환"""
        # tenant 없이는 어느 tenant 설정인지 알 수 없음
        if not tenant_id or recipient is None:
            logger.warning("Rejected preference update: tenant_id and recipient are required")
            return False

        unknown = [key for key in partial if key not in self._defaults]
        if unknown:
            logger.warning(
                f"Ignoring unknown preference keys for {recipient.label}: {sorted(unknown)}"
            )

        merged = self.resolve_preferences(tenant_id, recipient)
        for key, value in partial.items():
            if key in self._defaults:
                merged[key] = bool(value)

        try:
            self.repo.upsert(tenant_id=tenant_id, recipient=recipient, preferences=merged)
        except NotificationError as e:
            logger.error(
                f"Failed to update notification preferences for {recipient.label} "
                f"(tenant={tenant_id}): {e}"
            )
            return False

        logger.info(f"Notification preferences updated for {recipient.label} (tenant={tenant_id})")
        return True
