"""
In-App Notification API 엔드포인트 (스태프 대시보드)

인증은 앞단 게이트웨이가 처리하고, 로그인 정보는 헤더로 전달된다.
- X-Tenant-Id: 현재 tenant
- X-User-Id: 로그인 user (→ 이 tenant 의 member id 로 변환)

- GET /notifications - 알림 목록
- GET /notifications/unread-count - 미읽음 개수 (Bell 뱃지용)
- POST /notifications/{id}/read - 읽음 처리
- POST /notifications/read-all - 전체 읽음 처리
- GET /notifications/preferences - 알림 설정 조회
- PUT /notifications/preferences - 알림 설정 변경
- GET /notifications/types - 알림 타입 목록 (설정 화면용)
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from stayhub.api.v1.schemas.notification import (
    MarkReadResponse,
    NotificationDTO,
    NotificationListResponse,
    NotificationTypeDTO,
    NotificationTypeListResponse,
    PreferencesResponse,
    PreferencesUpdateRequest,
    UnreadCountResponse,
)
from stayhub.core.config import settings
from stayhub.db.session import get_db
from stayhub.domain.dtos.recipient import Recipient
from stayhub.domain.enums import (
    CUSTOMER_NOTIFICATION_TYPES,
    DEFAULT_PREFERENCES,
    STAFF_NOTIFICATION_TYPES,
    category_of,
)
from stayhub.domain.models.notification import NotificationType
from stayhub.services.notification_preference_service import NotificationPreferenceService
from stayhub.services.notification_service import NotificationService
from stayhub.services.recipient_resolver import RecipientResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _member_id(db: Session, tenant_id: str, user_id: str) -> Optional[str]:
    return RecipientResolver(db).resolve_member_id(tenant_id, user_id)


def _require_member_id(db: Session, tenant_id: str, user_id: str) -> str:
    member_id = _member_id(db, tenant_id, user_id)
    if not member_id:
        raise HTTPException(status_code=403, detail="Not a member of this tenant")
    return member_id


def _audience(notification_type: NotificationType) -> str:
    staff = notification_type in STAFF_NOTIFICATION_TYPES
    customer = notification_type in CUSTOMER_NOTIFICATION_TYPES
    if staff and customer:
        return "both"
    return "staff" if staff else "customer"


# ─────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────

@router.get("", response_model=NotificationListResponse)
def get_notifications(
    unread_only: bool = Query(False, description="미읽음만 조회"),
    limit: int = Query(settings.NOTIFICATION_PAGE_SIZE, ge=1, le=settings.NOTIFICATION_PAGE_SIZE_MAX),
    offset: int = Query(0, ge=0),
    x_tenant_id: str = Header(...),
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
):
    """알림 목록 조회"""
    member_id = _member_id(db, x_tenant_id, x_user_id)
    if not member_id:
        return NotificationListResponse(notifications=[], total=0, unread=0)

    result = NotificationService(db).list_notifications(
        x_tenant_id,
        member_id=member_id,
        limit=limit,
        offset=offset,
        unread_only=unread_only,
    )

    return NotificationListResponse(
        notifications=[NotificationDTO.model_validate(n) for n in result["notifications"]],
        total=result["total"],
        unread=result["unread"],
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    x_tenant_id: str = Header(...),
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
):
    """미읽음 알림 개수 (Bell 뱃지용)"""
    member_id = _member_id(db, x_tenant_id, x_user_id)
    if not member_id:
        return UnreadCountResponse(count=0)

    count = NotificationService(db).count_unread(x_tenant_id, member_id=member_id)
    return UnreadCountResponse(count=count)


@router.get("/types", response_model=NotificationTypeListResponse)
def get_notification_types():
    """알림 타입 카탈로그 (카테고리 / 대상 / 설정 가능 여부)"""
    return NotificationTypeListResponse(
        types=[
            NotificationTypeDTO(
                type=t.value,
                category=category_of(t.value).value,
                audience=_audience(t),
                preference_gated=t.value in DEFAULT_PREFERENCES,
            )
            for t in NotificationType
        ]
    )


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(
    x_tenant_id: str = Header(...),
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
):
    """알림 설정 조회 (저장된 값 없으면 전부 켜짐)"""
    member_id = _member_id(db, x_tenant_id, x_user_id)
    service = NotificationPreferenceService(db)

    if not member_id:
        return PreferencesResponse(preferences=service.default_preferences())

    return PreferencesResponse(
        preferences=service.get_preferences(x_tenant_id, Recipient.member(member_id))
    )


@router.put("/preferences", response_model=PreferencesResponse)
def update_preferences(
    body: PreferencesUpdateRequest,
    x_tenant_id: str = Header(...),
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
):
    """알림 설정 변경 (보낸 키만 덮어씀)"""
    member_id = _require_member_id(db, x_tenant_id, x_user_id)
    recipient = Recipient.member(member_id)
    service = NotificationPreferenceService(db)

    if not service.update_preferences(x_tenant_id, body.preferences, recipient):
        raise HTTPException(status_code=500, detail="Failed to update preferences")

    return PreferencesResponse(preferences=service.get_preferences(x_tenant_id, recipient))


@router.post("/read-all", response_model=MarkReadResponse)
def mark_all_notifications_as_read(
    x_tenant_id: str = Header(...),
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
):
    """모든 알림 읽음 처리"""
    member_id = _require_member_id(db, x_tenant_id, x_user_id)

    if not NotificationService(db).mark_all_read(x_tenant_id, member_id=member_id):
        raise HTTPException(status_code=500, detail="Failed to mark notifications as read")

    return MarkReadResponse(success=True)


@router.post("/{notification_id}/read", response_model=MarkReadResponse)
def mark_notification_as_read(
    notification_id: str,
    x_tenant_id: str = Header(...),
    x_user_id: str = Header(...),
    db: Session = Depends(get_db),
):
    """특정 알림 읽음 처리"""
    member_id = _require_member_id(db, x_tenant_id, x_user_id)

    if not NotificationService(db).mark_read(notification_id, x_tenant_id, member_id=member_id):
        raise HTTPException(status_code=404, detail="Notification not found")

    return MarkReadResponse(success=True, notification_id=notification_id)
