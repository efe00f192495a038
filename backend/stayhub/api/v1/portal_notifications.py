"""
In-App Notification API 엔드포인트 (고객 포털)

- X-Customer-Id: 로그인 고객 (필수)
- X-Tenant-Id: 현재 보고 있는 숙소 (선택)
  없으면 모든 tenant 알림을 함께 보여준다.
  알림 설정은 tenant 단위라 설정 조회/변경에는 필수.
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
    PreferencesResponse,
    PreferencesUpdateRequest,
    UnreadCountResponse,
)
from stayhub.core.config import settings
from stayhub.db.session import get_db
from stayhub.domain.dtos.recipient import Recipient
from stayhub.services.notification_preference_service import NotificationPreferenceService
from stayhub.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/notifications", tags=["portal-notifications"])


def _require_tenant(x_tenant_id: Optional[str]) -> str:
    if not x_tenant_id:
        raise HTTPException(status_code=400, detail="X-Tenant-Id header is required")
    return x_tenant_id


# ─────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────

@router.get("", response_model=NotificationListResponse)
def get_notifications(
    unread_only: bool = Query(False, description="미읽음만 조회"),
    limit: int = Query(settings.NOTIFICATION_PAGE_SIZE, ge=1, le=settings.NOTIFICATION_PAGE_SIZE_MAX),
    offset: int = Query(0, ge=0),
    x_customer_id: str = Header(...),
    x_tenant_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    """고객 알림 목록"""
    result = NotificationService(db).list_notifications(
        x_tenant_id,
        customer_id=x_customer_id,
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
    x_customer_id: str = Header(...),
    x_tenant_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    count = NotificationService(db).count_unread(x_tenant_id, customer_id=x_customer_id)
    return UnreadCountResponse(count=count)


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(
    x_customer_id: str = Header(...),
    x_tenant_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    tenant_id = _require_tenant(x_tenant_id)
    preferences = NotificationPreferenceService(db).get_preferences(
        tenant_id, Recipient.customer(x_customer_id)
    )
    return PreferencesResponse(preferences=preferences)


@router.put("/preferences", response_model=PreferencesResponse)
def update_preferences(
    body: PreferencesUpdateRequest,
    x_customer_id: str = Header(...),
    x_tenant_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    tenant_id = _require_tenant(x_tenant_id)
    recipient = Recipient.customer(x_customer_id)
    service = NotificationPreferenceService(db)

    if not service.update_preferences(tenant_id, body.preferences, recipient):
        raise HTTPException(status_code=500, detail="Failed to update preferences")

    return PreferencesResponse(preferences=service.get_preferences(tenant_id, recipient))


@router.post("/read-all", response_model=MarkReadResponse)
def mark_all_notifications_as_read(
    x_customer_id: str = Header(...),
    x_tenant_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    if not NotificationService(db).mark_all_read(x_tenant_id, customer_id=x_customer_id):
        raise HTTPException(status_code=500, detail="Failed to mark notifications as read")
    return MarkReadResponse(success=True)


@router.post("/{notification_id}/read", response_model=MarkReadResponse)
def mark_notification_as_read(
    notification_id: str,
    x_customer_id: str = Header(...),
    x_tenant_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    if not NotificationService(db).mark_read(notification_id, x_tenant_id, customer_id=x_customer_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return MarkReadResponse(success=True, notification_id=notification_id)
