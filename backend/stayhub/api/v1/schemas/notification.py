from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from stayhub.domain.dtos.notification_payloads import NotificationData

Audience = Literal["staff", "customer", "both"]


class NotificationDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    member_id: Optional[str] = None
    customer_id: Optional[str] = None
    type: str
    title: str
    message: Optional[str] = None
    link_type: Optional[str] = None
    link_id: Optional[str] = None
    data: Optional[NotificationData] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationDTO]
    total: int
    unread: int


class UnreadCountResponse(BaseModel):
    count: int


class MarkReadResponse(BaseModel):
    success: bool
    notification_id: Optional[str] = None


class PreferencesResponse(BaseModel):
    preferences: Dict[str, bool]


class PreferencesUpdateRequest(BaseModel):
    # 일부 타입만 보내도 됨 (나머지는 현재 값 유지)
    preferences: Dict[str, bool]


class NotificationTypeDTO(BaseModel):
    type: str
    category: str
    audience: Audience
    preference_gated: bool


class NotificationTypeListResponse(BaseModel):
    types: List[NotificationTypeDTO]
