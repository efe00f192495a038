# backend/stayhub/domain/dtos/notification_payloads.py
"""
Notification.data Payload DTOs

알림 row 의 data 컬럼에 저장되는 타입별 payload.
- Dict[str, Any] 대신 kind 태그로 구분되는 Pydantic 모델 사용
- 저장 시 model_dump(mode="json"), 응답 시 NotificationDTO.data 로 검증
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class BookingData(BaseModel):
    kind: Literal["booking"] = "booking"
    booking_id: str
    guest_name: Optional[str] = None
    room_name: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    check_in_time: Optional[str] = Field(None, description="객실 체크인 시작 시간 (예: 14:00)")
    reason: Optional[str] = None
    changes: List[str] = Field(default_factory=list)
    ticket_id: Optional[str] = None
    refund_requested: bool = False


class PaymentData(BaseModel):
    kind: Literal["payment"] = "payment"
    booking_id: str
    guest_name: Optional[str] = None
    room_name: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    due_since: Optional[date] = None
    invoice_number: Optional[str] = None
    reason: Optional[str] = None


class ReviewData(BaseModel):
    kind: Literal["review"] = "review"
    booking_id: Optional[str] = None
    review_id: Optional[str] = None
    guest_name: Optional[str] = None
    room_name: Optional[str] = None
    rating: Optional[int] = None


class SupportData(BaseModel):
    kind: Literal["support"] = "support"
    ticket_id: str
    customer_name: Optional[str] = None
    subject: Optional[str] = None
    status: Optional[str] = None


class SyncData(BaseModel):
    kind: Literal["sync"] = "sync"
    source: str = Field(..., description="ical / booking_com / csv_export ...")
    room_id: Optional[str] = None
    room_name: Optional[str] = None
    item_count: Optional[int] = None
    error: Optional[str] = None


class MemberData(BaseModel):
    kind: Literal["member"] = "member"
    member_name: Optional[str] = None
    business_name: Optional[str] = None
    role_name: Optional[str] = None


class RoomData(BaseModel):
    kind: Literal["room"] = "room"
    room_id: str
    room_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rooms_left: Optional[int] = None
    reason: Optional[str] = None


class RefundData(BaseModel):
    kind: Literal["refund"] = "refund"
    refund_id: str
    booking_id: Optional[str] = None
    guest_name: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    days_pending: Optional[int] = None
    reason: Optional[str] = None
    reference: Optional[str] = None


class CustomerData(BaseModel):
    kind: Literal["customer"] = "customer"
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    business_name: Optional[str] = None


NotificationData = Annotated[
    Union[
        BookingData,
        PaymentData,
        ReviewData,
        SupportData,
        SyncData,
        MemberData,
        RoomData,
        RefundData,
        CustomerData,
    ],
    Field(discriminator="kind"),
]
