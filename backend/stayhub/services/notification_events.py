# backend/stayhub/services/notification_events.py
"""
Notification Events - 비즈니스 이벤트별 알림 헬퍼

예약/결제/리뷰/지원/환불 등 다른 도메인 로직에서 호출한다.
각 헬퍼는 title/message 문구와 data payload 를 만들고,

- 스태프 알림: RecipientResolver 로 수신 member 목록 계산 → member 마다 notify
- 고객 알림: customer 1명에게 notify
- 멤버 개인 알림(초대/권한 변경/제외): member 1명에게 notify

notify 는 예외를 던지지 않으므로 헬퍼도 호출자에게 예외를 올리지 않는다.
스태프 fan-out 은 순차 처리, 한 명 실패가 나머지에 영향 없음.
"""
from __future__ import annotations

import logging
from datetime import date, time
from decimal import Decimal
from typing import Optional, Sequence, Union

from sqlalchemy.orm import Session

from stayhub.domain.dtos.notification_payloads import (
    BookingData,
    CustomerData,
    MemberData,
    NotificationData,
    PaymentData,
    RefundData,
    ReviewData,
    RoomData,
    SupportData,
    SyncData,
)
from stayhub.domain.dtos.recipient import Recipient
from stayhub.domain.models.notification import NotificationLinkType, NotificationType
from stayhub.services.notification_formatting import (
    format_date,
    format_date_range,
    format_money,
    format_time,
    nights_between,
    pluralize,
    with_reason,
)
from stayhub.services.notification_service import NotificationService
from stayhub.services.recipient_resolver import RecipientResolver

logger = logging.getLogger(__name__)

Amount = Union[int, float, Decimal]

SUPPORT_STATUS_LABELS = {
    "open": "reopened",
    "in_progress": "being reviewed",
    "resolved": "resolved",
    "closed": "closed",
}


def _amount(value: Optional[Amount]) -> Optional[float]:
    return float(value) if value is not None else None


class NotificationEvents:
    def __init__(
        self,
        db: Session,
        notifier: Optional[NotificationService] = None,
        resolver: Optional[RecipientResolver] = None,
    ):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.resolver = resolver or RecipientResolver(db)

    # ------------------------------------------------------------------
    # 내부 전송
    # ------------------------------------------------------------------

    async def _notify_staff(
        self,
        tenant_id: str,
        type: NotificationType,
        title: str,
        message: Optional[str] = None,
        link_type: Optional[NotificationLinkType] = None,
        link_id: Optional[str] = None,
        data: Optional[NotificationData] = None,
    ) -> int:
        """tenant 스태프 전체에게 전송. 시도한 member 수 반환"""
        member_ids = self.resolver.resolve_staff_recipients(tenant_id)
        logger.debug(f"{type.value}: {len(member_ids)} staff recipients for tenant {tenant_id}")

        if not member_ids:
            logger.info(f"No staff recipients for tenant {tenant_id}, {type.value} not sent")
            return 0

        for member_id in member_ids:
            try:
                await self.notifier.notify(
                    tenant_id,
                    Recipient.member(member_id),
                    type,
                    title,
                    message=message,
                    link_type=link_type,
                    link_id=link_id,
                    data=data,
                )
            except Exception as e:
                # notify 자체는 예외를 던지지 않지만, 주입된 notifier 가 던져도 다음 member 진행
                logger.error(f"{type.value} fan-out failed for member:{member_id}: {e}")

        return len(member_ids)

    async def _notify_customer(
        self,
        tenant_id: str,
        customer_id: str,
        type: NotificationType,
        title: str,
        message: Optional[str] = None,
        link_type: Optional[NotificationLinkType] = None,
        link_id: Optional[str] = None,
        data: Optional[NotificationData] = None,
    ) -> None:
        if not customer_id:
            logger.warning(f"{type.value} skipped: customer_id is empty (tenant={tenant_id})")
            return
        await self.notifier.notify(
            tenant_id,
            Recipient.customer(customer_id),
            type,
            title,
            message=message,
            link_type=link_type,
            link_id=link_id,
            data=data,
        )

    async def _notify_member(
        self,
        tenant_id: str,
        member_id: str,
        type: NotificationType,
        title: str,
        message: Optional[str] = None,
        data: Optional[NotificationData] = None,
    ) -> None:
        if not member_id:
            logger.warning(f"{type.value} skipped: member_id is empty (tenant={tenant_id})")
            return
        await self.notifier.notify(
            tenant_id,
            Recipient.member(member_id),
            type,
            title,
            message=message,
            data=data,
        )

    # ==================================================================
    # 스태프: 예약
    # ==================================================================

    async def notify_new_booking(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        room_name: str,
        check_in: Optional[date] = None,
        check_out: Optional[date] = None,
    ) -> None:
        message = f"{guest_name} booked {room_name}"
        if check_in and check_out:
            nights = pluralize(nights_between(check_in, check_out), "night")
            message += f" for {format_date_range(check_in, check_out)} ({nights})"

        await self._notify_staff(
            tenant_id,
            NotificationType.booking_created,
            "New Booking",
            message,
            NotificationLinkType.booking,
            booking_id,
            BookingData(
                booking_id=booking_id,
                guest_name=guest_name,
                room_name=room_name,
                check_in=check_in,
                check_out=check_out,
            ),
        )

    async def notify_booking_cancelled(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        room_name: str,
        reason: Optional[str] = None,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.booking_cancelled,
            "Booking Cancelled",
            with_reason(f"{guest_name} cancelled their booking for {room_name}", reason),
            NotificationLinkType.booking,
            booking_id,
            BookingData(
                booking_id=booking_id,
                guest_name=guest_name,
                room_name=room_name,
                reason=reason,
            ),
        )

    async def notify_booking_cancelled_with_ticket(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        room_name: str,
        ticket_id: Optional[str] = None,
        reason: Optional[str] = None,
        refund_requested: bool = False,
    ) -> None:
        """고객이 포털에서 취소 (지원 티켓이 함께 생성된 경우 티켓으로 링크)"""
        title = "Booking Cancelled"
        if refund_requested:
            title += " [REFUND REQUESTED]"

        message = with_reason(f"{guest_name} cancelled their booking for {room_name}", reason)

        if ticket_id:
            link_type, link_id = NotificationLinkType.support, ticket_id
        else:
            link_type, link_id = NotificationLinkType.booking, booking_id

        await self._notify_staff(
            tenant_id,
            NotificationType.booking_cancelled,
            title,
            message,
            link_type,
            link_id,
            BookingData(
                booking_id=booking_id,
                guest_name=guest_name,
                room_name=room_name,
                reason=reason,
                ticket_id=ticket_id,
                refund_requested=refund_requested,
            ),
        )

    async def notify_booking_modified(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        room_name: str,
        changes: Sequence[str] = (),
    ) -> None:
        message = f"{guest_name}'s booking for {room_name} was modified"
        if changes:
            message += f": {', '.join(changes)}"

        await self._notify_staff(
            tenant_id,
            NotificationType.booking_modified,
            "Booking Modified",
            message,
            NotificationLinkType.booking,
            booking_id,
            BookingData(
                booking_id=booking_id,
                guest_name=guest_name,
                room_name=room_name,
                changes=list(changes),
            ),
        )

    async def notify_check_in(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        room_name: str,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.booking_checked_in,
            "Guest Checked In",
            f"{guest_name} checked in to {room_name}",
            NotificationLinkType.booking,
            booking_id,
            BookingData(booking_id=booking_id, guest_name=guest_name, room_name=room_name),
        )

    async def notify_check_out(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        room_name: str,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.booking_checked_out,
            "Guest Checked Out",
            f"{guest_name} checked out from {room_name}",
            NotificationLinkType.booking,
            booking_id,
            BookingData(booking_id=booking_id, guest_name=guest_name, room_name=room_name),
        )

    # ==================================================================
    # 스태프: 객실
    # ==================================================================

    async def notify_room_blocked(
        self,
        *,
        tenant_id: str,
        room_id: str,
        room_name: str,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> None:
        message = with_reason(
            f"{room_name} is blocked for {format_date_range(start_date, end_date)}",
            reason,
        )
        await self._notify_staff(
            tenant_id,
            NotificationType.room_blocked,
            "Room Blocked",
            message,
            NotificationLinkType.room,
            room_id,
            RoomData(
                room_id=room_id,
                room_name=room_name,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
            ),
        )

    async def notify_low_availability(
        self,
        *,
        tenant_id: str,
        room_id: str,
        room_name: str,
        rooms_left: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> None:
        message = f"Only {pluralize(rooms_left, 'unit')} left for {room_name}"
        if start_date and end_date:
            message += f" ({format_date_range(start_date, end_date)})"

        await self._notify_staff(
            tenant_id,
            NotificationType.low_availability,
            "Low Availability",
            message,
            NotificationLinkType.room,
            room_id,
            RoomData(
                room_id=room_id,
                room_name=room_name,
                rooms_left=rooms_left,
                start_date=start_date,
                end_date=end_date,
            ),
        )

    # ==================================================================
    # 스태프: 결제
    # ==================================================================

    async def notify_payment_received(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        amount: Amount,
        currency: str,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.payment_received,
            "Payment Received",
            f"{guest_name} paid {format_money(amount, currency)}",
            NotificationLinkType.booking,
            booking_id,
            PaymentData(
                booking_id=booking_id,
                guest_name=guest_name,
                amount=_amount(amount),
                currency=currency,
            ),
        )

    async def notify_payment_proof_uploaded(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        amount: Amount,
        currency: str,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.payment_proof_uploaded,
            "Payment Proof Uploaded",
            f"{guest_name} uploaded proof of payment ({format_money(amount, currency)})",
            NotificationLinkType.booking,
            booking_id,
            PaymentData(
                booking_id=booking_id,
                guest_name=guest_name,
                amount=_amount(amount),
                currency=currency,
            ),
        )

    async def notify_payment_failed(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        amount: Amount,
        currency: str,
        reason: Optional[str] = None,
    ) -> None:
        message = with_reason(
            f"Payment of {format_money(amount, currency)} from {guest_name} failed",
            reason,
        )
        await self._notify_staff(
            tenant_id,
            NotificationType.payment_failed,
            "Payment Failed",
            message,
            NotificationLinkType.booking,
            booking_id,
            PaymentData(
                booking_id=booking_id,
                guest_name=guest_name,
                amount=_amount(amount),
                currency=currency,
                reason=reason,
            ),
        )

    async def notify_invoice_generated(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        invoice_number: str,
        guest_name: Optional[str] = None,
        amount: Optional[Amount] = None,
        currency: Optional[str] = None,
    ) -> None:
        message = f"Invoice {invoice_number} generated"
        if guest_name:
            message += f" for {guest_name}"
        if amount is not None:
            message += f" ({format_money(amount, currency)})"

        await self._notify_staff(
            tenant_id,
            NotificationType.invoice_generated,
            "Invoice Generated",
            message,
            NotificationLinkType.booking,
            booking_id,
            PaymentData(
                booking_id=booking_id,
                guest_name=guest_name,
                amount=_amount(amount),
                currency=currency,
                invoice_number=invoice_number,
            ),
        )

    # ==================================================================
    # 스태프: 리뷰 / 지원
    # ==================================================================

    async def notify_new_review(
        self,
        *,
        tenant_id: str,
        booking_id: str,
        guest_name: str,
        room_name: str,
        rating: int,
        review_id: Optional[str] = None,
    ) -> None:
        if review_id:
            link_type, link_id = NotificationLinkType.review, review_id
        else:
            link_type, link_id = NotificationLinkType.booking, booking_id

        await self._notify_staff(
            tenant_id,
            NotificationType.review_submitted,
            f"New {rating}-Star Review",
            f"{guest_name} reviewed {room_name}",
            link_type,
            link_id,
            ReviewData(
                booking_id=booking_id,
                review_id=review_id,
                guest_name=guest_name,
                room_name=room_name,
                rating=rating,
            ),
        )

    async def notify_new_support_ticket(
        self,
        *,
        tenant_id: str,
        ticket_id: str,
        customer_name: str,
        subject: str,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.support_ticket_created,
            "New Support Ticket",
            f"{customer_name}: {subject}",
            NotificationLinkType.support,
            ticket_id,
            SupportData(ticket_id=ticket_id, customer_name=customer_name, subject=subject),
        )

    async def notify_customer_replied(
        self,
        *,
        tenant_id: str,
        ticket_id: str,
        customer_name: str,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.support_ticket_replied,
            "Customer Replied",
            f"{customer_name} replied to support ticket",
            NotificationLinkType.support,
            ticket_id,
            SupportData(ticket_id=ticket_id, customer_name=customer_name),
        )

    # ==================================================================
    # 스태프: 시스템 (동기화 / 내보내기)
    # ==================================================================

    async def notify_sync_completed(
        self,
        *,
        tenant_id: str,
        source: str,
        item_count: int,
        room_id: Optional[str] = None,
        room_name: Optional[str] = None,
    ) -> None:
        target = f" for {room_name}" if room_name else ""
        message = f"{source} sync completed{target}: {pluralize(item_count, 'booking')} imported"
        link_type = NotificationLinkType.room if room_id else NotificationLinkType.settings

        await self._notify_staff(
            tenant_id,
            NotificationType.sync_completed,
            "Calendar Sync Completed",
            message,
            link_type,
            room_id,
            SyncData(source=source, room_id=room_id, room_name=room_name, item_count=item_count),
        )

    async def notify_sync_failed(
        self,
        *,
        tenant_id: str,
        source: str,
        error: str,
        room_id: Optional[str] = None,
        room_name: Optional[str] = None,
    ) -> None:
        target = f" for {room_name}" if room_name else ""
        link_type = NotificationLinkType.room if room_id else NotificationLinkType.settings

        await self._notify_staff(
            tenant_id,
            NotificationType.sync_failed,
            "Calendar Sync Failed",
            f"{source} sync failed{target}: {error}",
            link_type,
            room_id,
            SyncData(source=source, room_id=room_id, room_name=room_name, error=error),
        )

    async def notify_export_completed(
        self,
        *,
        tenant_id: str,
        export_name: str,
        item_count: int,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.export_completed,
            "Export Ready",
            f"{export_name} export is ready ({pluralize(item_count, 'row')})",
            NotificationLinkType.settings,
            None,
            SyncData(source=export_name, item_count=item_count),
        )

    # ==================================================================
    # 스태프: 고객 / 팀
    # ==================================================================

    async def notify_portal_signup(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        customer_name: str,
    ) -> None:
        await self._notify_staff(
            tenant_id,
            NotificationType.portal_signup,
            "New Portal Signup",
            f"{customer_name} created a customer portal account",
            NotificationLinkType.customer,
            customer_id,
            CustomerData(customer_id=customer_id, customer_name=customer_name),
        )

    async def notify_member_joined(
        self,
        *,
        tenant_id: str,
        member_name: str,
        role_name: Optional[str] = None,
    ) -> None:
        message = f"{member_name} joined the team"
        if role_name:
            message += f" as {role_name}"

        await self._notify_staff(
            tenant_id,
            NotificationType.member_joined,
            "New Team Member",
            message,
            NotificationLinkType.settings,
            None,
            MemberData(member_name=member_name, role_name=role_name),
        )

    async def notify_member_invited(
        self,
        *,
        tenant_id: str,
        member_id: str,
        business_name: str,
    ) -> None:
        await self._notify_member(
            tenant_id,
            member_id,
            NotificationType.member_invited,
            "Team Invitation",
            f"You've been invited to join {business_name}",
            MemberData(business_name=business_name),
        )

    async def notify_member_role_changed(
        self,
        *,
        tenant_id: str,
        member_id: str,
        new_role_name: str,
    ) -> None:
        await self._notify_member(
            tenant_id,
            member_id,
            NotificationType.member_role_changed,
            "Role Updated",
            f"Your role has been changed to {new_role_name}",
            MemberData(role_name=new_role_name),
        )

    async def notify_member_removed(self, *, tenant_id: str, member_id: str) -> None:
        await self._notify_member(
            tenant_id,
            member_id,
            NotificationType.member_removed,
            "Team Access Removed",
            "You have been removed from the team",
        )

    # ==================================================================
    # 스태프: 환불
    # ==================================================================

    async def notify_refund_requested(
        self,
        *,
        tenant_id: str,
        refund_id: str,
        booking_id: str,
        guest_name: str,
        amount: Amount,
        currency: str,
        reason: Optional[str] = None,
    ) -> None:
        message = with_reason(
            f"{guest_name} requested a refund of {format_money(amount, currency)}",
            reason,
        )
        await self._notify_staff(
            tenant_id,
            NotificationType.refund_requested,
            "Refund Requested",
            message,
            NotificationLinkType.refund,
            refund_id,
            RefundData(
                refund_id=refund_id,
                booking_id=booking_id,
                guest_name=guest_name,
                amount=_amount(amount),
                currency=currency,
                reason=reason,
            ),
        )

    async def notify_refund_escalation(
        self,
        *,
        tenant_id: str,
        refund_id: str,
        guest_name: str,
        amount: Amount,
        currency: str,
        days_pending: int,
        booking_id: Optional[str] = None,
    ) -> None:
        """처리 안 된 환불 요청 재알림"""
        message = (
            f"Refund request from {guest_name} ({format_money(amount, currency)}) "
            f"has been pending for {pluralize(days_pending, 'day')}"
        )
        await self._notify_staff(
            tenant_id,
            NotificationType.refund_escalation,
            "Refund Pending Review",
            message,
            NotificationLinkType.refund,
            refund_id,
            RefundData(
                refund_id=refund_id,
                booking_id=booking_id,
                guest_name=guest_name,
                amount=_amount(amount),
                currency=currency,
                days_pending=days_pending,
            ),
        )

    # ==================================================================
    # 고객: 예약
    # ==================================================================

    async def notify_customer_booking_confirmed(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        room_name: str,
        check_in: date,
        check_out: Optional[date] = None,
    ) -> None:
        if check_out:
            when = format_date_range(check_in, check_out)
            message = f"Your booking for {room_name} ({when}) is confirmed"
        else:
            message = f"Your booking for {room_name} on {format_date(check_in)} is confirmed"

        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.booking_confirmed,
            "Booking Confirmed",
            message,
            NotificationLinkType.booking,
            booking_id,
            BookingData(
                booking_id=booking_id,
                room_name=room_name,
                check_in=check_in,
                check_out=check_out,
            ),
        )

    async def notify_customer_booking_cancelled(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        room_name: str,
        reason: Optional[str] = None,
    ) -> None:
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.booking_cancelled,
            "Booking Cancelled",
            with_reason(f"Your booking for {room_name} has been cancelled", reason),
            NotificationLinkType.booking,
            booking_id,
            BookingData(booking_id=booking_id, room_name=room_name, reason=reason),
        )

    async def notify_customer_booking_modified(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        room_name: str,
        changes: Sequence[str] = (),
    ) -> None:
        message = f"Your booking for {room_name} has been updated"
        if changes:
            message += f": {', '.join(changes)}"

        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.booking_modified_customer,
            "Booking Updated",
            message,
            NotificationLinkType.booking,
            booking_id,
            BookingData(booking_id=booking_id, room_name=room_name, changes=list(changes)),
        )

    async def notify_customer_booking_reminder(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        room_name: str,
        check_in: date,
        check_out: Optional[date] = None,
    ) -> None:
        """체크인 하루 전 리마인더"""
        message = f"Your stay at {room_name} starts tomorrow ({format_date(check_in)})"
        if check_out:
            message += f", {pluralize(nights_between(check_in, check_out), 'night')}"

        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.booking_reminder,
            "Upcoming Stay",
            message,
            NotificationLinkType.booking,
            booking_id,
            BookingData(
                booking_id=booking_id,
                room_name=room_name,
                check_in=check_in,
                check_out=check_out,
            ),
        )

    async def notify_customer_check_in_reminder(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        room_name: str,
        check_in_time: Optional[time] = None,
    ) -> None:
        """체크인 당일 리마인더"""
        time_label = format_time(check_in_time)
        message = f"Today is check-in day for {room_name}."
        if time_label:
            message += f" Check-in is from {time_label}."

        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.check_in_reminder,
            "Check-in Today",
            message,
            NotificationLinkType.booking,
            booking_id,
            BookingData(booking_id=booking_id, room_name=room_name, check_in_time=time_label),
        )

    # ==================================================================
    # 고객: 결제
    # ==================================================================

    async def notify_customer_payment_confirmed(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        amount: Amount,
        currency: str,
        room_name: Optional[str] = None,
    ) -> None:
        message = f"We received your payment of {format_money(amount, currency)}"
        if room_name:
            message += f" for {room_name}"

        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.payment_confirmed,
            "Payment Confirmed",
            message,
            NotificationLinkType.booking,
            booking_id,
            PaymentData(
                booking_id=booking_id,
                room_name=room_name,
                amount=_amount(amount),
                currency=currency,
            ),
        )

    async def notify_customer_payment_overdue(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        room_name: str,
        amount: Amount,
        currency: str,
        check_in: Optional[date] = None,
    ) -> None:
        message = f"Payment of {format_money(amount, currency)} for {room_name} is overdue"
        if check_in:
            message += f" (check-in was {format_date(check_in)})"

        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.payment_overdue,
            "Payment Overdue",
            message,
            NotificationLinkType.booking,
            booking_id,
            PaymentData(
                booking_id=booking_id,
                room_name=room_name,
                amount=_amount(amount),
                currency=currency,
                due_since=check_in,
            ),
        )

    # ==================================================================
    # 고객: 지원 / 리뷰 / 포털
    # ==================================================================

    async def notify_customer_support_reply(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        ticket_id: str,
        subject: Optional[str] = None,
    ) -> None:
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.support_ticket_replied,
            "Support Response",
            "You have a new reply on your support ticket",
            NotificationLinkType.support,
            ticket_id,
            SupportData(ticket_id=ticket_id, subject=subject),
        )

    async def notify_customer_support_status_changed(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        ticket_id: str,
        new_status: str,
    ) -> None:
        status_label = SUPPORT_STATUS_LABELS.get(new_status, new_status)
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.support_status_changed,
            "Ticket Status Updated",
            f"Your support ticket has been {status_label}",
            NotificationLinkType.support,
            ticket_id,
            SupportData(ticket_id=ticket_id, status=new_status),
        )

    async def notify_customer_review_requested(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        booking_id: str,
        room_name: str,
    ) -> None:
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.review_requested,
            "Share Your Experience",
            f"How was your stay at {room_name}? We'd love to hear your feedback!",
            NotificationLinkType.booking,
            booking_id,
            ReviewData(booking_id=booking_id, room_name=room_name),
        )

    async def notify_customer_review_response(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        room_name: str,
        review_id: Optional[str] = None,
    ) -> None:
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.review_response_added,
            "Response to Your Review",
            f"The property responded to your review for {room_name}",
            NotificationLinkType.review,
            review_id,
            ReviewData(review_id=review_id, room_name=room_name),
        )

    async def notify_portal_welcome(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        business_name: str,
    ) -> None:
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.portal_welcome,
            "Welcome!",
            f"Welcome to {business_name}. You can now manage your bookings here.",
            data=CustomerData(customer_id=customer_id, business_name=business_name),
        )

    # ==================================================================
    # 고객: 환불
    # ==================================================================

    async def notify_customer_refund_approved(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        refund_id: str,
        amount: Amount,
        currency: str,
        booking_id: Optional[str] = None,
    ) -> None:
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.refund_approved,
            "Refund Approved",
            f"Your refund of {format_money(amount, currency)} has been approved",
            NotificationLinkType.refund,
            refund_id,
            RefundData(
                refund_id=refund_id,
                booking_id=booking_id,
                amount=_amount(amount),
                currency=currency,
            ),
        )

    async def notify_customer_refund_rejected(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        refund_id: str,
        amount: Amount,
        currency: str,
        reason: Optional[str] = None,
        booking_id: Optional[str] = None,
    ) -> None:
        message = with_reason(
            f"Your refund request of {format_money(amount, currency)} was declined",
            reason,
        )
        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.refund_rejected,
            "Refund Declined",
            message,
            NotificationLinkType.refund,
            refund_id,
            RefundData(
                refund_id=refund_id,
                booking_id=booking_id,
                amount=_amount(amount),
                currency=currency,
                reason=reason,
            ),
        )

    async def notify_customer_refund_completed(
        self,
        *,
        tenant_id: str,
        customer_id: str,
        refund_id: str,
        amount: Amount,
        currency: str,
        reference: Optional[str] = None,
        booking_id: Optional[str] = None,
    ) -> None:
        message = f"Your refund of {format_money(amount, currency)} has been processed"
        if reference:
            message += f" (ref: {reference})"

        await self._notify_customer(
            tenant_id,
            customer_id,
            NotificationType.refund_completed,
            "Refund Completed",
            message,
            NotificationLinkType.refund,
            refund_id,
            RefundData(
                refund_id=refund_id,
                booking_id=booking_id,
                amount=_amount(amount),
                currency=currency,
                reference=reference,
            ),
        )

