# backend/stayhub/repositories/booking_repository.py
"""
Booking Repository (스케줄러 알림 대상 조회 전용)
"""
from __future__ import annotations

from datetime import date
from typing import List

from sqlalchemy import asc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stayhub.core.exceptions import StoreReadFailure
from stayhub.domain.models.booking import Booking, BookingStatus, PaymentStatus


class BookingRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_confirmed_arrivals(self, check_in: date) -> List[Booking]:
        """check_in 당일 도착 예정인 확정 예약 (고객 계정 연결된 것만)"""
        stmt = (
            select(Booking)
            .where(
                Booking.check_in == check_in,
                Booking.status == BookingStatus.CONFIRMED.value,
                Booking.customer_id.is_not(None),
            )
            .order_by(asc(Booking.created_at), asc(Booking.id))
        )
        return self._fetch(stmt)

    def list_payment_overdue(self, today: date) -> List[Booking]:
        """체크인이 지났는데 아직 미결제인 예약"""
        stmt = (
            select(Booking)
            .where(
                Booking.check_in < today,
                Booking.payment_status == PaymentStatus.UNPAID.value,
                Booking.status.in_([
                    BookingStatus.CONFIRMED.value,
                    BookingStatus.CHECKED_IN.value,
                ]),
                Booking.customer_id.is_not(None),
                Booking.total_amount.is_not(None),
                Booking.total_amount > 0,
            )
            .order_by(asc(Booking.check_in), asc(Booking.id))
        )
        return self._fetch(stmt)

    def _fetch(self, stmt) -> List[Booking]:
        try:
            return list(self.db.execute(stmt).unique().scalars().all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreReadFailure(f"bookings select failed: {e}") from e
