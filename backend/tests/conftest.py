"""Pytest configuration and shared fixtures."""

import os

# stayhub.core.config 가 import 시점에 읽으므로 먼저 설정
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import date, datetime, time, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any, Dict, List, Optional, Tuple  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import stayhub.domain.models  # noqa: E402,F401
from stayhub.db.base import Base  # noqa: E402
from stayhub.domain.models import (  # noqa: E402
    Booking,
    BookingStatus,
    Customer,
    MemberStatus,
    PaymentStatus,
    Room,
    Tenant,
    TenantMember,
)
from stayhub.services.notification_events import NotificationEvents  # noqa: E402
from stayhub.services.notification_service import NotificationService  # noqa: E402


# ─────────────────────────────────────────────────────────────
# DB
# ─────────────────────────────────────────────────────────────

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


# ─────────────────────────────────────────────────────────────
# Fake real-time channel
# ─────────────────────────────────────────────────────────────

class FakeChannel:
    """ws_manager 대용. 전송 내역 기록, fail=True 면 예외"""

    def __init__(self):
        self.dashboard: List[Tuple[str, Dict[str, Any]]] = []
        self.customer: List[Tuple[str, Dict[str, Any]]] = []
        self.fail = False

    async def emit_dashboard(self, tenant_id: str, notification: Dict[str, Any]) -> int:
        if self.fail:
            raise RuntimeError("socket closed")
        self.dashboard.append((tenant_id, notification))
        return 1

    async def emit_customer(self, customer_id: str, notification: Dict[str, Any]) -> int:
        if self.fail:
            raise RuntimeError("socket closed")
        self.customer.append((customer_id, notification))
        return 1


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def notifier(db, channel) -> NotificationService:
    return NotificationService(db, channel=channel)


@pytest.fixture
def events(db, notifier) -> NotificationEvents:
    return NotificationEvents(db, notifier=notifier)


# ─────────────────────────────────────────────────────────────
# Seed factories
# ─────────────────────────────────────────────────────────────

class Factory:
    def __init__(self, db: Session):
        self.db = db
        self._tick = datetime(2026, 1, 1, 9, 0, 0)

    def _next_created_at(self) -> datetime:
        # 생성 순서대로 정렬되도록 1초씩 증가
        self._tick += timedelta(seconds=1)
        return self._tick

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def tenant(self, *, name: str = "Seaview Guesthouse", owner_user_id: Optional[str] = None) -> Tenant:
        return self._save(Tenant(
            id=str(uuid4()),
            name=name,
            owner_user_id=owner_user_id,
            created_at=self._next_created_at(),
        ))

    def member(
        self,
        tenant: Tenant,
        *,
        user_id: Optional[str] = None,
        status: MemberStatus = MemberStatus.ACTIVE,
        name: str = "Staff",
    ) -> TenantMember:
        return self._save(TenantMember(
            id=str(uuid4()),
            tenant_id=tenant.id,
            user_id=user_id or str(uuid4()),
            name=name,
            status=status.value,
            created_at=self._next_created_at(),
        ))

    def customer(self, tenant: Optional[Tenant] = None, *, name: str = "Jane Guest") -> Customer:
        return self._save(Customer(
            id=str(uuid4()),
            tenant_id=tenant.id if tenant else None,
            name=name,
            email=f"{uuid4().hex[:8]}@example.com",
            created_at=self._next_created_at(),
        ))

    def room(
        self,
        tenant: Tenant,
        *,
        name: str = "Garden Suite",
        check_in_time: Optional[time] = None,
    ) -> Room:
        return self._save(Room(
            id=str(uuid4()),
            tenant_id=tenant.id,
            name=name,
            check_in_time=check_in_time,
            created_at=self._next_created_at(),
        ))

    def booking(
        self,
        tenant: Tenant,
        *,
        check_in: date,
        nights: int = 2,
        room: Optional[Room] = None,
        customer: Optional[Customer] = None,
        status: BookingStatus = BookingStatus.CONFIRMED,
        payment_status: PaymentStatus = PaymentStatus.PAID,
        total_amount: Optional[Decimal] = Decimal("1500.00"),
        currency: str = "ZAR",
        guest_name: str = "Jane Guest",
    ) -> Booking:
        return self._save(Booking(
            id=str(uuid4()),
            tenant_id=tenant.id,
            room_id=room.id if room else None,
            customer_id=customer.id if customer else None,
            guest_name=guest_name,
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            status=status.value,
            payment_status=payment_status.value,
            total_amount=total_amount,
            currency=currency,
            created_at=self._next_created_at(),
        ))


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)
