"""Tests for the daily scheduled-notification job."""

from datetime import date, time, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from stayhub.core.exceptions import StoreReadFailure
from stayhub.domain.models import Booking, BookingStatus, Notification, PaymentStatus
from stayhub.repositories.booking_repository import BookingRepository
from stayhub.services.notification_events import NotificationEvents
from stayhub.services.scheduler import run_scheduled_notifications

TODAY = date(2026, 3, 12)


@pytest.fixture
def seeded(factory):
    tenant = factory.tenant()
    customer = factory.customer(tenant)
    room = factory.room(tenant, name="Garden Suite", check_in_time=time(14, 0))

    matching = {
        "reminder": factory.booking(
            tenant, check_in=TODAY + timedelta(days=1), room=room, customer=customer,
        ),
        "check_in": factory.booking(
            tenant, check_in=TODAY, room=room, customer=customer,
        ),
        "overdue": factory.booking(
            tenant,
            check_in=TODAY - timedelta(days=3),
            room=room,
            customer=customer,
            payment_status=PaymentStatus.UNPAID,
            total_amount=Decimal("1500.00"),
        ),
    }

    # 대상 아님
    factory.booking(tenant, check_in=TODAY + timedelta(days=1), room=room, customer=customer,
                    status=BookingStatus.PENDING)
    factory.booking(tenant, check_in=TODAY + timedelta(days=1), room=room)
    factory.booking(tenant, check_in=TODAY + timedelta(days=2), room=room, customer=customer)
    factory.booking(tenant, check_in=TODAY - timedelta(days=2), room=room, customer=customer,
                    payment_status=PaymentStatus.UNPAID, status=BookingStatus.CANCELLED)
    factory.booking(tenant, check_in=TODAY - timedelta(days=2), room=room, customer=customer,
                    payment_status=PaymentStatus.UNPAID, total_amount=Decimal("0"))
    factory.booking(tenant, check_in=TODAY - timedelta(days=2), room=room, customer=customer,
                    payment_status=PaymentStatus.UNPAID, total_amount=None)
    factory.booking(tenant, check_in=TODAY - timedelta(days=2), room=room, customer=customer,
                    payment_status=PaymentStatus.PARTIAL)

    return tenant, customer, matching


@pytest.mark.asyncio
async def test_classifies_one_booking_per_category(db, seeded, events, channel):
    tenant, customer, matching = seeded

    counts = await run_scheduled_notifications(db=db, today=TODAY, events=events)

    assert counts == {"booking_reminders": 1, "check_in_reminders": 1, "payment_overdue": 1}

    rows = db.query(Notification).all()
    assert len(rows) == 3
    assert all(r.customer_id == customer.id and r.member_id is None for r in rows)

    by_type = {r.type: r for r in rows}
    assert by_type["booking_reminder"].link_id == matching["reminder"].id
    assert by_type["check_in_reminder"].link_id == matching["check_in"].id
    assert by_type["payment_overdue"].link_id == matching["overdue"].id

    assert "Check-in is from 14:00." in by_type["check_in_reminder"].message
    assert by_type["payment_overdue"].message == (
        "Payment of ZAR 1,500.00 for Garden Suite is overdue (check-in was Mar 9, 2026)"
    )
    assert len(channel.customer) == 3


@pytest.mark.asyncio
async def test_checked_in_unpaid_booking_is_overdue(db, factory, events):
    tenant = factory.tenant()
    customer = factory.customer(tenant)
    factory.booking(
        tenant, check_in=TODAY - timedelta(days=1), customer=customer,
        status=BookingStatus.CHECKED_IN, payment_status=PaymentStatus.UNPAID,
    )

    counts = await run_scheduled_notifications(db=db, today=TODAY, events=events)

    assert counts["payment_overdue"] == 1
    # 객실 없는 예약도 처리됨
    assert "your room" in db.query(Notification).one().message


@pytest.mark.asyncio
async def test_counts_attempts_even_when_preference_disables(db, seeded, events):
    from stayhub.domain.dtos.recipient import Recipient
    from stayhub.services.notification_preference_service import NotificationPreferenceService

    tenant, customer, _ = seeded
    NotificationPreferenceService(db).update_preferences(
        tenant.id, {"booking_reminder": False}, Recipient.customer(customer.id)
    )

    counts = await run_scheduled_notifications(db=db, today=TODAY, events=events)

    assert counts == {"booking_reminders": 1, "check_in_reminders": 1, "payment_overdue": 1}
    assert db.query(Notification).filter_by(type="booking_reminder").count() == 0


@pytest.mark.asyncio
async def test_per_booking_failure_does_not_stop_job(db, seeded, notifier):
    class BrokenReminders(NotificationEvents):
        async def notify_customer_booking_reminder(self, **kwargs):
            raise RuntimeError("template error")

    counts = await run_scheduled_notifications(
        db=db, today=TODAY, events=BrokenReminders(db, notifier=notifier)
    )

    assert counts == {"booking_reminders": 1, "check_in_reminders": 1, "payment_overdue": 1}
    assert {r.type for r in db.query(Notification).all()} == {"check_in_reminder", "payment_overdue"}


@pytest.mark.asyncio
async def test_failing_category_query_returns_partial_counts(db, seeded, events, monkeypatch):
    def broken_query(self, today):
        raise StoreReadFailure("connection reset")

    monkeypatch.setattr(BookingRepository, "list_payment_overdue", broken_query)

    counts = await run_scheduled_notifications(db=db, today=TODAY, events=events)

    assert counts == {"booking_reminders": 1, "check_in_reminders": 1, "payment_overdue": 0}


@pytest.mark.asyncio
async def test_rerun_same_day_sends_again(db, seeded, events):
    await run_scheduled_notifications(db=db, today=TODAY, events=events)
    await run_scheduled_notifications(db=db, today=TODAY, events=events)

    assert db.query(Notification).count() == 6


@pytest.mark.asyncio
async def test_store_lost_mid_batch_returns_counts_so_far(db, seeded, notifier):
    class StoreLost(NotificationEvents):
        async def notify_customer_booking_reminder(self, **kwargs):
            self.db.rollback()
            Notification.__table__.drop(bind=self.db.connection())
            Booking.__table__.drop(bind=self.db.connection())
            self.db.commit()
            raise RuntimeError("connection lost")

    counts = await run_scheduled_notifications(
        db=db, today=TODAY, events=StoreLost(db, notifier=notifier)
    )

    assert counts == {"booking_reminders": 1, "check_in_reminders": 0, "payment_overdue": 0}


@pytest.mark.asyncio
async def test_failed_category_query_rolls_back_before_next_category(db, seeded, events, monkeypatch):
    original_execute = db.execute
    calls = {"execute": 0, "rollback": 0}

    def flaky_execute(*args, **kwargs):
        calls["execute"] += 1
        if calls["execute"] == 1:
            raise OperationalError("SELECT bookings", {}, Exception("server closed the connection"))
        return original_execute(*args, **kwargs)

    original_rollback = db.rollback

    def counting_rollback():
        calls["rollback"] += 1
        original_rollback()

    monkeypatch.setattr(db, "execute", flaky_execute)
    monkeypatch.setattr(db, "rollback", counting_rollback)

    counts = await run_scheduled_notifications(db=db, today=TODAY, events=events)

    assert calls["rollback"] >= 1
    assert counts == {"booking_reminders": 0, "check_in_reminders": 1, "payment_overdue": 1}


def test_read_failure_rolls_back_session(db, monkeypatch):
    rolled_back = []

    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT bookings", {}, Exception("server closed the connection"))

    monkeypatch.setattr(db, "execute", broken_execute)
    monkeypatch.setattr(db, "rollback", lambda: rolled_back.append(True))

    with pytest.raises(StoreReadFailure):
        BookingRepository(db).list_payment_overdue(TODAY)

    assert rolled_back == [True]
