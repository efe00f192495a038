"""Tests for notification delivery, listing and read-state."""

from datetime import datetime, timedelta

import pytest

from stayhub.core.exceptions import StoreWriteFailure
from stayhub.domain.dtos.notification_payloads import BookingData
from stayhub.domain.dtos.recipient import Recipient
from stayhub.domain.models import Notification, NotificationLinkType, NotificationType
from stayhub.repositories.notification_repository import NotificationRepository
from stayhub.services.notification_preference_service import NotificationPreferenceService
from stayhub.services.notification_service import NotificationService, NotifyStatus


@pytest.mark.asyncio
async def test_notify_persists_and_emits_to_dashboard(db, factory, notifier, channel):
    tenant = factory.tenant()
    member = factory.member(tenant)

    await notifier.notify(
        tenant.id,
        Recipient.member(member.id),
        NotificationType.booking_created,
        "New Booking",
        message="Jane booked Garden Suite",
        link_type=NotificationLinkType.booking,
        link_id="b-1",
        data=BookingData(booking_id="b-1", guest_name="Jane"),
    )

    row = db.query(Notification).one()
    assert row.member_id == member.id
    assert row.customer_id is None
    assert row.type == "booking_created"
    assert row.link_type == "booking"
    assert row.read_at is None
    assert row.data["kind"] == "booking"

    assert len(channel.dashboard) == 1
    tenant_id, payload = channel.dashboard[0]
    assert tenant_id == tenant.id
    assert payload["id"] == row.id
    assert payload["title"] == "New Booking"
    assert channel.customer == []


@pytest.mark.asyncio
async def test_notify_customer_emits_to_customer_channel(db, factory, notifier, channel):
    tenant = factory.tenant()
    customer = factory.customer(tenant)

    await notifier.notify(
        tenant.id, Recipient.customer(customer.id), NotificationType.booking_confirmed, "Booking Confirmed"
    )

    assert db.query(Notification).filter_by(customer_id=customer.id).count() == 1
    assert [c for c, _ in channel.customer] == [customer.id]
    assert channel.dashboard == []


@pytest.mark.asyncio
async def test_disabled_type_creates_nothing(db, factory, notifier, channel):
    tenant = factory.tenant()
    member = factory.member(tenant)
    recipient = Recipient.member(member.id)
    NotificationPreferenceService(db).update_preferences(tenant.id, {"booking_created": False}, recipient)

    result = await notifier.deliver(tenant.id, recipient, NotificationType.booking_created, "New Booking")

    assert result.status == NotifyStatus.disabled
    assert db.query(Notification).count() == 0
    assert channel.dashboard == []


@pytest.mark.asyncio
async def test_legacy_category_disables_type(db, factory, notifier, channel):
    from stayhub.domain.models import NotificationPreference

    tenant = factory.tenant()
    customer = factory.customer(tenant)
    db.add(NotificationPreference(
        tenant_id=tenant.id, customer_id=customer.id, preferences={"bookings": False}
    ))
    db.commit()

    await notifier.notify(
        tenant.id, Recipient.customer(customer.id), NotificationType.booking_reminder, "Upcoming Stay"
    )

    assert db.query(Notification).count() == 0


@pytest.mark.asyncio
async def test_refund_types_always_delivered(db, factory, notifier, channel):
    from stayhub.domain.models import NotificationPreference

    tenant = factory.tenant()
    customer = factory.customer(tenant)
    # refund 키를 꺼도 설정 항목이 아니라 무시됨
    db.add(NotificationPreference(
        tenant_id=tenant.id,
        customer_id=customer.id,
        preferences={"booking_created": True, "refund_approved": False},
    ))
    db.commit()

    result = await notifier.deliver(
        tenant.id, Recipient.customer(customer.id), NotificationType.refund_approved, "Refund Approved"
    )

    assert result.status == NotifyStatus.delivered
    assert db.query(Notification).filter_by(type="refund_approved").count() == 1


@pytest.mark.asyncio
async def test_emit_failure_keeps_row(db, factory, notifier, channel):
    tenant = factory.tenant()
    member = factory.member(tenant)
    channel.fail = True

    result = await notifier.deliver(
        tenant.id, Recipient.member(member.id), NotificationType.sync_failed, "Calendar Sync Failed"
    )

    assert result.status == NotifyStatus.emit_failed
    assert result.persisted
    assert db.query(Notification).count() == 1

    # notify 는 예외 없이 끝남
    await notifier.notify(
        tenant.id, Recipient.member(member.id), NotificationType.sync_failed, "Calendar Sync Failed"
    )
    assert db.query(Notification).count() == 2


@pytest.mark.asyncio
async def test_persist_failure_skips_emit(db, factory, channel, monkeypatch):
    tenant = factory.tenant()
    member = factory.member(tenant)
    service = NotificationService(db, channel=channel)

    def broken_create(**kwargs):
        raise StoreWriteFailure("disk full")

    monkeypatch.setattr(service.repo, "create", broken_create)

    result = await service.deliver(
        tenant.id, Recipient.member(member.id), NotificationType.booking_created, "New Booking"
    )
    assert result.status == NotifyStatus.persist_failed
    assert isinstance(result.error, StoreWriteFailure)
    assert channel.dashboard == []

    await service.notify(
        tenant.id, Recipient.member(member.id), NotificationType.booking_created, "New Booking"
    )
    assert channel.dashboard == []


@pytest.mark.asyncio
async def test_notify_swallows_unexpected_errors(db, factory, channel, monkeypatch):
    tenant = factory.tenant()
    member = factory.member(tenant)
    service = NotificationService(db, channel=channel)

    def explode(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(service.preferences, "resolve_preferences", explode)

    await service.notify(tenant.id, Recipient.member(member.id), NotificationType.booking_created, "x")

    assert db.query(Notification).count() == 0


@pytest.mark.asyncio
async def test_deliver_rejects_missing_tenant(db, notifier):
    result = await notifier.deliver("", Recipient.customer("c-1"), NotificationType.portal_welcome, "Welcome!")

    assert result.status == NotifyStatus.invalid
    assert db.query(Notification).count() == 0


# ─────────────────────────────────────────────────────────────
# 조회 / 읽음 처리
# ─────────────────────────────────────────────────────────────

def _seed(db, *, tenant_id, member_id=None, customer_id=None, count=1, read=False, minutes_ago=0):
    repo = NotificationRepository(db)
    rows = []
    for i in range(count):
        row = repo.create(
            tenant_id=tenant_id,
            member_id=member_id,
            customer_id=customer_id,
            type=NotificationType.booking_created.value,
            title=f"n{i}",
        )
        row.created_at = datetime(2026, 3, 1, 12, 0) - timedelta(minutes=minutes_ago + i)
        if read:
            row.read_at = datetime(2026, 3, 1, 12, 30)
        rows.append(row)
    db.commit()
    return rows


def test_list_for_member_requires_tenant(db, factory, notifier):
    tenant = factory.tenant()
    member = factory.member(tenant)
    _seed(db, tenant_id=tenant.id, member_id=member.id, count=2)

    assert notifier.list_notifications(None, member_id=member.id) == {
        "notifications": [], "total": 0, "unread": 0,
    }
    assert notifier.count_unread(None, member_id=member.id) == 0
    assert notifier.mark_all_read(None, member_id=member.id) is False

    result = notifier.list_notifications(tenant.id, member_id=member.id)
    assert result["total"] == 2
    assert result["unread"] == 2


def test_list_without_recipient_is_empty(notifier):
    assert notifier.list_notifications("t-1") == {"notifications": [], "total": 0, "unread": 0}
    assert notifier.count_unread("t-1") == 0
    assert notifier.mark_read("n-1", "t-1") is False


def test_customer_list_spans_tenants_when_tenant_missing(db, factory, notifier):
    a = factory.tenant(name="A")
    b = factory.tenant(name="B")
    customer = factory.customer()
    _seed(db, tenant_id=a.id, customer_id=customer.id, count=2)
    _seed(db, tenant_id=b.id, customer_id=customer.id, count=1, minutes_ago=10)

    assert notifier.list_notifications(None, customer_id=customer.id)["total"] == 3
    assert notifier.list_notifications(b.id, customer_id=customer.id)["total"] == 1
    assert notifier.count_unread(a.id, customer_id=customer.id) == 2


def test_list_pagination_and_unread_only(db, factory, notifier):
    tenant = factory.tenant()
    member = factory.member(tenant)
    newest = _seed(db, tenant_id=tenant.id, member_id=member.id, count=3)
    _seed(db, tenant_id=tenant.id, member_id=member.id, count=2, read=True, minutes_ago=30)

    page = notifier.list_notifications(tenant.id, member_id=member.id, limit=2, offset=0)
    assert page["total"] == 5
    assert page["unread"] == 3
    assert [n.id for n in page["notifications"]] == [newest[0].id, newest[1].id]

    unread = notifier.list_notifications(tenant.id, member_id=member.id, unread_only=True)
    assert unread["total"] == 3
    assert all(n.read_at is None for n in unread["notifications"])


def test_mark_read_only_own_notification(db, factory, notifier):
    tenant = factory.tenant()
    me = factory.member(tenant)
    other = factory.member(tenant)
    mine = _seed(db, tenant_id=tenant.id, member_id=me.id)[0]
    theirs = _seed(db, tenant_id=tenant.id, member_id=other.id)[0]

    assert notifier.mark_read(theirs.id, tenant.id, member_id=me.id) is False
    assert notifier.mark_read(mine.id, tenant.id, member_id=me.id) is True
    assert notifier.mark_read("missing", tenant.id, member_id=me.id) is False

    db.expire_all()
    assert db.get(Notification, mine.id).read_at is not None
    assert db.get(Notification, theirs.id).read_at is None


def test_mark_all_read_is_idempotent(db, factory, notifier):
    tenant = factory.tenant()
    member = factory.member(tenant)
    _seed(db, tenant_id=tenant.id, member_id=member.id, count=3)

    assert notifier.mark_all_read(tenant.id, member_id=member.id) is True
    db.expire_all()
    first = {n.id: n.read_at for n in db.query(Notification).all()}
    assert all(first.values())

    assert notifier.mark_all_read(tenant.id, member_id=member.id) is True
    db.expire_all()
    second = {n.id: n.read_at for n in db.query(Notification).all()}

    assert second == first
    assert notifier.count_unread(tenant.id, member_id=member.id) == 0


def test_notification_dto_reads_orm_row(db, factory):
    from stayhub.api.v1.schemas.notification import NotificationDTO

    tenant = factory.tenant()
    member = factory.member(tenant)
    row = NotificationRepository(db).create(
        tenant_id=tenant.id,
        member_id=member.id,
        type=NotificationType.booking_created.value,
        title="New Booking",
        data=BookingData(booking_id="b-1", guest_name="Jane").model_dump(mode="json"),
    )

    dto = NotificationDTO.model_validate(row)

    assert dto.id == row.id
    assert dto.is_read is False
    assert isinstance(dto.data, BookingData)
    assert dto.data.guest_name == "Jane"
