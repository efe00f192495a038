"""Tests for staff recipient resolution."""

import pytest

from stayhub.core.exceptions import ValidationFailure
from stayhub.domain.dtos.recipient import Recipient
from stayhub.domain.models import MemberStatus
from stayhub.services.recipient_resolver import RecipientResolver


def test_active_members_only(db, factory):
    tenant = factory.tenant()
    a = factory.member(tenant)
    b = factory.member(tenant)
    factory.member(tenant, status=MemberStatus.INVITED)
    factory.member(tenant, status=MemberStatus.REMOVED)

    ids = RecipientResolver(db).resolve_staff_recipients(tenant.id)

    assert ids == [a.id, b.id]


def test_owner_with_active_member_row_included_once(db, factory):
    tenant = factory.tenant(owner_user_id="owner-user")
    owner = factory.member(tenant, user_id="owner-user")
    staff = factory.member(tenant)

    ids = RecipientResolver(db).resolve_staff_recipients(tenant.id)

    assert ids.count(owner.id) == 1
    assert set(ids) == {owner.id, staff.id}


def test_owner_with_inactive_member_row_appended(db, factory):
    tenant = factory.tenant(owner_user_id="owner-user")
    owner = factory.member(tenant, user_id="owner-user", status=MemberStatus.INVITED)
    staff = factory.member(tenant)

    ids = RecipientResolver(db).resolve_staff_recipients(tenant.id)

    assert ids == [staff.id, owner.id]


def test_owner_without_member_row_not_included(db, factory):
    tenant = factory.tenant(owner_user_id="owner-user")
    staff = factory.member(tenant)

    assert RecipientResolver(db).resolve_staff_recipients(tenant.id) == [staff.id]


def test_empty_when_no_members(db, factory):
    tenant = factory.tenant()

    assert RecipientResolver(db).resolve_staff_recipients(tenant.id) == []
    assert RecipientResolver(db).resolve_staff_recipients("missing-tenant") == []


def test_other_tenant_members_excluded(db, factory):
    tenant = factory.tenant()
    other = factory.tenant(name="Other")
    mine = factory.member(tenant)
    factory.member(other)

    assert RecipientResolver(db).resolve_staff_recipients(tenant.id) == [mine.id]


def test_resolve_member_id_for_owner_any_status(db, factory):
    tenant = factory.tenant(owner_user_id="owner-user")
    owner = factory.member(tenant, user_id="owner-user", status=MemberStatus.INACTIVE)

    assert RecipientResolver(db).resolve_member_id(tenant.id, "owner-user") == owner.id


def test_resolve_member_id_for_staff_requires_active(db, factory):
    tenant = factory.tenant()
    active = factory.member(tenant, user_id="u-active")
    factory.member(tenant, user_id="u-invited", status=MemberStatus.INVITED)
    resolver = RecipientResolver(db)

    assert resolver.resolve_member_id(tenant.id, "u-active") == active.id
    assert resolver.resolve_member_id(tenant.id, "u-invited") is None
    assert resolver.resolve_member_id(tenant.id, "unknown") is None


def test_recipient_requires_exactly_one_id():
    with pytest.raises(ValidationFailure):
        Recipient()
    with pytest.raises(ValidationFailure):
        Recipient(member_id="m-1", customer_id="c-1")

    assert Recipient.member("m-1").label == "member:m-1"
    assert Recipient.customer("c-1").kind == "customer"


def test_recipient_empty_string_treated_as_unset():
    recipient = Recipient(member_id="", customer_id="c-1")

    assert recipient.member_id is None
    assert recipient.is_member is False
    assert recipient.label == "customer:c-1"

    with pytest.raises(ValidationFailure):
        Recipient(member_id="", customer_id="")
