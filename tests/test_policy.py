"""Tests for tenant policy resolution"""

from sqlalchemy import update

from reservo.booking import policy as policy_module
from reservo.booking.errors import PolicyUnavailable
from reservo.booking.policy import default_policy, resolve_policy
from reservo.config import settings
from reservo.models.tenant import Tenant


async def test_reads_stored_policy(test_db, test_tenant):
    test_tenant.max_auto_confirm_people = 10
    test_tenant.same_day_cutoff = "14:30"
    await test_db.commit()

    policy = await resolve_policy(test_db, test_tenant.id)

    assert policy.max_auto_confirm_people == 10
    assert policy.cutoff_time == "14:30"


async def test_missing_tenant_uses_defaults(test_db):
    policy = await resolve_policy(test_db, 999)

    assert policy.max_auto_confirm_people == 6
    assert policy.cutoff_time == "11:00"


async def test_malformed_cutoff_falls_back(test_db, test_tenant):
    tenant_id = test_tenant.id
    # Bypass the ORM so the bad value reaches the table as-is
    await test_db.execute(update(Tenant).where(Tenant.id == tenant_id).values(same_day_cutoff="late"))
    await test_db.commit()

    policy = await resolve_policy(test_db, tenant_id)

    assert policy.cutoff_time == "11:00"
    assert policy.max_auto_confirm_people == 6


async def test_loose_cutoff_is_normalized(test_db, test_tenant):
    test_tenant.same_day_cutoff = "9:30"
    await test_db.commit()

    policy = await resolve_policy(test_db, test_tenant.id)

    assert policy.cutoff_time == "09:30"


async def test_lookup_failure_never_raises(test_db, monkeypatch):
    async def broken(db, tenant_id):
        raise PolicyUnavailable("connection reset")

    monkeypatch.setattr(policy_module, "_load_tenant_policy", broken)

    policy = await resolve_policy(test_db, 1)

    assert policy == default_policy()


def test_defaults_come_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "default_max_auto_confirm_people", 4)
    monkeypatch.setattr(settings, "default_same_day_cutoff", "12:15")

    policy = default_policy()

    assert policy.max_auto_confirm_people == 4
    assert policy.cutoff_time == "12:15"


def test_bad_settings_fall_back_to_hard_coded(monkeypatch):
    monkeypatch.setattr(settings, "default_max_auto_confirm_people", 0)
    monkeypatch.setattr(settings, "default_same_day_cutoff", "noon")

    policy = default_policy()

    assert policy.max_auto_confirm_people == 6
    assert policy.cutoff_time == "11:00"
