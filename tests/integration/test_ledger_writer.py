"""
Integration tests for the idempotent ledger writer.

Tests cover:
- Insert-if-absent semantics
- Tenant isolation checks before any write
"""

from decimal import Decimal

import pytest

from commission_engine.services.commission import (
    IdempotentLedgerWriter,
    PartnerDirectory,
    UplineAncestor,
)
from commission_engine.utils.exceptions import TenantIsolationError
from seed_helpers import count_records, make_engine, make_event

pytestmark = pytest.mark.integration


async def _ancestor(session, tenant, partner, level: int = 1) -> UplineAncestor:
    snapshot = await PartnerDirectory(session).get_partner(tenant.id, partner.id)
    return UplineAncestor(
        partner_id=snapshot.partner_id,
        code=snapshot.code,
        tier_id=snapshot.tier_id,
        tier_name=snapshot.tier_name,
        rate=snapshot.rate,
        tier_rate=snapshot.tier_rate,
        tier_max_depth=snapshot.tier_max_depth,
        levels_from_source=level,
    )


class TestLedgerWriter:
    """Test single record writes."""

    @pytest.mark.asyncio
    async def test_second_write_returns_existing(self, seeder, session):
        """The same key written twice yields one record and the stored amount."""
        tenant = await seeder.tenant()
        source, (a,) = await seeder.chain(tenant, [("A", "0.10", 3)])
        writer = IdempotentLedgerWriter(session, engine_version="test")
        directory = PartnerDirectory(session)
        beneficiary = await _ancestor(session, tenant, a)
        source_snapshot = await directory.get_partner(tenant.id, source.id)
        event = make_event(tenant, source)

        first = await writer.write(
            tenant.id, event, beneficiary, source_snapshot, Decimal("10000.00")
        )
        second = await writer.write(
            tenant.id, event, beneficiary, source_snapshot, Decimal("99.99")
        )
        await session.commit()

        assert first.was_newly_created is True
        assert second.was_newly_created is False
        assert second.record_id == first.record_id
        assert second.commission_amount == Decimal("10000.00")

    @pytest.mark.asyncio
    async def test_same_beneficiary_different_level_is_distinct(
        self, seeder, session, session_maker
    ):
        """levels_from_source is part of the key."""
        tenant = await seeder.tenant()
        source, (a,) = await seeder.chain(tenant, [("A", "0.10", 3)])
        writer = IdempotentLedgerWriter(session)
        source_snapshot = await PartnerDirectory(session).get_partner(tenant.id, source.id)
        event = make_event(tenant, source)

        for level in (1, 2):
            beneficiary = await _ancestor(session, tenant, a, level=level)
            await writer.write(tenant.id, event, beneficiary, source_snapshot, Decimal("1.00"))
        await session.commit()

        assert await count_records(session_maker) == 2


class TestTenantIsolation:
    """Test cross-tenant references are refused."""

    @pytest.mark.asyncio
    async def test_beneficiary_from_other_tenant(self, seeder, session, session_maker):
        """Paying another tenant's partner is a security violation."""
        home = await seeder.tenant("home")
        foreign = await seeder.tenant("foreign")
        source, _ = await seeder.chain(home, [("A", "0.10", 3)])
        _, (foreign_partner,) = await seeder.chain(foreign, [("X", "0.10", 3)])

        writer = IdempotentLedgerWriter(session)
        source_snapshot = await PartnerDirectory(session).get_partner(home.id, source.id)
        beneficiary = await _ancestor(session, foreign, foreign_partner)

        with pytest.raises(TenantIsolationError, match="SECURITY VIOLATION"):
            await writer.write(
                home.id, make_event(home, source), beneficiary, source_snapshot, Decimal("1")
            )
        await session.rollback()

        assert await count_records(session_maker) == 0

    @pytest.mark.asyncio
    async def test_event_tenant_mismatch(self, seeder, session):
        """An event from one tenant cannot be written under another."""
        home = await seeder.tenant("home")
        foreign = await seeder.tenant("foreign")
        source, (a,) = await seeder.chain(home, [("A", "0.10", 3)])

        writer = IdempotentLedgerWriter(session)
        source_snapshot = await PartnerDirectory(session).get_partner(home.id, source.id)
        beneficiary = await _ancestor(session, home, a)

        with pytest.raises(TenantIsolationError):
            await writer.write(
                foreign.id, make_event(home, source), beneficiary, source_snapshot, Decimal("1")
            )
        await session.rollback()

    @pytest.mark.asyncio
    async def test_engine_rejects_source_from_other_tenant(self, seeder, session, session_maker):
        """An event naming another tenant's partner finds no source partner."""
        home = await seeder.tenant("home")
        foreign = await seeder.tenant("foreign")
        await seeder.chain(home, [("A", "0.10", 3)])
        foreign_source, _ = await seeder.chain(foreign, [("X", "0.10", 3)])

        result = await make_engine(session).process(make_event(home, foreign_source))

        assert result.success is False
        assert result.errors[0].startswith("Unknown source partner")
        assert await count_records(session_maker) == 0
