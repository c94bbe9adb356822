"""
Integration tests for GuestCommandRepoImpl

Check-in and archive are conditional UPDATEs on status = 'active'. Two door
scanners or a scan racing a transfer must leave exactly one winner.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, GuestStatus
from src.service.commerce.driven_adapter.model.guest_model import GuestModel
from src.service.commerce.driven_adapter.repo.guest_command_repo_impl import GuestCommandRepoImpl


async def _check_in_and_commit(
    session_maker: async_sessionmaker[AsyncSession], guest_id: UUID, scanned_by: str
) -> Optional[Guest]:
    async with session_maker() as session:
        guest = await GuestCommandRepoImpl(session=session).check_in_atomically(
            guest_id=guest_id, scanned_by=scanned_by, check_in_time=datetime.now(timezone.utc)
        )
        await session.commit()
        return guest


async def _statuses(session_maker: async_sessionmaker[AsyncSession]) -> dict[UUID, str]:
    async with session_maker() as session:
        result = await session.execute(select(GuestModel.id, GuestModel.status))
        return {guest_id: status for guest_id, status in result.all()}


@pytest.mark.integration
class TestCheckInAtomically:
    @pytest.mark.asyncio
    async def test_concurrent_scans_have_exactly_one_winner(
        self, session_maker: async_sessionmaker[AsyncSession], make_guests
    ) -> None:
        """
        Given: An active guest
        When: Two doors scan the same ticket at the same time
        Then: One scan returns the checked-in guest, the other gets nothing back
        """
        [guest] = await make_guests(1)

        results = await asyncio.gather(
            _check_in_and_commit(session_maker, guest.id, 'door-1'),
            _check_in_and_commit(session_maker, guest.id, 'door-2'),
        )

        winners = [result for result in results if result is not None]
        assert len(winners) == 1
        assert winners[0].status == GuestStatus.CHECKED_IN
        assert winners[0].check_in_time is not None
        assert winners[0].updated_by in ('door-1', 'door-2')
        assert (await _statuses(session_maker))[guest.id] == 'checked_in'

    @pytest.mark.asyncio
    async def test_second_scan_after_check_in_returns_nothing(
        self, session_maker: async_sessionmaker[AsyncSession], make_guests
    ) -> None:
        [guest] = await make_guests(1)

        first = await _check_in_and_commit(session_maker, guest.id, 'door-1')
        second = await _check_in_and_commit(session_maker, guest.id, 'door-1')

        assert first is not None
        assert second is None

    @pytest.mark.asyncio
    async def test_archived_guest_cannot_check_in(
        self, session_maker: async_sessionmaker[AsyncSession], make_guests
    ) -> None:
        [guest] = await make_guests(1, status=GuestStatus.ARCHIVED)

        assert await _check_in_and_commit(session_maker, guest.id, 'door-1') is None
        assert (await _statuses(session_maker))[guest.id] == 'archived'


@pytest.mark.integration
class TestArchive:
    @pytest.mark.asyncio
    async def test_archive_atomically_only_moves_active_guests(
        self, session_maker: async_sessionmaker[AsyncSession], make_guests
    ) -> None:
        [active] = await make_guests(1)
        [checked_in] = await make_guests(1, status=GuestStatus.CHECKED_IN)

        async with session_maker() as session:
            repo = GuestCommandRepoImpl(session=session)
            archived = await repo.archive_atomically(guest_id=active.id, updated_by='admin-1')
            untouched = await repo.archive_atomically(guest_id=checked_in.id, updated_by='admin-1')
            await session.commit()

        assert archived is not None
        assert archived.status == GuestStatus.ARCHIVED
        assert archived.updated_by == 'admin-1'
        assert untouched is None
        assert (await _statuses(session_maker))[checked_in.id] == 'checked_in'

    @pytest.mark.asyncio
    async def test_archive_by_ids_skips_checked_in_guests(
        self, session_maker: async_sessionmaker[AsyncSession], make_guests, paid_order: Order
    ) -> None:
        """
        Given: Three guests of one order, one of them already scanned at the door
        When: All three are archived by id (the transfer path)
        Then: Only the two active guests are archived and the count says so,
              which is how a transfer detects a check-in that slipped in
        """
        guests = await make_guests(3, order_id=paid_order.id)
        async with session_maker() as session:
            await GuestCommandRepoImpl(session=session).check_in_atomically(
                guest_id=guests[0].id, scanned_by='door-1', check_in_time=datetime.now(timezone.utc)
            )
            await session.commit()

        async with session_maker() as session:
            count = await GuestCommandRepoImpl(session=session).archive_active_by_ids(
                guest_ids=[guest.id for guest in guests], updated_by='admin-1'
            )
            await session.commit()

        statuses = await _statuses(session_maker)
        assert count == 2
        assert statuses[guests[0].id] == 'checked_in'
        assert statuses[guests[1].id] == 'archived'
        assert statuses[guests[2].id] == 'archived'

    @pytest.mark.asyncio
    async def test_archive_by_order_leaves_other_orders_alone(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        make_guests,
        paid_order: Order,
    ) -> None:
        refunded = await make_guests(2, order_id=paid_order.id)
        [comp] = await make_guests(1)

        async with session_maker() as session:
            count = await GuestCommandRepoImpl(session=session).archive_active_by_order(
                order_id=paid_order.id, updated_by='admin-1'
            )
            await session.commit()

        statuses = await _statuses(session_maker)
        assert count == 2
        assert {statuses[guest.id] for guest in refunded} == {'archived'}
        assert statuses[comp.id] == 'active'

    @pytest.mark.asyncio
    async def test_check_in_racing_archive_leaves_one_outcome(
        self, session_maker: async_sessionmaker[AsyncSession], make_guests, paid_order: Order
    ) -> None:
        [guest] = await make_guests(1, order_id=paid_order.id)

        async def _archive() -> int:
            async with session_maker() as session:
                count = await GuestCommandRepoImpl(session=session).archive_active_by_ids(
                    guest_ids=[guest.id], updated_by='admin-1'
                )
                await session.commit()
                return count

        checked_in, archived_count = await asyncio.gather(
            _check_in_and_commit(session_maker, guest.id, 'door-1'), _archive()
        )

        final_status = (await _statuses(session_maker))[guest.id]
        if checked_in is not None:
            assert archived_count == 0
            assert final_status == 'checked_in'
        else:
            assert archived_count == 1
            assert final_status == 'archived'


@pytest.mark.integration
class TestMinimumAdmissionTier:
    @pytest.mark.asyncio
    async def test_tier_comes_from_the_purchased_ticket(
        self, session_maker: async_sessionmaker[AsyncSession], make_guests, paid_order: Order
    ) -> None:
        [purchased] = await make_guests(1, order_id=paid_order.id)
        [comp] = await make_guests(1)

        async with session_maker() as session:
            repo = GuestCommandRepoImpl(session=session)
            purchased_tier = await repo.get_minimum_admission_tier(guest_id=purchased.id)
            comp_tier = await repo.get_minimum_admission_tier(guest_id=comp.id)

        assert purchased_tier == AdmissionTier.GENERAL
        assert comp_tier is None
