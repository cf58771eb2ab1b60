#!/usr/bin/env python3
"""
Repository tests against in-memory SQLite.
"""

import asyncio
from datetime import datetime, time, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from inkbook.core.business import day_window
from inkbook.core.errors import AppointmentNotFound, RepositoryTimeout, RepositoryUnavailable
from inkbook.crud.appointment import SqlAppointmentRepository, as_utc
from inkbook.crud.user import create_user, get_artist, list_artists
from inkbook.db.models.user import ROLE_CLIENT

from tests.conftest import DAY, TZ

pytestmark = pytest.mark.integration


def at(hour: int, minute: int = 0, day=DAY) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=TZ)


async def seed_artists(db_session):
    a = await create_user(db_session, email="ada@studio.test", first_name="Ada", last_name="Lines")
    b = await create_user(db_session, email="bo@studio.test", first_name="Bo", last_name="Shade")
    return a, b


async def book(repo, artist, start, end, status="upcoming"):
    return await repo.create_appointment(
        artist_id=artist.id,
        artist_name=artist.display_name,
        client_id="guest",
        client_name="Test Client",
        type="small",
        starts_at=start,
        ends_at=end,
        status=status,
    )


class TestArtists:

    @pytest.mark.asyncio
    async def test_roster_is_artists_in_id_order(self, db_session):
        a, b = await seed_artists(db_session)
        await create_user(db_session, email="client@example.com", first_name="Cy", role=ROLE_CLIENT)

        roster = await list_artists(db_session)
        assert [u.id for u in roster] == [a.id, b.id]

    @pytest.mark.asyncio
    async def test_get_artist_ignores_non_artists(self, db_session):
        client = await create_user(db_session, email="c@example.com", first_name="Cy", role=ROLE_CLIENT)
        assert await get_artist(db_session, client.id) is None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session):
        await create_user(db_session, email="ada@studio.test", first_name="Ada")
        with pytest.raises(ValueError):
            await create_user(db_session, email="ada@studio.test", first_name="Ada")


class TestQueryByDateRange:

    @pytest.mark.asyncio
    async def test_closed_range_on_start_time(self, db_session, sql_repo):
        a, _ = await seed_artists(db_session)
        start, end = day_window(DAY, TZ)

        await book(sql_repo, a, start, start + timedelta(minutes=30))      # exactly start of day
        await book(sql_repo, a, at(10), at(11))
        await book(sql_repo, a, at(23, 30), at(23, 59))
        await book(sql_repo, a, at(23, 30, day=DAY - timedelta(days=1)),
                   at(23, 59, day=DAY - timedelta(days=1)))                # previous day
        await book(sql_repo, a, at(0, 0, day=DAY + timedelta(days=1)),
                   at(1, 0, day=DAY + timedelta(days=1)))                  # next day

        windows = await sql_repo.query_by_date_range(start, end)
        assert [w.start for w in windows] == [as_utc(start), as_utc(at(10)), as_utc(at(23, 30))]

    @pytest.mark.asyncio
    async def test_returns_all_statuses_as_aware_utc(self, db_session, sql_repo):
        a, _ = await seed_artists(db_session)
        await book(sql_repo, a, at(10), at(11), status="cancelled")
        await book(sql_repo, a, at(12), at(13), status="pending")

        windows = await sql_repo.query_by_date_range(*day_window(DAY, TZ))
        assert {w.status for w in windows} == {"cancelled", "pending"}
        for w in windows:
            assert w.start.tzinfo is not None
            assert w.start.utcoffset() == timedelta(0)
        assert windows[0].start == at(10)
        assert windows[0].end == at(11)

    @pytest.mark.asyncio
    async def test_artist_filter(self, db_session, sql_repo):
        a, b = await seed_artists(db_session)
        await book(sql_repo, a, at(10), at(11))
        await book(sql_repo, b, at(10), at(11))

        windows = await sql_repo.query_by_date_range(*day_window(DAY, TZ), artist_id=b.id)
        assert [w.artist_id for w in windows] == [b.id]


class TestWrites:

    @pytest.mark.asyncio
    async def test_overlapping_inserts_are_not_blocked_by_the_store(self, db_session, sql_repo):
        # The store has no uniqueness on artist + time; the check lives in the booking flow.
        a, _ = await seed_artists(db_session)
        await book(sql_repo, a, at(10), at(11))
        await book(sql_repo, a, at(10), at(11))
        assert len(await sql_repo.query_by_date_range(*day_window(DAY, TZ))) == 2

    @pytest.mark.asyncio
    async def test_update_and_get(self, db_session, sql_repo):
        a, _ = await seed_artists(db_session)
        appt = await book(sql_repo, a, at(10), at(11), status="pending")

        await sql_repo.update_appointment(appt.id, status="upcoming", starts_at=at(12), ends_at=at(13))
        fetched = await sql_repo.get_appointment(appt.id)
        assert fetched.status == "upcoming"
        assert as_utc(fetched.starts_at) == at(12)

    @pytest.mark.asyncio
    async def test_update_missing(self, sql_repo):
        with pytest.raises(AppointmentNotFound):
            await sql_repo.update_appointment(404, status="cancelled")

    @pytest.mark.asyncio
    async def test_list_appointments_filters(self, db_session, sql_repo):
        a, b = await seed_artists(db_session)
        await book(sql_repo, a, at(10), at(11))
        await book(sql_repo, b, at(12), at(13))

        rows = await sql_repo.list_appointments(artist_id=a.id)
        assert [r.artist_id for r in rows] == [a.id]
        rows = await sql_repo.list_appointments(start_utc=at(11), end_utc=at(23))
        assert [r.artist_id for r in rows] == [b.id]


class TestFailureTranslation:

    @pytest.mark.asyncio
    async def test_driver_error_becomes_repository_unavailable(self):
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("gone")))
        session.rollback = AsyncMock()
        repo = SqlAppointmentRepository(session)

        with pytest.raises(RepositoryUnavailable):
            await repo.query_by_date_range(*day_window(DAY, TZ))
        session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_slow_query_becomes_repository_timeout(self):
        async def slow_execute(*args, **kwargs):
            await asyncio.sleep(1)

        session = MagicMock()
        session.execute = slow_execute
        repo = SqlAppointmentRepository(session, timeout_seconds=0.01)

        with pytest.raises(RepositoryTimeout):
            await repo.query_by_date_range(*day_window(DAY, TZ))

    def test_as_utc_treats_naive_as_utc(self):
        naive = datetime(2026, 6, 16, 16, 0)
        assert as_utc(naive) == datetime(2026, 6, 16, 16, 0, tzinfo=timezone.utc)
        assert as_utc(at(10)).tzinfo == timezone.utc
