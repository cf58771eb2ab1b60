#!/usr/bin/env python3
"""
Tests for first-fit artist assignment.
"""

from datetime import datetime, time, timedelta

import pytest

from inkbook.crud.appointment import AppointmentWindow
from inkbook.services.assignment import assign_artist, pick_free_artist

from tests.conftest import DAY, TZ
from tests.mocks.repositories import FakeAppointmentRepository


def at(hour: int, minute: int = 0, day=DAY) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=TZ)


@pytest.mark.unit
class TestPickFreeArtist:

    def test_both_free_returns_first(self, roster, artist_a):
        assert pick_free_artist(at(10), at(11), roster, []) is artist_a

    def test_first_conflicted_returns_second(self, roster, artist_b):
        appts = [AppointmentWindow(1, at(10), at(11), "upcoming")]
        assert pick_free_artist(at(10), at(11), roster, appts) is artist_b

    def test_all_conflicted_returns_none(self, roster):
        appts = [
            AppointmentWindow(1, at(10), at(11), "upcoming"),
            AppointmentWindow(2, at(10, 30), at(11, 30), "pending"),
        ]
        assert pick_free_artist(at(10), at(11), roster, appts) is None

    def test_roster_order_decides_not_load(self, artist_a, artist_b):
        # B is idle, A is busy later in the day; A still wins when listed first
        appts = [AppointmentWindow(1, at(15), at(18), "upcoming")]
        assert pick_free_artist(at(10), at(11), [artist_a, artist_b], appts) is artist_a
        assert pick_free_artist(at(10), at(11), [artist_b, artist_a], appts) is artist_b

    def test_empty_roster(self):
        assert pick_free_artist(at(10), at(11), [], []) is None


class TestAssignArtist:

    @pytest.mark.asyncio
    async def test_both_free(self, fake_repo, roster, artist_a):
        assert await assign_artist(fake_repo, at(10), at(11), roster, TZ) is artist_a

    @pytest.mark.asyncio
    async def test_first_conflicted(self, fake_repo, roster, artist_b):
        fake_repo.add(1, at(9, 30), at(10, 30))
        assert await assign_artist(fake_repo, at(10), at(11), roster, TZ) is artist_b

    @pytest.mark.asyncio
    async def test_fully_booked_returns_none(self, fake_repo, roster):
        fake_repo.add(1, at(10), at(12))
        fake_repo.add(2, at(10, 30), at(11))
        assert await assign_artist(fake_repo, at(10), at(11), roster, TZ) is None

    @pytest.mark.asyncio
    async def test_cancelled_appointment_frees_the_artist(self, fake_repo, roster, artist_a):
        fake_repo.add(1, at(10), at(11), status="cancelled")
        fake_repo.add(2, at(10), at(11), status="declined")
        assert await assign_artist(fake_repo, at(10), at(11), roster, TZ) is artist_a

    @pytest.mark.asyncio
    async def test_touching_appointment_is_not_a_conflict(self, fake_repo, roster, artist_a):
        fake_repo.add(1, at(9), at(10))
        fake_repo.add(1, at(11), at(12))
        assert await assign_artist(fake_repo, at(10), at(11), roster, TZ) is artist_a

    @pytest.mark.asyncio
    async def test_queries_the_day_containing_start(self, fake_repo, roster):
        await assign_artist(fake_repo, at(18), at(19), roster, TZ)
        (start, end, artist_id), = fake_repo.queries
        assert start == at(0)
        assert end.date() == DAY
        assert artist_id is None

    @pytest.mark.asyncio
    async def test_other_days_do_not_conflict(self, fake_repo, roster, artist_a):
        tomorrow = DAY + timedelta(days=1)
        fake_repo.add(1, at(10, day=tomorrow), at(11, day=tomorrow))
        assert await assign_artist(fake_repo, at(10), at(11), roster, TZ) is artist_a

    @pytest.mark.asyncio
    async def test_never_double_books_overlapping_requests(self, fake_repo, roster, artist_a):
        """Book overlapping ranges one after another; no artist may hold two overlapping slots."""
        requests = [(at(10), at(11)), (at(10, 30), at(11, 30)), (at(10), at(12))]
        assigned = []
        for start, end in requests:
            artist = await assign_artist(fake_repo, start, end, roster, TZ)
            if artist is not None:
                fake_repo.add(artist.id, start, end)
            assigned.append(artist.id if artist else None)

        assert assigned == [1, 2, None]
        for artist in roster:
            active = sorted(fake_repo.active_for(artist.id), key=lambda a: a.starts_at)
            for first, second in zip(active, active[1:]):
                assert first.ends_at <= second.starts_at

        # Cancelling A's booking makes A assignable again for that range
        first_booking = fake_repo.active_for(1)[0]
        first_booking.status = "cancelled"
        again = await assign_artist(fake_repo, at(10), at(11), roster, TZ)
        assert again is artist_a
