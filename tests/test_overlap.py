#!/usr/bin/env python3
"""
Tests for the interval overlap rule and per-artist conflict checks.
"""

from datetime import datetime, timezone

import pytest

from inkbook.crud.appointment import AppointmentWindow
from inkbook.services.overlap import has_conflict, overlaps

from tests.conftest import TZ


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 6, 16, hour, minute, tzinfo=TZ)


@pytest.mark.unit
class TestOverlaps:

    def test_touching_intervals_do_not_overlap(self):
        assert overlaps(at(10), at(11), at(11), at(12)) is False
        assert overlaps(at(11), at(12), at(10), at(11)) is False

    def test_partial_overlap(self):
        assert overlaps(at(10), at(11), at(10, 30), at(11, 30)) is True

    def test_contained_interval_overlaps(self):
        assert overlaps(at(10), at(12), at(10, 30), at(11)) is True
        assert overlaps(at(10, 30), at(11), at(10), at(12)) is True

    def test_identical_intervals_overlap(self):
        assert overlaps(at(14), at(15), at(14), at(15)) is True

    def test_disjoint_intervals(self):
        assert overlaps(at(10), at(11), at(13), at(14)) is False

    def test_mixed_timezones_compare_by_instant(self):
        utc_start = at(10).astimezone(timezone.utc)
        assert overlaps(utc_start, at(11), at(10, 30), at(12)) is True


@pytest.mark.unit
class TestHasConflict:

    def window(self, artist_id, start, end, status="upcoming", appointment_id=None):
        return AppointmentWindow(artist_id=artist_id, start=start, end=end,
                                 status=status, appointment_id=appointment_id)

    def test_active_statuses_block(self):
        for status in ("pending", "upcoming"):
            appts = [self.window(1, at(10), at(11), status)]
            assert has_conflict(1, at(10, 30), at(11, 30), appts) is True

    @pytest.mark.parametrize("status", ["cancelled", "declined", "completed"])
    def test_inactive_statuses_are_ignored(self, status):
        appts = [self.window(1, at(10), at(11), status)]
        assert has_conflict(1, at(10), at(11), appts) is False

    def test_other_artists_appointments_are_ignored(self):
        appts = [self.window(2, at(10), at(11))]
        assert has_conflict(1, at(10), at(11), appts) is False

    def test_ignores_the_appointment_being_moved(self):
        appts = [self.window(1, at(10), at(11), appointment_id=7)]
        assert has_conflict(1, at(10, 30), at(11, 30), appts, ignore_appointment_id=7) is False
        assert has_conflict(1, at(10, 30), at(11, 30), appts, ignore_appointment_id=8) is True
