"""
Tests for date grouping and the reference-timezone clock.

These tests verify:
  - Dates are stamped in Asia/Ulaanbaatar whatever the host zone is
  - The history lists the most recent date first
  - Within a date, transactions keep their recorded order (newest first)
"""

from datetime import datetime, timedelta, timezone

from bank_sim.reference_time import ReferenceClock
from bank_sim.services.history_service import group_by_date


class TestReferenceClock:
    """Tests for ReferenceClock formatting."""

    def test_formats_in_reference_zone(self):
        clock = ReferenceClock(
            "Asia/Ulaanbaatar",
            now=lambda: datetime(2026, 10, 19, 6, 5, tzinfo=timezone.utc),
        )
        moment = clock.now()

        assert moment.date == "2026.10.19"
        assert moment.time == "14:05"
        assert moment.timestamp == "2026/10/19 14:05"

    def test_date_rolls_over_before_utc_does(self):
        """17:00 UTC is already the next day in Ulaanbaatar (UTC+8)."""
        clock = ReferenceClock(
            "Asia/Ulaanbaatar",
            now=lambda: datetime(2026, 12, 31, 17, 0, tzinfo=timezone.utc),
        )
        moment = clock.now()

        assert moment.date == "2027.01.01"
        assert moment.time == "01:00"

    def test_independent_of_source_offset(self):
        """The same instant expressed in another zone gives the same stamp."""
        instant_utc = datetime(2026, 10, 19, 6, 5, tzinfo=timezone.utc)
        instant_ny = instant_utc.astimezone(timezone(timedelta(hours=-4)))
        clock = ReferenceClock("Asia/Ulaanbaatar")

        assert clock.moment(instant_utc) == clock.moment(instant_ny)

    def test_naive_datetimes_are_utc(self):
        clock = ReferenceClock("Asia/Ulaanbaatar", now=lambda: datetime(2026, 10, 19, 6, 5))

        assert clock.now().time == "14:05"

    def test_epoch_ms(self):
        instant = datetime(2026, 10, 19, 6, 5, tzinfo=timezone.utc)
        clock = ReferenceClock("Asia/Ulaanbaatar", now=lambda: instant)

        assert clock.now().epoch_ms == int(instant.timestamp()) * 1000


class TestGroupByDate:
    """Tests for the grouped history view."""

    def test_empty_history(self):
        assert group_by_date([]) == []

    async def test_groups_most_recent_date_first(self, ledger, now):
        yesterday_a = await ledger.process_transfer("1", "A", "ACC", None)
        now.advance(hours=1)
        yesterday_b = await ledger.process_transfer("2", "B", "ACC", None)
        now.advance(days=1)
        today = await ledger.process_transfer("3", "C", "ACC", None)

        groups = group_by_date(ledger.transactions)

        assert [g.date for g in groups] == ["2026.10.20", "2026.10.19"]
        assert groups[0].transactions == [today]
        assert groups[1].transactions == [yesterday_b, yesterday_a]

    async def test_ledger_history_matches(self, ledger, now):
        await ledger.process_transfer("1", "A", "ACC", None)
        now.advance(days=2)
        await ledger.process_transfer("2", "B", "ACC", None)

        assert ledger.history() == group_by_date(ledger.transactions)
        assert len(ledger.history()) == 2
