"""Day counting, exchange sessions, and the per-evaluation valuation clock."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache

import exchange_calendars as xcals
import pandas as pd


@dataclass(frozen=True)
class Actual365Fixed:
    """Actual/365 (Fixed) day-count convention."""

    def day_count(self, start: dt.date, end: dt.date) -> int:
        return (end - start).days

    def year_fraction(self, start: dt.date, end: dt.date) -> float:
        return self.day_count(start, end) / 365.0


@lru_cache(maxsize=32)
def _exchange_calendar(name: str, first_year: int, last_year: int):
    return xcals.get_calendar(
        name,
        start=f"{first_year}-01-01",
        end=f"{last_year}-12-31",
    )


@dataclass(frozen=True)
class TradingCalendar:
    """Session arithmetic on a named exchange calendar (default XNYS).

    Calendars are built lazily around the requested year so that long-dated
    expiries stay inside the calendar bounds.
    """

    name: str = "XNYS"

    def _calendar_for(self, date: dt.date):
        return _exchange_calendar(self.name, date.year - 1, date.year + 1)

    def is_session(self, date: dt.date) -> bool:
        return bool(self._calendar_for(date).is_session(pd.Timestamp(date)))

    def advance(self, date: dt.date, sessions: int) -> dt.date:
        """Return the date `sessions` trading sessions after `date`.

        A non-session `date` (weekend/holiday) first rolls forward to the
        next session.
        """
        cal = self._calendar_for(date)
        session = cal.date_to_session(pd.Timestamp(date), direction="next")
        if sessions == 0:
            return session.date()
        return cal.session_offset(session, sessions).date()


class EvaluationClock:
    """Valuation date owned by a single evaluation.

    Engines receive the clock's current date explicitly on every call; no
    process-wide evaluation date exists.
    """

    def __init__(self, evaluation_date: dt.date) -> None:
        self._evaluation_date = evaluation_date

    @property
    def evaluation_date(self) -> dt.date:
        return self._evaluation_date

    @contextmanager
    def shifted(self, days: int) -> Iterator[dt.date]:
        """Move the valuation date by `days` calendar days within the block."""
        original = self._evaluation_date
        self._evaluation_date = original + dt.timedelta(days=days)
        try:
            yield self._evaluation_date
        finally:
            self._evaluation_date = original

    def __repr__(self) -> str:
        return f"EvaluationClock({self._evaluation_date.isoformat()})"
