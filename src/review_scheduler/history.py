"""Ordered, newest-first view over one card's attempts.

An ``AttemptHistory`` is rebuilt from scratch for every scheduling call. It
sorts the attempts, measures the gaps between neighbours in a chosen time
unit, and exposes the positional features the scheduler branches on. Every
feature is ``None`` when the history is too short to define it.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, Union

from review_scheduler.errors import MalformedTimestampError
from review_scheduler.models import CardAttempt


class TimeUnit(Enum):
    MICROSECOND = "microsecond"
    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"

    @property
    def delta(self) -> timedelta:
        """Length of one unit."""
        return _UNIT_DELTAS[self]

    @classmethod
    def parse(cls, value: Union["TimeUnit", str]) -> "TimeUnit":
        """Accept a TimeUnit or its singular/plural name, e.g. ``"days"``."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name.endswith("s"):
            name = name[:-1]
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown time unit: {value!r}") from None


_UNIT_DELTAS = {
    TimeUnit.MICROSECOND: timedelta(microseconds=1),
    TimeUnit.MILLISECOND: timedelta(milliseconds=1),
    TimeUnit.SECOND: timedelta(seconds=1),
    TimeUnit.MINUTE: timedelta(minutes=1),
    TimeUnit.HOUR: timedelta(hours=1),
    TimeUnit.DAY: timedelta(days=1),
    TimeUnit.WEEK: timedelta(weeks=1),
}


def parse_timestamp(value: Union[datetime, str]) -> datetime:
    """Return ``value`` as a naive datetime.

    Raises:
        MalformedTimestampError: the value is not a parseable ISO-8601
            date-time, carries a timezone, or is of another type.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise MalformedTimestampError(value) from None
    else:
        raise MalformedTimestampError(value, f"unsupported type {type(value).__name__}")
    if parsed.tzinfo is not None:
        raise MalformedTimestampError(value, "timezone-aware values are not wall-clock times")
    return parsed


def sort_attempts(attempts: Iterable[CardAttempt]) -> list:
    """Sort attempts newest first.

    Ties keep their ascending-sort order reversed: the stable ascending sort
    runs first and the whole sequence is flipped afterwards.
    """
    keyed = [(parse_timestamp(a.timestamp), a) for a in attempts]
    keyed.sort(key=lambda pair: pair[0])
    keyed.reverse()
    return [a for _, a in keyed]


def gaps_between(attempts: list, unit: TimeUnit = TimeUnit.DAY) -> list[float]:
    """Fractional gaps, in ``unit``, between neighbours of a newest-first list."""
    times = [parse_timestamp(a.timestamp) for a in attempts]
    return [(times[i] - times[i + 1]) / unit.delta for i in range(len(times) - 1)]


class AttemptHistory:
    """Newest-first attempts of a single card plus derived features."""

    def __init__(self, attempts: Iterable[CardAttempt], unit: Union[TimeUnit, str] = TimeUnit.DAY):
        self._unit = TimeUnit.parse(unit)
        self._attempts = sort_attempts(attempts)
        self._times = [parse_timestamp(a.timestamp) for a in self._attempts]
        self._gaps = gaps_between(self._attempts, self._unit)

    def __len__(self) -> int:
        return len(self._attempts)

    def __repr__(self) -> str:
        return f"AttemptHistory(count={self.count}, unit={self._unit.value})"

    @property
    def unit(self) -> TimeUnit:
        return self._unit

    @property
    def attempts(self) -> list:
        return list(self._attempts)

    @property
    def gaps(self) -> list[float]:
        return list(self._gaps)

    @property
    def count(self) -> int:
        return len(self._attempts)

    @property
    def most_recent_timestamp(self) -> Optional[datetime]:
        if self.count == 0:
            return None
        return self._times[0]

    @property
    def most_recent_correct(self) -> Optional[bool]:
        if self.count == 0:
            return None
        return self._attempts[0].correct

    @property
    def gap_between_two_most_recent(self) -> Optional[float]:
        if self.count < 2:
            return None
        return self._gaps[0]

    @property
    def last_two_both_correct(self) -> Optional[bool]:
        if self.count < 2:
            return None
        return self._attempts[0].correct and self._attempts[1].correct

    @property
    def last_two_both_incorrect(self) -> Optional[bool]:
        if self.count < 2:
            return None
        return not self._attempts[0].correct and not self._attempts[1].correct

    @property
    def last_three_correct_wrong_correct(self) -> Optional[bool]:
        if self.count < 3:
            return None
        first, second, third = self._attempts[:3]
        return first.correct and not second.correct and third.correct

    @property
    def gap_before_recovery_wrong(self) -> Optional[float]:
        """Gap between the lapse and the correct attempt before it.

        This is how long the item was retained before it was forgotten.
        """
        if not self.last_three_correct_wrong_correct:
            return None
        return self._gaps[1]

    def recent_outcomes(self, n: int = 3) -> tuple:
        """Correctness of up to ``n`` most recent attempts, newest first."""
        return tuple(a.correct for a in self._attempts[:n])
