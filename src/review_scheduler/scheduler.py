"""Next-attempt scheduling from recent correctness patterns."""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, Union

from review_scheduler.errors import UnscheduledPatternError
from review_scheduler.history import AttemptHistory, TimeUnit
from review_scheduler.models import CardAttempt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulerConfig:
    """Tunables for one scheduling call.

    Attributes:
        unit: Granularity gaps are measured and floored in.
        min_add_on_correct: Smallest interval added after a correct attempt.
        scaler_on_two_correct: Multiplier for the gap between two correct attempts.
        scalar_on_correct_wrong_correct: Multiplier for the retention gap
            before a lapse that was followed by a correct attempt.
    """

    unit: Union[TimeUnit, str] = TimeUnit.DAY
    min_add_on_correct: timedelta = field(default_factory=lambda: timedelta(days=1))
    scaler_on_two_correct: float = 2.0
    scalar_on_correct_wrong_correct: float = 0.5

    def __post_init__(self):
        object.__setattr__(self, "unit", TimeUnit.parse(self.unit))
        if self.min_add_on_correct < timedelta(0):
            raise ValueError("min_add_on_correct must not be negative")
        if self.scaler_on_two_correct < 0:
            raise ValueError("scaler_on_two_correct must not be negative")
        if self.scalar_on_correct_wrong_correct < 0:
            raise ValueError("scalar_on_correct_wrong_correct must not be negative")


DEFAULT_CONFIG = SchedulerConfig()


class Pattern(Enum):
    NO_HISTORY = "no history"
    LAST_INCORRECT = "last incorrect"
    SINGLE_CORRECT = "single correct"
    TWO_CORRECT = "two correct"
    RECOVERY = "recovery"
    UNMATCHED = "unmatched"


def classify(history: AttemptHistory) -> Pattern:
    """Pick the single scheduling rule that applies to ``history``."""
    if history.count == 0:
        return Pattern.NO_HISTORY
    if not history.most_recent_correct:
        return Pattern.LAST_INCORRECT
    if history.count == 1:
        return Pattern.SINGLE_CORRECT
    if history.last_two_both_correct:
        return Pattern.TWO_CORRECT
    if history.last_three_correct_wrong_correct:
        return Pattern.RECOVERY
    return Pattern.UNMATCHED


def scaled_interval(gap: float, scaler: float, config: SchedulerConfig) -> timedelta:
    """Scale a gap and floor it to whole units, never below the minimum.

    The gap stays fractional until after the multiplication.
    """
    whole_units = math.floor(gap * scaler)
    scaled = config.unit.delta * whole_units
    return max(scaled, config.min_add_on_correct)


def next_attempt_time(
    attempts: Iterable[CardAttempt],
    config: Optional[SchedulerConfig] = None,
    *,
    now: Optional[datetime] = None,
) -> datetime:
    """Calculate when a card should be shown again.

    Args:
        attempts: Every attempt recorded for the card, in any order.
        config: Scheduling tunables; defaults to DEFAULT_CONFIG.
        now: Current wall-clock time, used when the card was never attempted.

    Returns:
        Naive datetime of the next attempt.

    Raises:
        MalformedTimestampError: an attempt timestamp can't be parsed.
        UnscheduledPatternError: no rule covers the attempt history.
    """
    config = config or DEFAULT_CONFIG
    history = AttemptHistory(attempts, unit=config.unit)
    pattern = classify(history)
    logger.debug("Classified %r as %s", history, pattern.value)

    if pattern is Pattern.NO_HISTORY:
        return now if now is not None else datetime.now()
    elif pattern is Pattern.LAST_INCORRECT:
        # Stays due until answered correctly
        return history.most_recent_timestamp
    elif pattern is Pattern.SINGLE_CORRECT:
        interval = config.min_add_on_correct
    elif pattern is Pattern.TWO_CORRECT:
        interval = scaled_interval(
            history.gap_between_two_most_recent, config.scaler_on_two_correct, config
        )
    elif pattern is Pattern.RECOVERY:
        interval = scaled_interval(
            history.gap_before_recovery_wrong, config.scalar_on_correct_wrong_correct, config
        )
    else:
        logger.warning("No scheduling rule for %r", history)
        raise UnscheduledPatternError(history.count, history.recent_outcomes())

    logger.debug("Adding %s after %s", interval, history.most_recent_timestamp)
    return history.most_recent_timestamp + interval
