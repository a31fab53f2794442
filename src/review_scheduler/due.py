"""Due-card lookup across all of a user's cards."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Union

from review_scheduler.errors import CollaboratorError
from review_scheduler.history import parse_timestamp
from review_scheduler.models import Card, CardAttempt
from review_scheduler.scheduler import SchedulerConfig, next_attempt_time

logger = logging.getLogger(__name__)


@dataclass
class DueCard:
    card: Card
    next_attempt: datetime


class CardStore(ABC):
    """Storage the due-card lookup reads from.

    Implementations are free to fetch concurrently; results only depend on
    each card's own attempts.
    """

    @abstractmethod
    def list_cards(self, user_id: str) -> list[Card]:
        """Return every card owned by ``user_id``."""

    @abstractmethod
    def list_attempts_for_card(self, user_id: str, card_id: str) -> list[CardAttempt]:
        """Return every attempt recorded for one card, in any order."""


def _sort_by_next_attempt(scheduled: list[DueCard]) -> list[DueCard]:
    # list.sort is stable, so equal times keep input order
    scheduled.sort(key=lambda d: d.next_attempt)
    return scheduled


def _due_at(scheduled: list[DueCard], reference_time: Optional[datetime], now: datetime) -> list[DueCard]:
    if reference_time is None:
        reference_time = now
    return [d for d in scheduled if d.next_attempt <= reference_time]


def find_due_cards(
    cards_with_attempts: Iterable[tuple],
    reference_time: Optional[Union[datetime, str]] = None,
    config: Optional[SchedulerConfig] = None,
) -> list[DueCard]:
    """Schedule every card and keep the ones due at ``reference_time``.

    The first scheduling failure propagates; there are no partial results.
    Cards without attempts are scheduled at the same ``now`` that serves as
    the default reference time, so they are always due by default.
    """
    now = datetime.now()
    if reference_time is not None:
        reference_time = parse_timestamp(reference_time)
    scheduled = [
        DueCard(card=card, next_attempt=next_attempt_time(attempts, config, now=now))
        for card, attempts in cards_with_attempts
    ]
    return _due_at(_sort_by_next_attempt(scheduled), reference_time, now)


def get_card_next_attempt(
    store: CardStore,
    user_id: str,
    card_id: str,
    config: Optional[SchedulerConfig] = None,
    now: Optional[datetime] = None,
) -> datetime:
    try:
        attempts = store.list_attempts_for_card(user_id, card_id)
    except Exception as exc:
        logger.warning("Reading attempts for card %s failed: %s", card_id, exc)
        raise CollaboratorError(f"attempt lookup for card {card_id}") from exc
    return next_attempt_time(attempts, config, now=now)


def get_next_attempts_for_cards(
    store: CardStore,
    user_id: str,
    config: Optional[SchedulerConfig] = None,
    now: Optional[datetime] = None,
) -> list[DueCard]:
    """Every card of ``user_id`` with its next attempt, soonest first.

    Each card is fetched and scheduled before the next one is read, so the
    first failure of either kind is the one reported.
    """
    if now is None:
        now = datetime.now()
    try:
        cards = store.list_cards(user_id)
    except Exception as exc:
        logger.warning("Reading cards for user %s failed: %s", user_id, exc)
        raise CollaboratorError(f"card lookup for user {user_id}") from exc
    scheduled = []
    for card in cards:
        next_attempt = get_card_next_attempt(store, user_id, card.id, config, now=now)
        scheduled.append(DueCard(card=card, next_attempt=next_attempt))
    return _sort_by_next_attempt(scheduled)


def get_due_cards(
    store: CardStore,
    user_id: str,
    reference_time: Optional[Union[datetime, str]] = None,
    config: Optional[SchedulerConfig] = None,
) -> list[DueCard]:
    """Cards of ``user_id`` due at ``reference_time`` (default now), soonest first."""
    now = datetime.now()
    if reference_time is not None:
        reference_time = parse_timestamp(reference_time)
    due = _due_at(get_next_attempts_for_cards(store, user_id, config, now), reference_time, now)
    logger.debug("%d card(s) due for user %s", len(due), user_id)
    return due
