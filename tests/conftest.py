from datetime import datetime, timedelta
import itertools
import pytest

from review_scheduler.due import CardStore
from review_scheduler.models import CardAttempt


@pytest.fixture
def day0():
    """Fixed reference time so interval arithmetic is exact."""
    return datetime(2024, 3, 1, 9, 30)


@pytest.fixture
def make_attempts(day0):
    """Build attempts from (day_offset, correct) pairs, ids in input order."""
    ids = itertools.count(1)

    def _make(*pairs, card_id="card-1"):
        return [
            CardAttempt(
                id=str(next(ids)),
                card_id=card_id,
                timestamp=day0 + timedelta(days=offset),
                correct=correct,
            )
            for offset, correct in pairs
        ]

    return _make


class FakeStore(CardStore):
    """Dictionary-backed store that records how often it was read."""

    def __init__(self, cards=None, attempts=None, fail_on=None):
        self.cards = cards or []
        self.attempts = attempts or []
        self.fail_on = fail_on
        self.reads = 0

    def list_cards(self, user_id):
        if self.fail_on == "cards":
            raise ConnectionError("store offline")
        return list(self.cards)

    def list_attempts_for_card(self, user_id, card_id):
        self.reads += 1
        if self.fail_on == card_id:
            raise ConnectionError("store offline")
        return [a for a in self.attempts if a.card_id == card_id]


@pytest.fixture
def fake_store():
    return FakeStore
