"""Data classes for the review domain model."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class CardType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    PHONE_NUMBER = "phone number"
    SELF_ASSESSMENT = "self assessment"
    MULTIPLE_CHOICE = "multiple choice"
    TRUE_OR_FALSE = "true or false"


@dataclass
class User:
    id: str
    name: str


@dataclass
class Card:
    id: str
    question: str
    answer: str
    type: CardType = CardType.TEXT
    hint: Optional[str] = None


@dataclass(frozen=True)
class CardAttempt:
    id: str
    card_id: str
    timestamp: Union[datetime, str]  # naive wall-clock time or ISO-8601 string
    correct: bool
