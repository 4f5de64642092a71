"""
Domain models for guess statistics.

These are pure data structures with no I/O or external dependencies.
All percentages are in the range 0-100, rounded to two decimals.
"""

from dataclasses import dataclass
from datetime import date

from esp_trainer.domain.guesses.models import DeckType


@dataclass(frozen=True)
class DeckStats:
    """
    Summary statistics for one deck.

    Attributes:
        total_guesses: Number of guesses made against the deck.
        exact_matches: Guesses where suit and (if applicable) number matched.
        suit_matches: Guesses where the suit matched.
        number_matches: Guesses where the number matched; suit-only guesses
            always count as a number match.
        accuracy: Exact-match percentage.
        suit_accuracy: Suit-match percentage.
        number_accuracy: Number-match percentage.
        best_streak: Longest run of consecutive exact matches.
        current_streak: Run of exact matches ending at the newest guess.
    """

    deck_type: DeckType
    total_guesses: int
    exact_matches: int
    suit_matches: int
    number_matches: int
    accuracy: float
    suit_accuracy: float
    number_accuracy: float
    best_streak: int
    current_streak: int


@dataclass(frozen=True)
class HeatMapData:
    """
    Accuracy in one (day-of-week, hour-of-day) bucket.

    Attributes:
        day: 0-6, Sunday first.
        hour: 0-23, local time.
        count: Guesses that fell into the bucket.
        accuracy: Exact-match percentage within the bucket.
    """

    day: int
    hour: int
    count: int
    accuracy: float


@dataclass(frozen=True)
class TimeSlot:
    """The best-performing heatmap bucket."""

    day: int
    hour: int
    accuracy: float


@dataclass(frozen=True)
class CardAccuracy:
    card_id: str  # "<suit>-<number>" or "<suit>-suit-only"
    card_name: str
    attempts: int
    successes: int
    accuracy: float


@dataclass(frozen=True)
class SuitAccuracy:
    suit: str
    attempts: int
    successes: int
    accuracy: float


@dataclass(frozen=True)
class NumberAccuracy:
    number: str
    attempts: int
    successes: int
    accuracy: float


@dataclass(frozen=True)
class ProgressDataPoint:
    """
    One endpoint of the rolling-window accuracy series.

    Attributes:
        date: Local calendar day of the window's last guess.
        accuracy: Exact-match percentage over the trailing window.
        guess_count: Guesses from the start of the series up to this point.
    """

    date: date
    accuracy: float
    guess_count: int
