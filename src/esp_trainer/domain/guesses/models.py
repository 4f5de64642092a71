"""
Domain models for guess records.

A guess record is one completed guess-and-reveal event. Decks whose cards
carry only a suit (Zener) produce SuitOnlyGuess records; every other deck
produces SuitAndNumberGuess records. Match flags are computed once by the
producer and are never re-derived.
"""

from dataclasses import dataclass
from typing import Literal, cast

from esp_trainer.domain.constants import DECK_TYPES

DeckType = Literal["zener", "rws", "thoth", "playing"]


def parse_deck_type(value: str) -> DeckType:
    """Validate a raw string as a DeckType, raising ValueError otherwise."""
    if value not in DECK_TYPES:
        raise ValueError(
            f"Unknown deck type '{value}'. Expected one of: {', '.join(DECK_TYPES)}"
        )
    return cast(DeckType, value)


def deck_requires_number(deck_type: DeckType) -> bool:
    """Zener cards carry suit identity only; every other deck also has numbers."""
    return deck_type != "zener"


@dataclass(frozen=True)
class GuessRecord:
    """
    Fields shared by both guess variants.

    Attributes:
        id: Opaque unique identifier.
        timestamp: Milliseconds since epoch; the ordering key for all
            chronological computations.
        deck_type: Deck the card was drawn from.
        guessed_suit: Suit the user guessed.
        actual_suit: Suit of the drawn card.
        suit_match: guessed_suit == actual_suit.
        exact_match: Suit matched and, where the deck has numbers, the
            number matched too.
    """

    id: str
    timestamp: int
    deck_type: DeckType
    guessed_suit: str
    actual_suit: str
    suit_match: bool
    exact_match: bool

    def __post_init__(self) -> None:
        parse_deck_type(self.deck_type)


@dataclass(frozen=True)
class SuitOnlyGuess(GuessRecord):
    """A guess against a suit-only deck (Zener)."""

    def __post_init__(self) -> None:
        super().__post_init__()
        if deck_requires_number(self.deck_type):
            raise ValueError(
                f"SuitOnlyGuess is only valid for suit-only decks, got '{self.deck_type}'"
            )

    # No number to miss, so the number never penalises exact_match.
    @property
    def number_match(self) -> bool:
        return True

    @property
    def guessed_number(self) -> None:
        return None

    @property
    def actual_number(self) -> None:
        return None


@dataclass(frozen=True)
class SuitAndNumberGuess(GuessRecord):
    """A guess against a deck whose cards have both a suit and a number."""

    guessed_number: str
    actual_number: str
    number_match: bool

    def __post_init__(self) -> None:
        super().__post_init__()
        if not deck_requires_number(self.deck_type):
            raise ValueError(
                f"SuitAndNumberGuess is not valid for suit-only deck '{self.deck_type}'"
            )


def make_guess_record(
    *,
    id: str,
    timestamp: int,
    deck_type: str,
    guessed_suit: str,
    actual_suit: str,
    suit_match: bool,
    number_match: bool,
    exact_match: bool,
    guessed_number: str | None = None,
    actual_number: str | None = None,
) -> SuitOnlyGuess | SuitAndNumberGuess:
    """
    Build the right record variant from the flat (optional-number) shape.

    Raises:
        ValueError: If a suit-only deck carries number fields, or a numbered
            deck is missing them.
    """
    deck = parse_deck_type(deck_type)

    if not deck_requires_number(deck):
        if guessed_number is not None or actual_number is not None:
            raise ValueError(f"Record {id}: '{deck}' guesses cannot carry numbers")
        return SuitOnlyGuess(
            id=id,
            timestamp=timestamp,
            deck_type=deck,
            guessed_suit=guessed_suit,
            actual_suit=actual_suit,
            suit_match=suit_match,
            exact_match=exact_match,
        )

    if guessed_number is None or actual_number is None:
        raise ValueError(f"Record {id}: '{deck}' guesses require both number fields")
    return SuitAndNumberGuess(
        id=id,
        timestamp=timestamp,
        deck_type=deck,
        guessed_suit=guessed_suit,
        actual_suit=actual_suit,
        suit_match=suit_match,
        exact_match=exact_match,
        guessed_number=guessed_number,
        actual_number=actual_number,
        number_match=number_match,
    )
