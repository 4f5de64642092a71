"""Drawing cards and recording guesses against them."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ulid import ULID

from esp_trainer.domain.constants import GUESS_ID_PREFIX
from esp_trainer.domain.decks.catalog import (
    Card,
    get_cards_for_deck,
    get_numbers_for_suit,
    get_suits_for_deck,
)
from esp_trainer.domain.guesses.models import DeckType, deck_requires_number, make_guess_record
from esp_trainer.domain.guesses.ports import GuessRepository, PreferencesStore, StoredGuess

logger = logging.getLogger(__name__)


def generate_guess_id() -> str:
    """Generate a sortable, unique guess ID using ULID."""
    return f"{GUESS_ID_PREFIX}{ULID()}"


def draw_secure_random_card(cards: list[Card]) -> Card:
    """
    Pick a card uniformly at random from a cryptographically secure source.

    The draw must not be predictable from, or influenced by, the guess.

    Raises:
        ValueError: If `cards` is empty.
    """
    if not cards:
        raise ValueError("Cards list cannot be empty")
    return cards[secrets.randbelow(len(cards))]


def build_guess_record(
    deck_type: DeckType,
    guessed_suit: str,
    guessed_number: str | None,
    card: Card,
    timestamp: int,
) -> StoredGuess:
    """Compare a guess with the drawn card and produce the record to store."""
    suit_match = card.suit == guessed_suit
    number_match = card.number == guessed_number if deck_requires_number(deck_type) else True

    return make_guess_record(
        id=generate_guess_id(),
        timestamp=timestamp,
        deck_type=deck_type,
        guessed_suit=guessed_suit,
        guessed_number=guessed_number,
        actual_suit=card.suit,
        actual_number=card.number,
        suit_match=suit_match,
        number_match=number_match,
        exact_match=suit_match and number_match,
    )


@dataclass
class GuessOutcome:
    """Result of one guess-and-reveal."""

    card: Card
    record: StoredGuess
    current_streak: int


class GuessService:
    """
    Runs guess sessions: validates a guess, draws a card, stores the record.

    The session streak is transient; it lives only as long as the service.
    """

    def __init__(
        self,
        repository: GuessRepository,
        preferences: PreferencesStore,
        clock: Callable[[], datetime] | None = None,
        draw: Callable[[list[Card]], Card] = draw_secure_random_card,
    ):
        self._repo = repository
        self._prefs = preferences
        self._clock = clock or datetime.now
        self._draw = draw
        self.current_streak = 0

    def _validate_guess(
        self, deck_type: DeckType, guessed_suit: str, guessed_number: str | None
    ) -> None:
        suit_ids = [s.id for s in get_suits_for_deck(deck_type)]
        if guessed_suit not in suit_ids:
            raise ValueError(
                f"Unknown suit '{guessed_suit}' for {deck_type}. "
                f"Choose from: {', '.join(suit_ids)}"
            )

        if not deck_requires_number(deck_type):
            if guessed_number is not None:
                raise ValueError(f"{deck_type} cards have no numbers")
            return

        numbers = get_numbers_for_suit(deck_type, guessed_suit)
        if guessed_number is None:
            raise ValueError(
                f"{deck_type} guesses need a number. Choose from: {', '.join(numbers)}"
            )
        if guessed_number not in numbers:
            raise ValueError(
                f"Unknown number '{guessed_number}' for {guessed_suit}. "
                f"Choose from: {', '.join(numbers)}"
            )

    async def draw_and_record(
        self,
        guessed_suit: str,
        guessed_number: str | None = None,
        deck_type: DeckType | None = None,
    ) -> GuessOutcome:
        """
        Validate the guess, draw a card and persist the resulting record.

        Args:
            guessed_suit: Suit id, e.g. "hearts" or "circle".
            guessed_number: Number within the suit; omit for suit-only decks.
            deck_type: Deck to draw from; defaults to the preferred deck.

        Raises:
            ValueError: If the suit or number is not in the deck.
        """
        deck = deck_type or self._prefs.load().selected_deck
        self._validate_guess(deck, guessed_suit, guessed_number)

        card = self._draw(get_cards_for_deck(deck))
        timestamp = int(self._clock().timestamp() * 1000)
        record = build_guess_record(deck, guessed_suit, guessed_number, card, timestamp)

        self.current_streak = self.current_streak + 1 if record.exact_match else 0

        await self._repo.save_guess(record)
        logger.debug(f"Recorded {record.id}: drew {card.id}, exact={record.exact_match}")

        return GuessOutcome(card=card, record=record, current_streak=self.current_streak)

    def select_deck(self, deck_type: DeckType) -> None:
        """Persist the preferred deck and reset the session streak."""
        prefs = self._prefs.load()
        self._prefs.save(prefs.model_copy(update={"selected_deck": deck_type}))
        self.current_streak = 0
