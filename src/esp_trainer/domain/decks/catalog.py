"""
Card catalog for the four supported decks.

Pure data plus lookup helpers; no I/O.
"""

from dataclasses import dataclass

from esp_trainer.domain.guesses.models import DeckType


@dataclass(frozen=True)
class Suit:
    id: str
    name: str
    deck_type: DeckType


@dataclass(frozen=True)
class Card:
    """
    A single drawable card.

    Attributes:
        id: Catalog-unique identifier, e.g. "playing-hearts-ace".
        suit: Suit id the card belongs to.
        number: Rank within the suit; None for suit-only (Zener) cards.
        name: Display name.
        deck_type: Deck the card belongs to.
    """

    id: str
    suit: str
    number: str | None
    name: str
    deck_type: DeckType


# ---------- Zener ----------

ZENER_SUITS = [
    Suit("circle", "Circle", "zener"),
    Suit("cross", "Cross", "zener"),
    Suit("waves", "Waves", "zener"),
    Suit("square", "Square", "zener"),
    Suit("star", "Star", "zener"),
]

ZENER_CARDS = [Card(f"zener-{s.id}", s.id, None, s.name, "zener") for s in ZENER_SUITS]

# ---------- Tarot helpers ----------

ROMAN_NUMERALS = [
    "0", "I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X",
    "XI", "XII", "XIII", "XIV", "XV", "XVI", "XVII", "XVIII", "XIX", "XX", "XXI",
]


def _major_arcana(deck_type: DeckType, titles: list[str]) -> list[Card]:
    return [
        Card(
            id=f"{deck_type}-major-{i}",
            suit="major",
            number=str(i),
            name=f"{ROMAN_NUMERALS[i]}. {title}",
            deck_type=deck_type,
        )
        for i, title in enumerate(titles)
    ]


def _minor_arcana(deck_type: DeckType, suits: list[str], numbers: list[str]) -> list[Card]:
    return [
        Card(
            id=f"{deck_type}-{suit}-{number.lower()}",
            suit=suit,
            number=number,
            name=f"{number} of {suit.capitalize()}",
            deck_type=deck_type,
        )
        for suit in suits
        for number in numbers
    ]


# ---------- Rider-Waite-Smith ----------

RWS_SUITS = [
    Suit("major", "Major Arcana", "rws"),
    Suit("wands", "Wands", "rws"),
    Suit("cups", "Cups", "rws"),
    Suit("swords", "Swords", "rws"),
    Suit("pentacles", "Pentacles", "rws"),
]

RWS_MAJOR_TITLES = [
    "The Fool", "The Magician", "The High Priestess", "The Empress", "The Emperor",
    "The Hierophant", "The Lovers", "The Chariot", "Strength", "The Hermit",
    "Wheel of Fortune", "Justice", "The Hanged Man", "Death", "Temperance",
    "The Devil", "The Tower", "The Star", "The Moon", "The Sun", "Judgement",
    "The World",
]

RWS_MINOR_NUMBERS = [
    "Ace", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten",
    "Page", "Knight", "Queen", "King",
]

RWS_CARDS = _major_arcana("rws", RWS_MAJOR_TITLES) + _minor_arcana(
    "rws", ["wands", "cups", "swords", "pentacles"], RWS_MINOR_NUMBERS
)

# ---------- Thoth ----------

THOTH_SUITS = [
    Suit("major", "Major Arcana", "thoth"),
    Suit("wands", "Wands", "thoth"),
    Suit("cups", "Cups", "thoth"),
    Suit("swords", "Swords", "thoth"),
    Suit("disks", "Disks", "thoth"),
]

THOTH_MAJOR_TITLES = [
    "The Fool", "The Magus", "The Priestess", "The Empress", "The Emperor",
    "The Hierophant", "The Lovers", "The Chariot", "Adjustment", "The Hermit",
    "Fortune", "Lust", "The Hanged Man", "Death", "Art", "The Devil", "The Tower",
    "The Star", "The Moon", "The Sun", "The Aeon", "The Universe",
]

# Thoth court cards differ from RWS
THOTH_MINOR_NUMBERS = [
    "Ace", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten",
    "Princess", "Prince", "Queen", "Knight",
]

THOTH_CARDS = _major_arcana("thoth", THOTH_MAJOR_TITLES) + _minor_arcana(
    "thoth", ["wands", "cups", "swords", "disks"], THOTH_MINOR_NUMBERS
)

# ---------- Playing cards ----------

PLAYING_SUITS = [
    Suit("hearts", "Hearts", "playing"),
    Suit("diamonds", "Diamonds", "playing"),
    Suit("clubs", "Clubs", "playing"),
    Suit("spades", "Spades", "playing"),
]

PLAYING_NUMBERS = ["Ace", "2", "3", "4", "5", "6", "7", "8", "9", "10", "Jack", "Queen", "King"]

PLAYING_CARDS = [
    Card(
        id=f"playing-{suit.id}-{number.lower()}",
        suit=suit.id,
        number=number,
        name=f"{number} of {suit.name}",
        deck_type="playing",
    )
    for suit in PLAYING_SUITS
    for number in PLAYING_NUMBERS
]

_CARDS: dict[str, list[Card]] = {
    "zener": ZENER_CARDS,
    "rws": RWS_CARDS,
    "thoth": THOTH_CARDS,
    "playing": PLAYING_CARDS,
}

_SUITS: dict[str, list[Suit]] = {
    "zener": ZENER_SUITS,
    "rws": RWS_SUITS,
    "thoth": THOTH_SUITS,
    "playing": PLAYING_SUITS,
}


def get_cards_for_deck(deck_type: DeckType) -> list[Card]:
    return list(_CARDS[deck_type])


def get_suits_for_deck(deck_type: DeckType) -> list[Suit]:
    return list(_SUITS[deck_type])


def get_numbers_for_suit(deck_type: DeckType, suit: str) -> list[str]:
    """Numbers available in a suit, in catalog order. Empty for Zener."""
    return [c.number for c in _CARDS[deck_type] if c.suit == suit and c.number is not None]


def find_card(deck_type: DeckType, suit: str, number: str | None = None) -> Card | None:
    for card in _CARDS[deck_type]:
        if card.suit == suit and card.number == number:
            return card
    return None


def get_deck_chance_accuracy(deck_type: DeckType) -> float:
    """Exact-match rate expected from pure guessing, as a percentage."""
    return 100 / len(_CARDS[deck_type])
