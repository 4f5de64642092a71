# Domain Decks Package
from .catalog import (
    Card,
    Suit,
    find_card,
    get_cards_for_deck,
    get_deck_chance_accuracy,
    get_numbers_for_suit,
    get_suits_for_deck,
)

__all__ = [
    "Card",
    "Suit",
    "find_card",
    "get_cards_for_deck",
    "get_deck_chance_accuracy",
    "get_numbers_for_suit",
    "get_suits_for_deck",
]
