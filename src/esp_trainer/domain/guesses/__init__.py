# Domain Guesses Package
from .models import (
    DeckType,
    GuessRecord,
    SuitAndNumberGuess,
    SuitOnlyGuess,
    deck_requires_number,
    make_guess_record,
    parse_deck_type,
)
from .ports import GuessRepository, Preferences, PreferencesStore, StoredGuess

__all__ = [
    "DeckType",
    "GuessRecord",
    "SuitOnlyGuess",
    "SuitAndNumberGuess",
    "StoredGuess",
    "deck_requires_number",
    "make_guess_record",
    "parse_deck_type",
    "GuessRepository",
    "Preferences",
    "PreferencesStore",
]
