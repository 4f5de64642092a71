from itertools import count

import pytest

from esp_trainer.domain.guesses.models import SuitAndNumberGuess, SuitOnlyGuess

_ids = count(1)


def _make_guess(
    timestamp: int = 0,
    hit: bool = True,
    *,
    deck_type: str = "playing",
    actual_suit: str = "hearts",
    actual_number: str = "Ace",
    suit_match: bool | None = None,
    number_match: bool | None = None,
):
    """
    Build a guess record. `hit` sets every flag; suit_match / number_match
    override individual flags to model partial matches.
    """
    suit_ok = hit if suit_match is None else suit_match
    number_ok = hit if number_match is None else number_match
    guessed_suit = actual_suit if suit_ok else f"not-{actual_suit}"

    if deck_type == "zener":
        return SuitOnlyGuess(
            id=f"g{next(_ids)}",
            timestamp=timestamp,
            deck_type="zener",
            guessed_suit=guessed_suit,
            actual_suit=actual_suit,
            suit_match=suit_ok,
            exact_match=suit_ok,
        )

    return SuitAndNumberGuess(
        id=f"g{next(_ids)}",
        timestamp=timestamp,
        deck_type=deck_type,
        guessed_suit=guessed_suit,
        actual_suit=actual_suit,
        suit_match=suit_ok,
        exact_match=suit_ok and number_ok,
        guessed_number=actual_number if number_ok else f"not-{actual_number}",
        actual_number=actual_number,
        number_match=number_ok,
    )


@pytest.fixture
def make_guess():
    """Factory for guess records."""
    return _make_guess


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Points ESP_DATA_DIR at a temp dir and isolates HOME from real config files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))

    d = tmp_path / "data"
    monkeypatch.setenv("ESP_DATA_DIR", str(d))
    return d
