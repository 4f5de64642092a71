"""Tests for CLI commands: decks, guess, stats views, prune, prefs and config."""

import asyncio
import json
import logging
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from esp_trainer.infrastructure.sqlite_repository import SqliteGuessRepository
from esp_trainer.interface.cli import app

runner = CliRunner()


@pytest.fixture
def seeded_db(data_dir, make_guess):
    """Six playing-card guesses and three Zener guesses, all within the last day."""
    repo = SqliteGuessRepository(data_dir / "telepathy.db")
    start = datetime.now() - timedelta(hours=1)

    async def seed():
        for i in range(6):
            await repo.save_guess(
                make_guess(
                    int((start + timedelta(seconds=i)).timestamp() * 1000),
                    hit=i < 3,
                    actual_number=str(i + 2),
                )
            )
        for i in range(3):
            await repo.save_guess(
                make_guess(
                    int((start + timedelta(seconds=10 + i)).timestamp() * 1000),
                    deck_type="zener",
                    actual_suit="star",
                )
            )

    asyncio.run(seed())
    return repo


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Practice and measure ESP card guessing" in result.stdout
    assert "guess" in result.stdout
    assert "stats" in result.stdout


def test_verbose_flag_enables_debug_logging():
    runner.invoke(app, ["-v", "decks"])
    assert logging.getLogger("esp_trainer").level == logging.DEBUG

    runner.invoke(app, ["decks"])
    assert logging.getLogger("esp_trainer").level == logging.INFO


def test_decks_lists_chance_accuracy():
    result = runner.invoke(app, ["decks"])
    assert result.exit_code == 0
    assert "playing" in result.stdout
    assert "52 cards" in result.stdout
    assert "20.00%" in result.stdout


# --- Guess ---


@patch("esp_trainer.application.guessing.secrets.randbelow", return_value=0)
def test_guess_exact_match(mock_rand, data_dir):
    result = runner.invoke(app, ["guess", "hearts", "Ace", "--deck", "playing"])

    assert result.exit_code == 0
    assert "Drawn card: Ace of Hearts" in result.stdout
    assert "Exact match!" in result.stdout
    assert "Current streak: 1" in result.stdout


@patch("esp_trainer.application.guessing.secrets.randbelow", return_value=0)
def test_guess_is_persisted(mock_rand, data_dir):
    runner.invoke(app, ["guess", "star", "--deck", "zener"])

    result = runner.invoke(app, ["stats", "--deck", "zener", "--json"])

    [stats] = json.loads(result.stdout)
    assert stats["total_guesses"] == 1
    assert stats["exact_matches"] == 0


def test_guess_uses_preferred_deck(data_dir):
    runner.invoke(app, ["prefs", "set-deck", "zener"])

    with patch("esp_trainer.application.guessing.secrets.randbelow", return_value=4):
        result = runner.invoke(app, ["guess", "star"])

    assert result.exit_code == 0
    assert "Drawn card: Star" in result.stdout


@patch("esp_trainer.application.guessing.secrets.randbelow", return_value=0)
def test_guess_shows_tip_once_and_concentration_prompt(mock_rand, data_dir):
    first = runner.invoke(app, ["guess", "circle", "--deck", "zener"])
    second = runner.invoke(app, ["guess", "circle", "--deck", "zener"])

    assert "Tip:" in first.stdout
    assert "Tip:" not in second.stdout
    assert "concentrate on the card" in first.stdout
    assert "concentrate on the card" in second.stdout


@patch("esp_trainer.application.guessing.secrets.randbelow", return_value=0)
def test_guess_respects_disabled_concentration_prompt(mock_rand, data_dir):
    runner.invoke(app, ["prefs", "set", "--no-concentration-prompt", "--seen-help"])

    result = runner.invoke(app, ["guess", "circle", "--deck", "zener"])

    assert result.exit_code == 0
    assert "concentrate on the card" not in result.stdout
    assert "Tip:" not in result.stdout


def test_guess_unknown_suit(data_dir):
    result = runner.invoke(app, ["guess", "cups", "Ace", "--deck", "playing"])
    assert result.exit_code == 2
    assert "Unknown suit 'cups'" in result.stdout


def test_guess_unknown_deck(data_dir):
    result = runner.invoke(app, ["guess", "hearts", "Ace", "--deck", "uno"])
    assert result.exit_code == 2


# --- Stats views ---


def test_stats_overview_table(seeded_db):
    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "Deck Stats" in result.stdout
    assert "50.00%" in result.stdout
    assert "100.00%" in result.stdout


def test_stats_deck_json(seeded_db):
    result = runner.invoke(app, ["stats", "--deck", "playing", "--json"])

    assert result.exit_code == 0
    [stats] = json.loads(result.stdout)
    assert stats["deck_type"] == "playing"
    assert stats["total_guesses"] == 6
    assert stats["accuracy"] == 50.0
    assert stats["best_streak"] == 3
    assert stats["current_streak"] == 0


def test_heatmap_not_enough_data(data_dir):
    result = runner.invoke(app, ["heatmap"])
    assert result.exit_code == 0
    assert "Not enough data yet" in result.stdout


def test_heatmap_json(seeded_db):
    result = runner.invoke(app, ["heatmap", "--min-points", "1", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert sum(c["count"] for c in payload["cells"]) == 9
    assert payload["best"] is not None


def test_cards_ranking(seeded_db):
    result = runner.invoke(app, ["cards", "--deck", "playing", "--json"])

    rows = json.loads(result.stdout)
    assert len(rows) == 6
    assert rows[0]["accuracy"] == 100.0
    assert rows[-1]["accuracy"] == 0.0


def test_suits_ranking_limit(seeded_db):
    result = runner.invoke(app, ["suits", "-n", "1", "--json"])

    rows = json.loads(result.stdout)
    assert rows == [{"suit": "star", "attempts": 3, "successes": 3, "accuracy": 100.0}]


def test_numbers_skip_zener(seeded_db):
    result = runner.invoke(app, ["numbers", "--json"])

    rows = json.loads(result.stdout)
    assert sorted(r["number"] for r in rows) == ["2", "3", "4", "5", "6", "7"]


def test_numbers_table(seeded_db):
    result = runner.invoke(app, ["numbers", "--deck", "playing"])
    assert result.exit_code == 0
    assert "1/1" in result.stdout


def test_progress_json(seeded_db):
    result = runner.invoke(app, ["progress", "--deck", "playing", "--window", "4", "--json"])

    assert result.exit_code == 0
    points = json.loads(result.stdout)
    assert [p["guess_count"] for p in points] == [4, 5, 6]
    assert [p["accuracy"] for p in points] == [75.0, 50.0, 25.0]


def test_progress_range(seeded_db):
    result = runner.invoke(app, ["progress", "--range", "7d"])
    assert result.exit_code == 0
    assert "after 9 guesses" in result.stdout


def test_progress_bad_range(data_dir):
    result = runner.invoke(app, ["progress", "--range", "1y"])
    assert result.exit_code == 2


def test_history_lists_newest_first(seeded_db):
    result = runner.invoke(app, ["history", "--deck", "playing", "-n", "2", "--json"])

    assert result.exit_code == 0
    page = json.loads(result.stdout)
    assert [r["actual_number"] for r in page["records"]] == ["7", "6"]
    assert page["total_guesses"] == 6
    assert page["exact_matches"] == 3


def test_history_table(seeded_db):
    result = runner.invoke(app, ["history"])

    assert result.exit_code == 0
    assert "Showing 9 of 9 guesses (6 exact)." in result.stdout


# --- Prune ---


def test_prune_requires_retention(data_dir):
    result = runner.invoke(app, ["prune", "--force"])
    assert result.exit_code == 2
    assert "No retention configured" in result.stdout


def test_prune_keeps_recent_guesses(seeded_db):
    result = runner.invoke(app, ["prune", "--days", "30", "--force"])

    assert result.exit_code == 0
    assert "Deleted 0 guesses." in result.stdout
    assert asyncio.run(seeded_db.get_total_guess_count()) == 9


def test_prune_asks_for_confirmation(seeded_db):
    result = runner.invoke(app, ["prune", "--days", "30"], input="n\n")
    assert result.exit_code == 1


def test_reset_clears_everything(seeded_db):
    result = runner.invoke(app, ["reset", "--force"])

    assert result.exit_code == 0
    assert "Deleted 9 guesses." in result.stdout
    assert asyncio.run(seeded_db.get_total_guess_count()) == 0


def test_reset_asks_for_confirmation(seeded_db):
    result = runner.invoke(app, ["reset"], input="n\n")

    assert result.exit_code == 1
    assert asyncio.run(seeded_db.get_total_guess_count()) == 9


# --- Prefs / Config ---


def test_prefs_set_and_show(data_dir):
    result = runner.invoke(app, ["prefs", "set-deck", "thoth"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["prefs", "show"])
    assert json.loads(result.stdout)["selected_deck"] == "thoth"


def test_prefs_set_flags(data_dir):
    result = runner.invoke(app, ["prefs", "set", "--no-concentration-prompt"])
    assert result.exit_code == 0

    prefs = json.loads(runner.invoke(app, ["prefs", "show"]).stdout)
    assert prefs["show_concentration_prompt"] is False
    assert prefs["has_seen_help"] is False
    assert prefs["selected_deck"] == "zener"


def test_prefs_set_requires_a_flag(data_dir):
    result = runner.invoke(app, ["prefs", "set"])
    assert result.exit_code == 2


def test_prefs_set_unknown_deck(data_dir):
    result = runner.invoke(app, ["prefs", "set-deck", "uno"])
    assert result.exit_code == 2


def test_config_show(data_dir):
    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["window_size"] == 20
    assert output["db_path"].endswith("telepathy.db")
    assert "log_dir" not in output
