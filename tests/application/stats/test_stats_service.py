from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from esp_trainer.application.stats.service import GuessStatsService

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


def ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


@pytest.fixture
def mock_repo():
    return AsyncMock()


@pytest.fixture
def service(mock_repo):
    return GuessStatsService(repository=mock_repo, clock=lambda: NOW, window_size=3)


@pytest.mark.asyncio
async def test_load_stats_for_one_deck(service, mock_repo, make_guess):
    mock_repo.get_all_guesses.return_value = [
        make_guess(ms(NOW) - i * 1000, hit=i % 2 == 0, actual_number=str(i + 2))
        for i in range(4)
    ]

    snapshot = await service.load_stats("playing")

    mock_repo.get_all_guesses.assert_called_once_with("playing")
    assert snapshot.deck_type == "playing"
    assert snapshot.deck_stats is not None
    assert snapshot.deck_stats.total_guesses == 4
    assert snapshot.deck_stats.accuracy == 50.0
    assert len(snapshot.card_accuracy) == 4
    assert len(snapshot.number_accuracy) == 4
    assert [p.guess_count for p in snapshot.progress] == [3, 4]


@pytest.mark.asyncio
async def test_load_stats_all_decks_has_no_deck_summary(service, mock_repo, make_guess):
    mock_repo.get_all_guesses.return_value = [
        make_guess(1000, deck_type="zener", actual_suit="star"),
        make_guess(2000),
    ]

    snapshot = await service.load_stats()

    mock_repo.get_all_guesses.assert_called_once_with(None)
    assert snapshot.deck_stats is None
    assert {s.suit for s in snapshot.suit_accuracy} == {"star", "hearts"}
    assert [n.number for n in snapshot.number_accuracy] == ["Ace"]


@pytest.mark.asyncio
async def test_load_stats_empty(service, mock_repo):
    mock_repo.get_all_guesses.return_value = []

    snapshot = await service.load_stats("zener")

    assert snapshot.deck_stats.total_guesses == 0
    assert snapshot.heatmap == []
    assert snapshot.progress == []


@pytest.mark.asyncio
async def test_load_stats_uses_heatmap_threshold(mock_repo, make_guess):
    service = GuessStatsService(repository=mock_repo, heatmap_min_points=1)
    mock_repo.get_all_guesses.return_value = [make_guess(ms(NOW))]

    snapshot = await service.load_stats()

    assert len(snapshot.heatmap) == 1


@pytest.mark.asyncio
async def test_deck_overview_covers_every_deck(service, mock_repo, make_guess):
    mock_repo.get_all_guesses.return_value = [
        make_guess(1000, deck_type="zener", actual_suit="circle"),
        make_guess(2000, hit=False),
    ]

    overview = await service.get_deck_overview()

    assert [s.deck_type for s in overview] == ["zener", "rws", "thoth", "playing"]
    assert [s.total_guesses for s in overview] == [1, 0, 0, 1]


@pytest.mark.asyncio
async def test_progress_time_range_queries_by_date(service, mock_repo, make_guess):
    mock_repo.get_guesses_by_date_range.return_value = [
        make_guess(ms(NOW - timedelta(days=2)), hit=False),
        make_guess(ms(NOW - timedelta(days=5)), hit=True),
    ]

    week = await service.get_progress_data("playing", "7d")

    mock_repo.get_guesses_by_date_range.assert_called_once_with(
        ms(NOW - timedelta(days=7)), ms(NOW), "playing"
    )
    mock_repo.get_all_guesses.assert_not_called()
    assert [(p.guess_count, p.accuracy) for p in week] == [(2, 50.0)]


@pytest.mark.asyncio
async def test_progress_all_time_fetches_everything(service, mock_repo, make_guess):
    mock_repo.get_all_guesses.return_value = [
        make_guess(ms(NOW - timedelta(days=400)), hit=True),
        make_guess(ms(NOW - timedelta(days=2)), hit=False),
    ]

    points = await service.get_progress_data("playing", "all")

    mock_repo.get_all_guesses.assert_called_once_with("playing")
    mock_repo.get_guesses_by_date_range.assert_not_called()
    assert [(p.guess_count, p.accuracy) for p in points] == [(2, 50.0)]


@pytest.mark.asyncio
async def test_progress_rejects_unknown_range(service):
    with pytest.raises(ValueError, match="Unknown time range"):
        await service.get_progress_data(None, "1y")


@pytest.mark.asyncio
async def test_prune_older_than(service, mock_repo):
    mock_repo.delete_old_guesses.return_value = 5

    deleted = await service.prune_older_than(30)

    assert deleted == 5
    mock_repo.delete_old_guesses.assert_called_once_with(ms(NOW - timedelta(days=30)))


@pytest.mark.asyncio
async def test_prune_requires_positive_days(service, mock_repo):
    with pytest.raises(ValueError):
        await service.prune_older_than(0)
    mock_repo.delete_old_guesses.assert_not_called()


@pytest.mark.asyncio
async def test_get_history(service, mock_repo, make_guess):
    recent = [make_guess(3000), make_guess(2000, hit=False)]
    mock_repo.get_recent_guesses.return_value = recent
    mock_repo.get_total_guess_count.return_value = 12
    mock_repo.get_exact_match_count.return_value = 4

    page = await service.get_history(2, "playing")

    mock_repo.get_recent_guesses.assert_called_once_with(2, "playing")
    mock_repo.get_total_guess_count.assert_called_once_with("playing")
    mock_repo.get_exact_match_count.assert_called_once_with("playing")
    assert page.records == recent
    assert page.total_guesses == 12
    assert page.exact_matches == 4


@pytest.mark.asyncio
async def test_get_history_requires_positive_limit(service, mock_repo):
    with pytest.raises(ValueError):
        await service.get_history(0)
    mock_repo.get_recent_guesses.assert_not_called()


@pytest.mark.asyncio
async def test_clear_history(service, mock_repo):
    mock_repo.get_total_guess_count.return_value = 7

    cleared = await service.clear_history()

    assert cleared == 7
    mock_repo.clear_all.assert_awaited_once()
