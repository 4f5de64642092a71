"""
Guess Stats Service: Application layer orchestrator.

Coordinates fetching guesses from the repository and running every
calculator over the same snapshot of records.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Literal

from esp_trainer.domain.constants import (
    DECK_TYPES,
    DEFAULT_HEATMAP_MIN_POINTS,
    DEFAULT_WINDOW_SIZE,
    TIME_RANGE_DAYS,
)
from esp_trainer.domain.guesses.models import DeckType
from esp_trainer.domain.guesses.ports import GuessRepository, StoredGuess
from esp_trainer.domain.stats.models import (
    CardAccuracy,
    DeckStats,
    HeatMapData,
    NumberAccuracy,
    ProgressDataPoint,
    SuitAccuracy,
)

from . import calculator

logger = logging.getLogger(__name__)

TimeRange = Literal["7d", "30d", "90d", "all"]


@dataclass
class HistoryPage:
    """The most recent guesses plus totals for the same deck filter."""

    records: list[StoredGuess]
    total_guesses: int
    exact_matches: int


@dataclass
class StatsSnapshot:
    """
    Every derived view computed from one fetch of guess records.

    deck_stats is only populated when the snapshot was loaded for a single deck.
    """

    deck_type: DeckType | None
    records: list[StoredGuess]
    deck_stats: DeckStats | None = None
    heatmap: list[HeatMapData] = field(default_factory=list)
    card_accuracy: list[CardAccuracy] = field(default_factory=list)
    suit_accuracy: list[SuitAccuracy] = field(default_factory=list)
    number_accuracy: list[NumberAccuracy] = field(default_factory=list)
    progress: list[ProgressDataPoint] = field(default_factory=list)


class GuessStatsService:
    """
    Application service for fetching guesses and deriving statistics.

    Follows Dependency Inversion: depends on the GuessRepository abstraction,
    not a concrete storage adapter. The clock is injected so that
    time-relative queries are reproducible.
    """

    def __init__(
        self,
        repository: GuessRepository,
        clock: Callable[[], datetime] | None = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
        heatmap_min_points: int = DEFAULT_HEATMAP_MIN_POINTS,
    ):
        """
        Args:
            repository: The repository (port) for fetching guesses.
            clock: Returns "now"; defaults to local wall-clock time.
            window_size: Guesses per rolling window in progress series.
            heatmap_min_points: Minimum guesses for a heatmap bucket to be shown.
        """
        self._repo = repository
        self._clock = clock or datetime.now
        self._window_size = window_size
        self._heatmap_min_points = heatmap_min_points

    async def load_stats(self, deck_type: DeckType | None = None) -> StatsSnapshot:
        """
        Fetch guesses (all decks, or one) and compute every view from them.

        Call again to refresh after new guesses are recorded.
        """
        records = await self._repo.get_all_guesses(deck_type)
        logger.debug(f"Loaded {len(records)} guesses (deck={deck_type or 'all'})")

        return StatsSnapshot(
            deck_type=deck_type,
            records=records,
            deck_stats=(
                calculator.calculate_deck_stats(records, deck_type) if deck_type else None
            ),
            heatmap=calculator.calculate_heatmap_data(records, self._heatmap_min_points),
            card_accuracy=calculator.calculate_card_accuracy(records),
            suit_accuracy=calculator.calculate_suit_accuracy(records),
            number_accuracy=calculator.calculate_number_accuracy(records),
            progress=calculator.calculate_progress_data(records, self._window_size),
        )

    async def get_deck_overview(self) -> list[DeckStats]:
        """Summary stats for every deck, from a single fetch."""
        records = await self._repo.get_all_guesses()
        return [calculator.calculate_deck_stats(records, deck) for deck in DECK_TYPES]

    async def get_progress_data(
        self,
        deck_type: DeckType | None = None,
        time_range: TimeRange = "all",
    ) -> list[ProgressDataPoint]:
        """
        Rolling-window progress restricted to a recent time range.

        Raises:
            ValueError: If time_range is not one of 7d, 30d, 90d, all.
        """
        if time_range not in TIME_RANGE_DAYS:
            raise ValueError(
                f"Unknown time range '{time_range}'. "
                f"Expected one of: {', '.join(TIME_RANGE_DAYS)}"
            )

        days = TIME_RANGE_DAYS[time_range]
        now = self._clock()
        if days:
            start = now - timedelta(days=days)
            records = await self._repo.get_guesses_by_date_range(
                int(start.timestamp() * 1000), int(now.timestamp() * 1000), deck_type
            )
        else:
            records = await self._repo.get_all_guesses(deck_type)

        return calculator.calculate_progress_data(
            records, window_size=self._window_size, days=days, now=now
        )

    async def get_history(
        self, limit: int = 10, deck_type: DeckType | None = None
    ) -> HistoryPage:
        """The `limit` newest guesses, newest first, with overall counts."""
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        return HistoryPage(
            records=await self._repo.get_recent_guesses(limit, deck_type),
            total_guesses=await self._repo.get_total_guess_count(deck_type),
            exact_matches=await self._repo.get_exact_match_count(deck_type),
        )

    async def prune_older_than(self, days: int) -> int:
        """
        Retention pruning: delete guesses older than `days` calendar days.

        Returns:
            Number of deleted guesses.
        """
        if days < 1:
            raise ValueError(f"Retention must be at least 1 day, got {days}")

        cutoff = self._clock() - timedelta(days=days)
        deleted = await self._repo.delete_old_guesses(int(cutoff.timestamp() * 1000))
        logger.info(f"Pruned {deleted} guesses older than {cutoff:%Y-%m-%d %H:%M}")
        return deleted

    async def clear_history(self) -> int:
        """
        Delete every stored guess.

        Returns:
            Number of guesses that were stored before clearing.
        """
        total = await self._repo.get_total_guess_count()
        await self._repo.clear_all()
        logger.info(f"Cleared {total} guesses")
        return total
