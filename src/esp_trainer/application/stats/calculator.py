"""
Statistics calculator for deriving insights from raw guess records.

This is a pure computation module with no I/O. Every function accepts the
records in any order, never mutates the caller's list, and sorts a copy
whenever chronological order matters.
"""

from collections.abc import Hashable, Iterable
from datetime import datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from esp_trainer.domain.constants import (
    DAY_NAMES,
    DEFAULT_HEATMAP_MIN_POINTS,
    DEFAULT_WINDOW_SIZE,
    PERCENT_DECIMALS,
    SUIT_ONLY_SENTINEL,
    UNKNOWN_DAY,
)
from esp_trainer.domain.guesses.models import DeckType, SuitAndNumberGuess
from esp_trainer.domain.guesses.ports import StoredGuess
from esp_trainer.domain.stats.models import (
    CardAccuracy,
    DeckStats,
    HeatMapData,
    NumberAccuracy,
    ProgressDataPoint,
    SuitAccuracy,
    TimeSlot,
)

_QUANTUM = Decimal(1).scaleb(-PERCENT_DECIMALS)


def round_percentage(value: float) -> float:
    """
    Round to two decimals, half-up on the exact binary value of the float.

    round() would apply banker's rounding (3.125 -> 3.12); this gives 3.13.
    """
    return float(Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return round_percentage(part / whole * 100)


def _local_datetime(timestamp_ms: int, tz: tzinfo | None) -> datetime:
    # tz=None means the process's local zone
    return datetime.fromtimestamp(timestamp_ms / 1000, tz)


def _chronological(records: list[StoredGuess]) -> list[StoredGuess]:
    return sorted(records, key=lambda r: r.timestamp)


def _tally(pairs: Iterable[tuple[Hashable, bool]]) -> dict[Hashable, list[int]]:
    """Group (key, success) pairs into {key: [attempts, successes]}, first-seen order."""
    groups: dict[Hashable, list[int]] = {}
    for key, success in pairs:
        counts = groups.setdefault(key, [0, 0])
        counts[0] += 1
        if success:
            counts[1] += 1
    return groups


# ---------------------------------------------------------------------------
# Deck summary
# ---------------------------------------------------------------------------


def calculate_deck_stats(records: list[StoredGuess], deck_type: DeckType) -> DeckStats:
    """
    Calculate summary stats for one deck.

    Records from other decks are ignored. With no guesses every field is 0.
    """
    deck_records = [r for r in records if r.deck_type == deck_type]

    total = len(deck_records)
    exact = sum(1 for r in deck_records if r.exact_match)
    suit = sum(1 for r in deck_records if r.suit_match)
    number = sum(1 for r in deck_records if r.number_match)

    return DeckStats(
        deck_type=deck_type,
        total_guesses=total,
        exact_matches=exact,
        suit_matches=suit,
        number_matches=number,
        accuracy=_percentage(exact, total),
        suit_accuracy=_percentage(suit, total),
        number_accuracy=_percentage(number, total),
        best_streak=calculate_best_streak(deck_records),
        current_streak=calculate_current_streak(deck_records),
    )


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------


def calculate_best_streak(records: list[StoredGuess]) -> int:
    """Longest run of consecutive exact matches in chronological order."""
    best = 0
    current = 0

    for record in _chronological(records):
        if record.exact_match:
            current += 1
            best = max(best, current)
        else:
            current = 0

    return best


def calculate_current_streak(records: list[StoredGuess]) -> int:
    """Run of exact matches ending at the most recent guess."""
    streak = 0

    # reverse=True keeps equal timestamps in input order
    for record in sorted(records, key=lambda r: r.timestamp, reverse=True):
        if not record.exact_match:
            break
        streak += 1

    return streak


# ---------------------------------------------------------------------------
# Heatmap
# ---------------------------------------------------------------------------


def calculate_heatmap_data(
    records: list[StoredGuess],
    min_data_points: int = DEFAULT_HEATMAP_MIN_POINTS,
    tz: tzinfo | None = None,
) -> list[HeatMapData]:
    """
    Bucket exact-match accuracy by (day-of-week, hour-of-day).

    Buckets with fewer than `min_data_points` guesses are dropped, so the
    result is sparse. Output order is not significant.
    """

    def bucket(record: StoredGuess) -> tuple[int, int]:
        moment = _local_datetime(record.timestamp, tz)
        # isoweekday: Monday=1 .. Sunday=7
        return moment.isoweekday() % 7, moment.hour

    groups = _tally((bucket(r), r.exact_match) for r in records)

    return [
        HeatMapData(
            day=day,
            hour=hour,
            count=attempts,
            accuracy=_percentage(successes, attempts),
        )
        for (day, hour), (attempts, successes) in groups.items()
        if attempts >= min_data_points
    ]


def get_best_time_slot(heatmap: list[HeatMapData]) -> TimeSlot | None:
    """Bucket with the highest accuracy; the first one wins on ties."""
    best: HeatMapData | None = None
    for cell in heatmap:
        if best is None or cell.accuracy > best.accuracy:
            best = cell

    if best is None:
        return None
    return TimeSlot(day=best.day, hour=best.hour, accuracy=best.accuracy)


# ---------------------------------------------------------------------------
# Entity accuracy
# ---------------------------------------------------------------------------


def calculate_card_accuracy(records: list[StoredGuess]) -> list[CardAccuracy]:
    """
    Exact-match accuracy per drawn card, best first.

    Suit-only cards are identified by the suit alone.
    """

    def card_key(record: StoredGuess) -> tuple[str, str | None]:
        if isinstance(record, SuitAndNumberGuess):
            return record.actual_suit, record.actual_number
        return record.actual_suit, None

    groups = _tally((card_key(r), r.exact_match) for r in records)

    results = []
    for (suit, number), (attempts, successes) in groups.items():
        if number is None:
            card_id, card_name = f"{suit}-{SUIT_ONLY_SENTINEL}", suit
        else:
            card_id, card_name = f"{suit}-{number}", f"{number} of {suit}"
        results.append(
            CardAccuracy(
                card_id=card_id,
                card_name=card_name,
                attempts=attempts,
                successes=successes,
                accuracy=_percentage(successes, attempts),
            )
        )

    return sorted(results, key=lambda c: c.accuracy, reverse=True)


def calculate_suit_accuracy(records: list[StoredGuess]) -> list[SuitAccuracy]:
    """Suit-match accuracy per drawn suit, best first."""
    groups = _tally((r.actual_suit, r.suit_match) for r in records)

    results = [
        SuitAccuracy(
            suit=suit,
            attempts=attempts,
            successes=successes,
            accuracy=_percentage(successes, attempts),
        )
        for suit, (attempts, successes) in groups.items()
    ]
    return sorted(results, key=lambda s: s.accuracy, reverse=True)


def calculate_number_accuracy(records: list[StoredGuess]) -> list[NumberAccuracy]:
    """Number-match accuracy per drawn number, best first. Suit-only guesses are skipped."""
    groups = _tally(
        (r.actual_number, r.number_match)
        for r in records
        if isinstance(r, SuitAndNumberGuess)
    )

    results = [
        NumberAccuracy(
            number=number,
            attempts=attempts,
            successes=successes,
            accuracy=_percentage(successes, attempts),
        )
        for number, (attempts, successes) in groups.items()
    ]
    return sorted(results, key=lambda n: n.accuracy, reverse=True)


# ---------------------------------------------------------------------------
# Progress series
# ---------------------------------------------------------------------------


def calculate_progress_data(
    records: list[StoredGuess],
    window_size: int = DEFAULT_WINDOW_SIZE,
    days: int = 0,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[ProgressDataPoint]:
    """
    Rolling exact-match accuracy over time.

    Args:
        records: Guesses in any order.
        window_size: Guesses per rolling window.
        days: Only include guesses from the last N calendar days (0 = all time).
        now: Reference time for the `days` cutoff. Defaults to the current
            time, which makes the result time-dependent; pass it explicitly
            for reproducible output.
        tz: Zone used for calendar dates. Defaults to local time.

    Returns:
        One point per window endpoint. With fewer than `window_size` guesses,
        a single point covering all of them; with none, an empty list.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")

    if days > 0:
        reference = now if now is not None else datetime.now(tz)
        cutoff_ms = (reference - timedelta(days=days)).timestamp() * 1000
        records = [r for r in records if r.timestamp >= cutoff_ms]

    ordered = _chronological(records)
    if not ordered:
        return []

    def point(window: list[StoredGuess], guess_count: int) -> ProgressDataPoint:
        exact = sum(1 for r in window if r.exact_match)
        return ProgressDataPoint(
            date=_local_datetime(window[-1].timestamp, tz).date(),
            accuracy=_percentage(exact, len(window)),
            guess_count=guess_count,
        )

    if len(ordered) < window_size:
        return [point(ordered, len(ordered))]

    return [
        point(ordered[i - window_size + 1 : i + 1], i + 1)
        for i in range(window_size - 1, len(ordered))
    ]


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_day_name(day: int) -> str:
    if 0 <= day < len(DAY_NAMES):
        return DAY_NAMES[day]
    return UNKNOWN_DAY


def format_time_slot(hour: int) -> str:
    """Hour 0-23 as a 12-hour clock label, e.g. 0 -> '12:00 AM', 13 -> '1:00 PM'."""
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:00 {suffix}"
