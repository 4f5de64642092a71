# Application Stats Package
from .calculator import (
    calculate_best_streak,
    calculate_card_accuracy,
    calculate_current_streak,
    calculate_deck_stats,
    calculate_heatmap_data,
    calculate_number_accuracy,
    calculate_progress_data,
    calculate_suit_accuracy,
    format_day_name,
    format_time_slot,
    get_best_time_slot,
    round_percentage,
)
from .service import GuessStatsService, HistoryPage, StatsSnapshot, TimeRange

__all__ = [
    "calculate_best_streak",
    "calculate_card_accuracy",
    "calculate_current_streak",
    "calculate_deck_stats",
    "calculate_heatmap_data",
    "calculate_number_accuracy",
    "calculate_progress_data",
    "calculate_suit_accuracy",
    "format_day_name",
    "format_time_slot",
    "get_best_time_slot",
    "round_percentage",
    "GuessStatsService",
    "HistoryPage",
    "StatsSnapshot",
    "TimeRange",
]
