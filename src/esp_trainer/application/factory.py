"""
Service Factory
Centralizes wiring of storage adapters into application services.
"""

from esp_trainer.application.config import AppConfig
from esp_trainer.application.guessing import GuessService
from esp_trainer.application.stats.service import GuessStatsService
from esp_trainer.domain.guesses.ports import GuessRepository, PreferencesStore
from esp_trainer.infrastructure.preferences import JsonPreferencesStore
from esp_trainer.infrastructure.sqlite_repository import SqliteGuessRepository


def get_guess_repository(config: AppConfig) -> GuessRepository:
    """
    Returns the GuessRepository implementation for the configured database.
    """
    assert config.db_path is not None, "resolve_config() fills db_path"
    return SqliteGuessRepository(config.db_path)


def get_preferences_store(config: AppConfig) -> PreferencesStore:
    assert config.preferences_path is not None, "resolve_config() fills preferences_path"
    return JsonPreferencesStore(config.preferences_path)


def get_stats_service(config: AppConfig) -> GuessStatsService:
    return GuessStatsService(
        get_guess_repository(config),
        window_size=config.window_size,
        heatmap_min_points=config.heatmap_min_points,
    )


def get_guess_service(config: AppConfig) -> GuessService:
    return GuessService(get_guess_repository(config), get_preferences_store(config))
