"""
Ports (interfaces) for guess storage and user preferences.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from .models import DeckType, SuitAndNumberGuess, SuitOnlyGuess

StoredGuess = SuitOnlyGuess | SuitAndNumberGuess


class Preferences(BaseModel):
    """User preferences that survive between sessions."""

    selected_deck: DeckType = "zener"
    show_concentration_prompt: bool = True
    has_seen_help: bool = False


class GuessRepository(ABC):
    """
    Port for persisting and fetching guess records.

    Implementations:
        - SqliteGuessRepository: Local SQLite database file.
    """

    @abstractmethod
    async def save_guess(self, guess: StoredGuess) -> None:
        """Persist a single completed guess."""
        pass

    @abstractmethod
    async def get_all_guesses(self, deck_type: DeckType | None = None) -> list[StoredGuess]:
        """
        Fetch every guess, optionally restricted to one deck.

        Returns:
            Guesses sorted by timestamp descending (newest first).
        """
        pass

    @abstractmethod
    async def get_guesses_by_date_range(
        self,
        start_timestamp: int,
        end_timestamp: int,
        deck_type: DeckType | None = None,
    ) -> list[StoredGuess]:
        """Fetch guesses with start <= timestamp <= end, newest first."""
        pass

    @abstractmethod
    async def get_recent_guesses(
        self, limit: int, deck_type: DeckType | None = None
    ) -> list[StoredGuess]:
        """Fetch the `limit` most recent guesses, newest first."""
        pass

    @abstractmethod
    async def get_total_guess_count(self, deck_type: DeckType | None = None) -> int:
        pass

    @abstractmethod
    async def get_exact_match_count(self, deck_type: DeckType | None = None) -> int:
        pass

    @abstractmethod
    async def delete_old_guesses(self, before_timestamp: int) -> int:
        """
        Delete guesses strictly older than `before_timestamp`.

        Returns:
            Number of deleted rows.
        """
        pass

    @abstractmethod
    async def clear_all(self) -> None:
        """Delete every stored guess. Destructive."""
        pass


class PreferencesStore(ABC):
    """Port for loading and saving user preferences."""

    @abstractmethod
    def load(self) -> Preferences:
        pass

    @abstractmethod
    def save(self, preferences: Preferences) -> None:
        pass
