"""
SQLite Guess Repository: Infrastructure adapter for local guess storage.

Implements GuessRepository on a single SQLite file. Each call opens its own
connection, so the repository can be shared freely.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from esp_trainer.domain.guesses.models import DeckType, SuitAndNumberGuess, make_guess_record
from esp_trainer.domain.guesses.ports import GuessRepository, StoredGuess

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS guesses (
    id TEXT PRIMARY KEY,
    timestamp INTEGER NOT NULL,
    deck_type TEXT NOT NULL,
    guessed_suit TEXT NOT NULL,
    guessed_number TEXT,
    actual_suit TEXT NOT NULL,
    actual_number TEXT,
    suit_match INTEGER NOT NULL,
    number_match INTEGER NOT NULL,
    exact_match INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_timestamp ON guesses(timestamp);
CREATE INDEX IF NOT EXISTS idx_deck_type ON guesses(deck_type);
CREATE INDEX IF NOT EXISTS idx_exact_match ON guesses(exact_match);
CREATE INDEX IF NOT EXISTS idx_deck_timestamp ON guesses(deck_type, timestamp);
"""


def _row_to_guess(row: sqlite3.Row) -> StoredGuess:
    return make_guess_record(
        id=row["id"],
        timestamp=row["timestamp"],
        deck_type=row["deck_type"],
        guessed_suit=row["guessed_suit"],
        guessed_number=row["guessed_number"],
        actual_suit=row["actual_suit"],
        actual_number=row["actual_number"],
        suit_match=bool(row["suit_match"]),
        number_match=bool(row["number_match"]),
        exact_match=bool(row["exact_match"]),
    )


def _where(clauses: list[str]) -> str:
    return f" WHERE {' AND '.join(clauses)}" if clauses else ""


class SqliteGuessRepository(GuessRepository):
    """
    Stores guesses in the `guesses` table of a SQLite database.

    Booleans are stored as 0/1; missing numbers as NULL.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._initialized = False

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if not self._initialized:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            if not self._initialized:
                conn.executescript(SCHEMA)
                self._initialized = True
                logger.debug(f"Guess database ready at {self.db_path}")
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _fetch(self, query: str, params: list[Any]) -> list[StoredGuess]:
        guesses: list[StoredGuess] = []
        with self._connect() as conn:
            for row in conn.execute(query, params):
                try:
                    guesses.append(_row_to_guess(row))
                except ValueError as e:
                    logger.warning(f"Skipping malformed guess row: {e}")
        return guesses

    def _count(self, clauses: list[str], params: list[Any]) -> int:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT COUNT(*) AS count FROM guesses{_where(clauses)}", params
            ).fetchone()
        return row["count"] if row else 0

    async def save_guess(self, guess: StoredGuess) -> None:
        number_match = (
            guess.number_match if isinstance(guess, SuitAndNumberGuess) else True
        )
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO guesses (
                    id, timestamp, deck_type, guessed_suit, guessed_number,
                    actual_suit, actual_number, suit_match, number_match, exact_match
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    guess.id,
                    guess.timestamp,
                    guess.deck_type,
                    guess.guessed_suit,
                    guess.guessed_number,
                    guess.actual_suit,
                    guess.actual_number,
                    int(guess.suit_match),
                    int(number_match),
                    int(guess.exact_match),
                ),
            )

    async def get_all_guesses(self, deck_type: DeckType | None = None) -> list[StoredGuess]:
        clauses, params = ([], []) if deck_type is None else (["deck_type = ?"], [deck_type])
        return self._fetch(
            f"SELECT * FROM guesses{_where(clauses)} ORDER BY timestamp DESC", params
        )

    async def get_guesses_by_date_range(
        self,
        start_timestamp: int,
        end_timestamp: int,
        deck_type: DeckType | None = None,
    ) -> list[StoredGuess]:
        clauses = ["timestamp >= ?", "timestamp <= ?"]
        params: list[Any] = [start_timestamp, end_timestamp]
        if deck_type is not None:
            clauses.append("deck_type = ?")
            params.append(deck_type)
        return self._fetch(
            f"SELECT * FROM guesses{_where(clauses)} ORDER BY timestamp DESC", params
        )

    async def get_recent_guesses(
        self, limit: int, deck_type: DeckType | None = None
    ) -> list[StoredGuess]:
        clauses, params = ([], []) if deck_type is None else (["deck_type = ?"], [deck_type])
        return self._fetch(
            f"SELECT * FROM guesses{_where(clauses)} ORDER BY timestamp DESC LIMIT ?",
            [*params, limit],
        )

    async def get_total_guess_count(self, deck_type: DeckType | None = None) -> int:
        if deck_type is None:
            return self._count([], [])
        return self._count(["deck_type = ?"], [deck_type])

    async def get_exact_match_count(self, deck_type: DeckType | None = None) -> int:
        if deck_type is None:
            return self._count(["exact_match = 1"], [])
        return self._count(["exact_match = 1", "deck_type = ?"], [deck_type])

    async def delete_old_guesses(self, before_timestamp: int) -> int:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM guesses WHERE timestamp < ?", (before_timestamp,))
            deleted = cursor.rowcount
        logger.info(f"Deleted {deleted} guesses older than {before_timestamp}")
        return deleted

    async def clear_all(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM guesses")
        logger.warning("Cleared all stored guesses")
