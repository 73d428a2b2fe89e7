"""Database module for storing decks and words."""

import logging
from typing import Any, Dict, List, Optional

import duckdb

from .core import Deck, Word

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_TABLES = ("deck_words", "words", "decks", "schema_info")


class DatabaseError(Exception):
    """Raised when the database cannot be opened or prepared."""


class FlashcardDatabase:
    """Manages the DuckDB database holding decks, words and their associations.

    Words are stored once in the ``words`` table and linked to decks through
    ``deck_words``. All reads return plain ``Deck``/``Word`` values; no live
    handles leave this class.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Opens the database and prepares its schema.

        Args:
            db_path: Optional path to a DuckDB file. If None, an in-memory database is used.

        Raises:
            DatabaseError: If the database cannot be opened or its schema created.
        """
        self.db_path = db_path or ":memory:"
        try:
            self.connection = duckdb.connect(self.db_path)
            self._prepare_schema()
        except duckdb.Error as exc:
            raise DatabaseError(f"Failed to open database at {self.db_path}: {exc}") from exc
        logger.info("Database ready at %s", self.db_path)

    def _prepare_schema(self) -> None:
        """Creates the tables, wiping them first if the stored schema version differs."""
        self.connection.execute(
            "CREATE TABLE IF NOT EXISTS schema_info (version INTEGER NOT NULL)"
        )
        row = self.connection.execute("SELECT version FROM schema_info").fetchone()
        stored_version = row[0] if row else None

        if stored_version is not None and stored_version != SCHEMA_VERSION:
            logger.warning(
                "Schema version %s does not match %s, recreating database",
                stored_version,
                SCHEMA_VERSION,
            )
            self._drop_tables()

        self._create_tables()

        if stored_version != SCHEMA_VERSION:
            self.connection.execute("DELETE FROM schema_info")
            self.connection.execute(
                "INSERT INTO schema_info (version) VALUES (?)", (SCHEMA_VERSION,)
            )

    def _drop_tables(self) -> None:
        for table in _TABLES:
            self.connection.execute(f"DROP TABLE IF EXISTS {table}")
        self.connection.execute("DROP SEQUENCE IF EXISTS deck_order_seq")

    def _create_tables(self) -> None:
        self.connection.execute(
            "CREATE TABLE IF NOT EXISTS schema_info (version INTEGER NOT NULL)"
        )
        self.connection.execute("CREATE SEQUENCE IF NOT EXISTS deck_order_seq")

        # Decks table
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS decks (
                id VARCHAR PRIMARY KEY,
                title VARCHAR NOT NULL,
                description VARCHAR NOT NULL DEFAULT '',
                sort_order BIGINT NOT NULL DEFAULT nextval('deck_order_seq')
            )
        """
        )

        # Words table
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS words (
                id VARCHAR PRIMARY KEY,
                term VARCHAR NOT NULL,
                definition VARCHAR NOT NULL
            )
        """
        )

        # Deck to word associations, ordered by position
        self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS deck_words (
                deck_id VARCHAR NOT NULL,
                word_id VARCHAR NOT NULL,
                position INTEGER NOT NULL
            )
        """
        )

    # Decks

    def save_deck(self, deck: Deck) -> None:
        """Inserts a deck or updates the title and description of an existing one.

        Args:
            deck: The Deck to upsert.
        """
        self.connection.execute(
            """
            INSERT INTO decks (id, title, description)
            VALUES (?, ?, ?)
            ON CONFLICT (id) DO UPDATE
            SET title = excluded.title, description = excluded.description
        """,
            (deck.id, deck.title, deck.description),
        )

    def get_all_decks(self) -> List[Deck]:
        """Retrieves every deck in creation order."""
        results = self.connection.execute(
            "SELECT id, title, description FROM decks ORDER BY sort_order"
        ).fetchall()
        return [Deck(id=row[0], title=row[1], description=row[2]) for row in results]

    def get_deck(self, deck_id: str) -> Optional[Deck]:
        result = self.connection.execute(
            "SELECT id, title, description FROM decks WHERE id = ?", (deck_id,)
        ).fetchone()
        if result:
            return Deck(id=result[0], title=result[1], description=result[2])
        return None

    def delete_deck(self, deck_id: str) -> None:
        """Deletes a deck, its associations and the words left without any deck.

        Deleting an unknown id does nothing.
        """
        self.connection.begin()
        try:
            word_ids = [
                row[0]
                for row in self.connection.execute(
                    "SELECT word_id FROM deck_words WHERE deck_id = ?", (deck_id,)
                ).fetchall()
            ]
            self.connection.execute("DELETE FROM deck_words WHERE deck_id = ?", (deck_id,))
            self.connection.execute("DELETE FROM decks WHERE id = ?", (deck_id,))
            for word_id in set(word_ids):
                self.connection.execute(
                    """
                    DELETE FROM words
                    WHERE id = ?
                      AND NOT EXISTS (SELECT 1 FROM deck_words WHERE word_id = ?)
                """,
                    (word_id, word_id),
                )
            self.connection.commit()
        except duckdb.Error:
            self.connection.rollback()
            raise

    # Words

    def save_word(self, word: Word) -> None:
        """Inserts a word or updates an existing one in place, without touching associations."""
        self.connection.execute(
            """
            INSERT INTO words (id, term, definition)
            VALUES (?, ?, ?)
            ON CONFLICT (id) DO UPDATE
            SET term = excluded.term, definition = excluded.definition
        """,
            (word.id, word.term, word.definition),
        )

    def word_exists(self, word_id: str) -> bool:
        result = self.connection.execute(
            "SELECT COUNT(*) FROM words WHERE id = ?", (word_id,)
        ).fetchone()
        return bool(result and result[0])

    def update_word(self, word: Word) -> None:
        """Updates a word in place, inserting it if the id is unknown."""
        if not self.word_exists(word.id):
            logger.warning("Word not found for update, inserting instead: %s", word.id)
            self.save_word(word)
            return
        self.connection.execute(
            "UPDATE words SET term = ?, definition = ? WHERE id = ?",
            (word.term, word.definition, word.id),
        )

    def delete_word(self, word_id: str) -> None:
        """Deletes a word and every association to it. Unknown ids are ignored."""
        self.connection.execute("DELETE FROM deck_words WHERE word_id = ?", (word_id,))
        self.connection.execute("DELETE FROM words WHERE id = ?", (word_id,))

    def get_words(self, deck_id: str) -> List[Word]:
        """Retrieves the words associated with a deck, in association order.

        Args:
            deck_id: The deck whose words are returned.

        Returns:
            A list of Word objects; empty if the deck does not exist.
        """
        if self.get_deck(deck_id) is None:
            logger.warning("Deck not found: %s", deck_id)
            return []

        results = self.connection.execute(
            """
            SELECT w.id, w.term, w.definition
            FROM deck_words dw JOIN words w ON w.id = dw.word_id
            WHERE dw.deck_id = ?
            ORDER BY dw.position
        """,
            (deck_id,),
        ).fetchall()

        words = [Word(id=row[0], term=row[1], definition=row[2]) for row in results]
        logger.debug("Found %d words for deck %s", len(words), deck_id)
        return words

    def add_word_to_deck(self, deck_id: str, word: Word) -> bool:
        """Upserts a word and associates it with a deck.

        A word that is already associated keeps its position.

        Returns:
            False if the deck does not exist (nothing is written), True otherwise.
        """
        if self.get_deck(deck_id) is None:
            logger.warning("Deck not found, word %s not added: %s", word.id, deck_id)
            return False

        self.save_word(word)
        linked = self.connection.execute(
            "SELECT COUNT(*) FROM deck_words WHERE deck_id = ? AND word_id = ?",
            (deck_id, word.id),
        ).fetchone()[0]
        if not linked:
            next_position = self.connection.execute(
                "SELECT COALESCE(MAX(position) + 1, 0) FROM deck_words WHERE deck_id = ?",
                (deck_id,),
            ).fetchone()[0]
            self.connection.execute(
                "INSERT INTO deck_words (deck_id, word_id, position) VALUES (?, ?, ?)",
                (deck_id, word.id, next_position),
            )
        return True

    def remove_word_from_deck(self, deck_id: str, word_id: str) -> None:
        """Removes the association between a deck and a word, if any."""
        self.connection.execute(
            "DELETE FROM deck_words WHERE deck_id = ? AND word_id = ?",
            (deck_id, word_id),
        )

    def get_stats(self) -> Dict[str, Any]:
        """Retrieves counts of the stored data.

        Returns:
            A dictionary containing:
            - "total_decks": Number of decks.
            - "total_words": Number of words in the word store.
            - "total_links": Number of deck/word associations.
        """
        total_decks = self.connection.execute("SELECT COUNT(*) FROM decks").fetchone()[0]
        total_words = self.connection.execute("SELECT COUNT(*) FROM words").fetchone()[0]
        total_links = self.connection.execute(
            "SELECT COUNT(*) FROM deck_words"
        ).fetchone()[0]

        return {
            "total_decks": total_decks,
            "total_words": total_words,
            "total_links": total_links,
        }

    def close(self) -> None:
        """Closes the database connection."""
        self.connection.close()

    def __enter__(self) -> "FlashcardDatabase":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
