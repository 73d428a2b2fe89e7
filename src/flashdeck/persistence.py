"""Asynchronous persistence services consumed by the controllers."""

import asyncio
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import duckdb

from .core import Deck, Word
from .database import FlashcardDatabase

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when a single persistence operation fails."""


class PersistenceService(ABC):
    """Abstract base class for deck and word storage.

    Every operation is a coroutine and fails on its own by raising
    ``PersistenceError``. Results are plain value copies.
    """

    @abstractmethod
    async def save_deck(self, deck: Deck) -> None:
        """Inserts the deck or updates the stored one with the same id."""

    @abstractmethod
    async def get_all_decks(self) -> List[Deck]:
        """Returns every stored deck; callers must not rely on the order."""

    @abstractmethod
    async def get_deck(self, deck_id: str) -> Optional[Deck]:
        pass

    async def update_deck(self, deck: Deck) -> None:
        await self.save_deck(deck)

    @abstractmethod
    async def delete_deck(self, deck_id: str) -> None:
        """Deletes a deck, its word associations and the words left without any deck.

        Unknown ids are ignored.
        """

    @abstractmethod
    async def get_words(self, deck_id: str) -> List[Word]:
        """Returns the words of a deck. The list may repeat an id."""

    @abstractmethod
    async def add_word_to_deck(self, deck_id: str, word: Word) -> None:
        """Upserts the word and associates it with the deck.

        An unknown deck is logged and otherwise ignored.
        """

    @abstractmethod
    async def remove_word_from_deck(self, deck_id: str, word_id: str) -> None:
        """Removes every association between the deck and the word. Idempotent."""

    @abstractmethod
    async def save_word(self, word: Word) -> None:
        pass

    @abstractmethod
    async def delete_word(self, word_id: str) -> None:
        """Deletes the word from the store and from every deck. Unknown ids are ignored."""

    @abstractmethod
    async def update_word(self, word: Word) -> None:
        """Updates the word in place, inserting it when its id is unknown."""

    async def close(self) -> None:
        """Releases the resources held by the service."""


class DuckDBPersistenceService(PersistenceService):
    """Persistence backed by a ``FlashcardDatabase``.

    DuckDB calls block, so they run on a single worker thread; that thread is
    the only one touching the connection.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Opens the database.

        Args:
            db_path: Optional path to a DuckDB file. If None, an in-memory database is used.

        Raises:
            DatabaseError: If the database cannot be opened.
        """
        self.database = FlashcardDatabase(db_path)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="flashdeck-db")

    async def _call(self, method: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, method, *args)
        except duckdb.Error as exc:
            raise PersistenceError(f"{method.__name__} failed: {exc}") from exc

    async def save_deck(self, deck: Deck) -> None:
        await self._call(self.database.save_deck, deck)

    async def get_all_decks(self) -> List[Deck]:
        return await self._call(self.database.get_all_decks)

    async def get_deck(self, deck_id: str) -> Optional[Deck]:
        return await self._call(self.database.get_deck, deck_id)

    async def delete_deck(self, deck_id: str) -> None:
        await self._call(self.database.delete_deck, deck_id)

    async def get_words(self, deck_id: str) -> List[Word]:
        return await self._call(self.database.get_words, deck_id)

    async def add_word_to_deck(self, deck_id: str, word: Word) -> None:
        await self._call(self.database.add_word_to_deck, deck_id, word)

    async def remove_word_from_deck(self, deck_id: str, word_id: str) -> None:
        await self._call(self.database.remove_word_from_deck, deck_id, word_id)

    async def save_word(self, word: Word) -> None:
        await self._call(self.database.save_word, word)

    async def delete_word(self, word_id: str) -> None:
        await self._call(self.database.delete_word, word_id)

    async def update_word(self, word: Word) -> None:
        await self._call(self.database.update_word, word)

    async def get_stats(self) -> Dict[str, Any]:
        return await self._call(self.database.get_stats)

    async def close(self) -> None:
        await self._call(self.database.close)
        self._executor.shutdown(wait=True)


class InMemoryPersistenceService(PersistenceService):
    """Dictionary-backed persistence for tests and previews.

    Deck associations are plain lists, so adding the same word twice links it
    twice, and ``get_words`` then returns the duplicate. Every call is recorded
    in ``calls`` as ``(operation, args)``; operations named in ``failing``
    raise ``PersistenceError``.
    """

    def __init__(
        self,
        decks: Iterable[Deck] = (),
        words: Optional[Dict[str, List[Word]]] = None,
        failing: Iterable[str] = (),
    ):
        self.decks: Dict[str, Deck] = {deck.id: deck for deck in decks}
        self.words: Dict[str, Word] = {}
        self.links: Dict[str, List[str]] = {deck_id: [] for deck_id in self.decks}
        self.failing = set(failing)
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        for deck_id, deck_words in (words or {}).items():
            for word in deck_words:
                self.words[word.id] = word
                self.links.setdefault(deck_id, []).append(word.id)

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if operation in self.failing:
            raise PersistenceError(f"{operation} failed")

    def calls_to(self, operation: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.calls if name == operation]

    async def save_deck(self, deck: Deck) -> None:
        self._record("save_deck", deck)
        self.decks[deck.id] = deck
        self.links.setdefault(deck.id, [])

    async def get_all_decks(self) -> List[Deck]:
        self._record("get_all_decks")
        return list(self.decks.values())

    async def get_deck(self, deck_id: str) -> Optional[Deck]:
        self._record("get_deck", deck_id)
        return self.decks.get(deck_id)

    async def delete_deck(self, deck_id: str) -> None:
        self._record("delete_deck", deck_id)
        self.decks.pop(deck_id, None)
        removed = set(self.links.pop(deck_id, []))
        still_linked = {word_id for linked in self.links.values() for word_id in linked}
        for word_id in removed - still_linked:
            self.words.pop(word_id, None)

    async def get_words(self, deck_id: str) -> List[Word]:
        self._record("get_words", deck_id)
        if deck_id not in self.decks:
            logger.warning("Deck not found: %s", deck_id)
            return []
        return [self.words[word_id] for word_id in self.links.get(deck_id, []) if word_id in self.words]

    async def add_word_to_deck(self, deck_id: str, word: Word) -> None:
        self._record("add_word_to_deck", deck_id, word)
        if deck_id not in self.decks:
            logger.warning("Deck not found, word %s not added: %s", word.id, deck_id)
            return
        self.words[word.id] = word
        self.links[deck_id].append(word.id)

    async def remove_word_from_deck(self, deck_id: str, word_id: str) -> None:
        self._record("remove_word_from_deck", deck_id, word_id)
        if deck_id in self.links:
            self.links[deck_id] = [linked_id for linked_id in self.links[deck_id] if linked_id != word_id]

    async def save_word(self, word: Word) -> None:
        self._record("save_word", word)
        self.words[word.id] = word

    async def delete_word(self, word_id: str) -> None:
        self._record("delete_word", word_id)
        self.words.pop(word_id, None)
        for deck_id, linked in self.links.items():
            self.links[deck_id] = [linked_id for linked_id in linked if linked_id != word_id]

    async def update_word(self, word: Word) -> None:
        self._record("update_word", word)
        if word.id not in self.words:
            logger.warning("Word not found for update, inserting instead: %s", word.id)
        self.words[word.id] = word
