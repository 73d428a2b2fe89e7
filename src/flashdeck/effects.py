"""Descriptions of persistence work returned by the reducers, and their executor."""

import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict

from .actions import Action, DecksLoaded, DidFinishInitialization, WordsLoaded
from .core import Deck, Word
from .demo import insert_demo_data_if_needed
from .persistence import PersistenceError, PersistenceService

logger = logging.getLogger(__name__)


class Effect(BaseModel):
    """A unit of asynchronous work to run after a state transition commits.

    ``perform`` talks to the persistence service; ``complete`` turns its
    result into the follow-up action fed back to the reducer, if any.
    """

    model_config = ConfigDict(frozen=True)

    async def perform(self, service: PersistenceService) -> Any:
        raise NotImplementedError

    def complete(self, result: Any) -> Optional[Action]:
        return None

    def map(self, wrap: Callable[[Any], Any]) -> "Effect":
        """Routes the follow-up action through ``wrap`` (used for nested state)."""
        return Mapped(effect=self, wrap=wrap)


class Mapped(Effect):
    effect: Effect
    wrap: Callable[[Any], Any]

    async def perform(self, service: PersistenceService) -> Any:
        return await self.effect.perform(service)

    def complete(self, result: Any) -> Optional[Action]:
        action = self.effect.complete(result)
        if action is None:
            return None
        return self.wrap(action)


class LoadDecks(Effect):
    async def perform(self, service: PersistenceService) -> Any:
        try:
            return await service.get_all_decks()
        except PersistenceError as exc:
            logger.error("Error loading decks: %s", exc)
            return []

    def complete(self, result: Any) -> Optional[Action]:
        return DecksLoaded(decks=result)


class LoadWords(Effect):
    deck_id: str

    async def perform(self, service: PersistenceService) -> Any:
        try:
            words = await service.get_words(self.deck_id)
        except PersistenceError as exc:
            logger.error("Error loading words for deck %s: %s", self.deck_id, exc)
            return []
        logger.debug("Loaded %d words for deck %s", len(words), self.deck_id)
        return words

    def complete(self, result: Any) -> Optional[Action]:
        return WordsLoaded(deck_id=self.deck_id, words=result)


class PersistDeck(Effect):
    deck: Deck

    async def perform(self, service: PersistenceService) -> Any:
        await service.save_deck(self.deck)


class RemoveDeck(Effect):
    deck_id: str

    async def perform(self, service: PersistenceService) -> Any:
        await service.delete_deck(self.deck_id)


class PersistWord(Effect):
    """Upserts a word into a deck; used for new and edited words alike."""

    deck_id: str
    word: Word

    async def perform(self, service: PersistenceService) -> Any:
        await service.add_word_to_deck(self.deck_id, self.word)


class RemoveWord(Effect):
    """Unlinks a word from its deck, then deletes it from the word store."""

    deck_id: str
    word_id: str

    async def perform(self, service: PersistenceService) -> Any:
        await service.remove_word_from_deck(self.deck_id, self.word_id)
        await service.delete_word(self.word_id)


class SeedDemoData(Effect):
    async def perform(self, service: PersistenceService) -> Any:
        try:
            await insert_demo_data_if_needed(service)
        except PersistenceError as exc:
            logger.error("Failed to insert demo data: %s", exc)

    def complete(self, result: Any) -> Optional[Action]:
        return DidFinishInitialization()


class EffectExecutor:
    """Runs effects against a persistence service.

    Persistence failures are logged and swallowed: the optimistic local state
    stays as it is and no follow-up action is produced.
    """

    def __init__(self, service: PersistenceService):
        self.service = service

    async def execute(self, effect: Effect) -> Optional[Action]:
        try:
            result = await effect.perform(self.service)
        except PersistenceError as exc:
            logger.error("Error running %r: %s", effect, exc)
            return None
        return effect.complete(result)
