"""State, reducer and controller for one deck and its words."""

import logging
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .actions import (
    Activate,
    AddWordTapped,
    CancelEdit,
    CloseSession,
    DeleteWords,
    EditWordAction,
    EditWordTapped,
    EndFlashcards,
    FlashCardAction,
    SaveWord,
    SetDefinition,
    SetTerm,
    StartFlashcards,
    WordEditCancelled,
    WordEditSaved,
    WordsLoaded,
)
from .core import Word
from .edit_word import EditWordState, reduce_edit_word
from .effects import Effect, LoadWords, PersistWord, RemoveWord
from .flash_card import FlashCardState, reduce_flash_card
from .identified import IdentifiedArray
from .persistence import PersistenceService
from .store import Store

logger = logging.getLogger(__name__)


class DeckDetailState(BaseModel):
    """Words of one deck plus the editor and flashcard session opened on top of it.

    Attributes:
        deck_id: Id of the deck shown.
        deck_title: Title of the deck shown.
        words: The deck's words keyed by id, sorted by term once loaded.
        edit_word: The open word editor, if any.
        flash_card: The running flashcard session, if any.
        has_initial_load: Whether the words were requested already.
        is_loading: Whether the word request is in flight.
    """

    deck_id: str
    deck_title: str
    words: IdentifiedArray = Field(default_factory=IdentifiedArray)
    edit_word: Optional[EditWordState] = None
    flash_card: Optional[FlashCardState] = None
    has_initial_load: bool = False
    is_loading: bool = False

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("words", mode="before")
    @classmethod
    def _identify_words(cls, value: Any) -> Any:
        if isinstance(value, IdentifiedArray):
            return value
        return IdentifiedArray(value)


def unique_sorted_words(words: Iterable[Word]) -> IdentifiedArray:
    """Drops repeated ids, keeping the first occurrence, and sorts by term.

    Terms compare by code point, so the order is case-sensitive; words with
    equal terms keep their relative order.
    """
    words = list(words)
    unique = IdentifiedArray.deduplicated(words)
    if len(unique) != len(words):
        logger.warning("Removed %d duplicate words", len(words) - len(unique))
    return unique.sorted(key=lambda word: word.term)


def _save_word(state: DeckDetailState, word: Word) -> Tuple[DeckDetailState, List[Effect]]:
    words = state.words.copy()
    words.upsert(word)
    return (
        state.model_copy(update={"words": words, "edit_word": None}),
        [PersistWord(deck_id=state.deck_id, word=word)],
    )


def _reduce_edit_word(state: DeckDetailState, action: Any) -> Tuple[DeckDetailState, List[Effect]]:
    if state.edit_word is None:
        logger.debug("Ignoring %r, no word editor is open", action)
        return state, []

    if isinstance(action, SaveWord):
        word = state.edit_word.saved_word()
        if word is None:
            return state, []
        return _save_word(state, word)

    if isinstance(action, CancelEdit):
        return state.model_copy(update={"edit_word": None}), []

    edit_word, effects = reduce_edit_word(state.edit_word, action)
    return state.model_copy(update={"edit_word": edit_word}), [
        effect.map(EditWordAction.wrap) for effect in effects
    ]


def _reduce_flash_card(state: DeckDetailState, action: Any) -> Tuple[DeckDetailState, List[Effect]]:
    if state.flash_card is None:
        logger.debug("Ignoring %r, no flashcard session is running", action)
        return state, []

    if isinstance(action, CloseSession):
        return state.model_copy(update={"flash_card": None}), []

    flash_card, effects = reduce_flash_card(state.flash_card, action)
    return state.model_copy(update={"flash_card": flash_card}), [
        effect.map(FlashCardAction.wrap) for effect in effects
    ]


def reduce_deck_detail(state: DeckDetailState, action: Any) -> Tuple[DeckDetailState, List[Effect]]:
    if isinstance(action, Activate):
        if state.has_initial_load:
            return state, []
        return (
            state.model_copy(update={"has_initial_load": True, "is_loading": True}),
            [LoadWords(deck_id=state.deck_id)],
        )

    if isinstance(action, WordsLoaded):
        if action.deck_id != state.deck_id:
            logger.debug("Ignoring words loaded for deck %s", action.deck_id)
            return state, []
        return (
            state.model_copy(update={"words": unique_sorted_words(action.words), "is_loading": False}),
            [],
        )

    if isinstance(action, AddWordTapped):
        return state.model_copy(update={"edit_word": EditWordState.new()}), []

    if isinstance(action, EditWordTapped):
        return state.model_copy(update={"edit_word": EditWordState.editing(action.word)}), []

    if isinstance(action, EditWordAction):
        return _reduce_edit_word(state, action.action)

    if isinstance(action, WordEditSaved):
        return _save_word(state, action.word)

    if isinstance(action, WordEditCancelled):
        return state.model_copy(update={"edit_word": None}), []

    if isinstance(action, DeleteWords):
        word_ids = state.words.ids_at(action.indices)
        words = state.words.copy()
        for word_id in word_ids:
            words.remove(word_id)
        return (
            state.model_copy(update={"words": words}),
            [RemoveWord(deck_id=state.deck_id, word_id=word_id) for word_id in word_ids],
        )

    if isinstance(action, StartFlashcards):
        snapshot = tuple(word.model_copy() for word in state.words)
        return state.model_copy(update={"flash_card": FlashCardState(words=snapshot)}), []

    if isinstance(action, EndFlashcards):
        return state.model_copy(update={"flash_card": None}), []

    if isinstance(action, FlashCardAction):
        return _reduce_flash_card(state, action.action)

    return state, []


class DeckDetailController(Store[DeckDetailState]):
    """Owns the words of one deck.

    Created per selected deck; loads its words on the first ``activate`` and
    saves every change through the persistence service.
    """

    def __init__(
        self,
        service: PersistenceService,
        deck_id: str,
        deck_title: str,
        state: Optional[DeckDetailState] = None,
    ):
        super().__init__(
            state if state is not None else DeckDetailState(deck_id=deck_id, deck_title=deck_title),
            reduce_deck_detail,
            service,
        )

    def activate(self) -> None:
        self.send(Activate())

    def add_word(self) -> None:
        self.send(AddWordTapped())

    def edit_word(self, word: Word) -> None:
        self.send(EditWordTapped(word=word))

    def set_term(self, text: str) -> None:
        self.send(EditWordAction(action=SetTerm(text=text)))

    def set_definition(self, text: str) -> None:
        self.send(EditWordAction(action=SetDefinition(text=text)))

    def save_word(self) -> None:
        self.send(EditWordAction(action=SaveWord()))

    def cancel_edit(self) -> None:
        self.send(EditWordAction(action=CancelEdit()))

    def word_edit_dismissed_with_save(self, word: Word) -> None:
        self.send(WordEditSaved(word=word))

    def word_edit_dismissed_without_save(self) -> None:
        self.send(WordEditCancelled())

    def delete_words(self, indices: Iterable[int]) -> None:
        self.send(DeleteWords(indices=tuple(indices)))

    def start_flashcards(self) -> None:
        self.send(StartFlashcards())

    def flash_card(self, action: Any) -> None:
        """Sends an action to the running flashcard session."""
        self.send(FlashCardAction(action=action))

    def end_flashcards(self) -> None:
        self.send(EndFlashcards())
