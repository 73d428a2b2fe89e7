"""State, reducer and controller for the list of decks."""

import logging
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .actions import (
    Activate,
    CancelCreate,
    CreateDeckAction,
    CreateFormDismissed,
    DeckDetailDismissed,
    DecksLoaded,
    DeleteDecks,
    OpenCreateForm,
    SaveDeck,
    SaveDeckTapped,
    SelectDeck,
    SelectedDeckAction,
)
from .core import Deck
from .create_deck import CreateDeckState, reduce_create_deck
from .deck_detail import DeckDetailState, reduce_deck_detail
from .effects import Effect, LoadDecks, PersistDeck, RemoveDeck
from .identified import IdentifiedArray
from .persistence import PersistenceService
from .store import Store

logger = logging.getLogger(__name__)


class DeckListState(BaseModel):
    """All decks, plus the deck detail or create form opened on top of them.

    Attributes:
        decks: Decks keyed by id, in load/creation order.
        selected_deck: Detail state of the open deck, if any.
        create_deck: The open create form, if any.
        has_initial_load: Whether decks were requested already.
        is_loading: Whether the deck request is in flight.
    """

    decks: IdentifiedArray = Field(default_factory=IdentifiedArray)
    selected_deck: Optional[DeckDetailState] = None
    create_deck: Optional[CreateDeckState] = None
    has_initial_load: bool = False
    is_loading: bool = False

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("decks", mode="before")
    @classmethod
    def _identify_decks(cls, value: Any) -> Any:
        if isinstance(value, IdentifiedArray):
            return value
        return IdentifiedArray(value)


def _save_deck(state: DeckListState, deck: Deck) -> Tuple[DeckListState, List[Effect]]:
    decks = state.decks.copy()
    decks.upsert(deck)
    return state.model_copy(update={"decks": decks}), [PersistDeck(deck=deck)]


def _create_deck(
    state: DeckListState, title: str, description: str = ""
) -> Tuple[DeckListState, List[Effect]]:
    state = state.model_copy(update={"create_deck": None})
    if not title:
        return state, []
    return _save_deck(state, Deck(title=title, description=description))


def _reduce_create_deck(state: DeckListState, action: Any) -> Tuple[DeckListState, List[Effect]]:
    form = state.create_deck
    if form is None:
        logger.debug("Ignoring %r, no create form is open", action)
        return state, []

    if isinstance(action, SaveDeckTapped):
        if form.is_save_disabled:
            return state, []
        return _create_deck(state, form.title, form.description)

    if isinstance(action, CancelCreate):
        return state.model_copy(update={"create_deck": None}), []

    form, effects = reduce_create_deck(form, action)
    return state.model_copy(update={"create_deck": form}), [
        effect.map(CreateDeckAction.wrap) for effect in effects
    ]


def _reduce_selected_deck(state: DeckListState, action: Any) -> Tuple[DeckListState, List[Effect]]:
    if state.selected_deck is None:
        logger.debug("Ignoring %r, no deck is open", action)
        return state, []

    detail, effects = reduce_deck_detail(state.selected_deck, action)
    return state.model_copy(update={"selected_deck": detail}), [
        effect.map(SelectedDeckAction.wrap) for effect in effects
    ]


def reduce_deck_list(state: DeckListState, action: Any) -> Tuple[DeckListState, List[Effect]]:
    if isinstance(action, Activate):
        if state.has_initial_load:
            return state, []
        return (
            state.model_copy(update={"has_initial_load": True, "is_loading": True}),
            [LoadDecks()],
        )

    if isinstance(action, DecksLoaded):
        decks = IdentifiedArray.deduplicated(action.decks)
        if len(decks) != len(action.decks):
            logger.warning("Removed %d duplicate decks", len(action.decks) - len(decks))
        return state.model_copy(update={"decks": decks, "is_loading": False}), []

    if isinstance(action, OpenCreateForm):
        return state.model_copy(update={"create_deck": CreateDeckState()}), []

    if isinstance(action, CreateDeckAction):
        return _reduce_create_deck(state, action.action)

    if isinstance(action, CreateFormDismissed):
        form = state.create_deck or CreateDeckState()
        title = action.title if action.title is not None else form.title
        return _create_deck(state, title, form.description)

    if isinstance(action, SaveDeck):
        return _save_deck(state, action.deck)

    if isinstance(action, SelectDeck):
        detail = DeckDetailState(deck_id=action.deck.id, deck_title=action.deck.title)
        return state.model_copy(update={"selected_deck": detail}), []

    if isinstance(action, SelectedDeckAction):
        return _reduce_selected_deck(state, action.action)

    if isinstance(action, DeckDetailDismissed):
        return state.model_copy(update={"selected_deck": None}), []

    if isinstance(action, DeleteDecks):
        deck_ids = state.decks.ids_at(action.indices)
        decks = state.decks.copy()
        for deck_id in deck_ids:
            decks.remove(deck_id)
        update: dict = {"decks": decks}
        if state.selected_deck is not None and state.selected_deck.deck_id in deck_ids:
            update["selected_deck"] = None
        return state.model_copy(update=update), [RemoveDeck(deck_id=deck_id) for deck_id in deck_ids]

    return state, []


class DeckListController(Store[DeckListState]):
    """Owns the list of decks and the deck opened from it."""

    def __init__(self, service: PersistenceService, state: Optional[DeckListState] = None):
        super().__init__(
            state if state is not None else DeckListState(), reduce_deck_list, service
        )

    def activate(self) -> None:
        self.send(Activate())

    def open_create_form(self) -> None:
        self.send(OpenCreateForm())

    def create_form_dismissed(self, title: Optional[str] = None) -> None:
        self.send(CreateFormDismissed(title=title))

    def save_deck(self, deck: Deck) -> None:
        self.send(SaveDeck(deck=deck))

    def select_deck(self, deck: Deck) -> None:
        self.send(SelectDeck(deck=deck))

    def selected_deck(self, action: Any) -> None:
        """Sends an action to the open deck detail."""
        self.send(SelectedDeckAction(action=action))

    def deck_detail_dismissed(self) -> None:
        self.send(DeckDetailDismissed())

    def delete_decks(self, indices: Iterable[int]) -> None:
        self.send(DeleteDecks(indices=tuple(indices)))
