"""Root state: startup sequence around the deck list."""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .actions import Activate, AppStart, DeckListAction, DidFinishInitialization
from .core import Deck
from .deck_list import DeckListState, reduce_deck_list
from .effects import Effect, SeedDemoData
from .persistence import PersistenceService
from .store import Store


class AppState(BaseModel):
    deck_list: DeckListState = Field(default_factory=DeckListState)
    is_loading: bool = False
    seed_demo_data: bool = True

    model_config = ConfigDict(frozen=True)


def _reduce_deck_list(state: AppState, action: Any) -> Tuple[AppState, List[Effect]]:
    deck_list, effects = reduce_deck_list(state.deck_list, action)
    return state.model_copy(update={"deck_list": deck_list}), [
        effect.map(DeckListAction.wrap) for effect in effects
    ]


def reduce_app(state: AppState, action: Any) -> Tuple[AppState, List[Effect]]:
    if isinstance(action, AppStart):
        if state.is_loading:
            return state, []
        if not state.seed_demo_data:
            return _reduce_deck_list(state, Activate())
        return state.model_copy(update={"is_loading": True}), [SeedDemoData()]

    if isinstance(action, DidFinishInitialization):
        return _reduce_deck_list(state.model_copy(update={"is_loading": False}), Activate())

    if isinstance(action, DeckListAction):
        return _reduce_deck_list(state, action.action)

    return state, []


class AppController(Store[AppState]):
    """Application root: seeds demo data when enabled, then loads the deck list."""

    def __init__(self, service: PersistenceService, seed_demo_data: bool = True):
        super().__init__(AppState(seed_demo_data=seed_demo_data), reduce_app, service)

    def start(self) -> None:
        self.send(AppStart())

    def deck_list(self, action: Any) -> None:
        """Sends an action to the deck list."""
        self.send(DeckListAction(action=action))

    @property
    def deck_list_state(self) -> DeckListState:
        return self.state.deck_list

    def find_deck(self, name: str) -> Optional[Deck]:
        """Finds a deck by exact title, or by its 1-based position in the list."""
        decks = self.state.deck_list.decks
        for deck in decks:
            if deck.title == name:
                return deck
        if name.isdigit() and 1 <= int(name) <= len(decks):
            return decks[int(name) - 1]
        return None
