"""flashdeck: decks of term/definition flashcards with reducer-driven state."""

__version__ = "0.1.0"

from .app import AppController, AppState
from .core import Deck, Word
from .database import DatabaseError, FlashcardDatabase
from .deck_detail import DeckDetailController, DeckDetailState
from .deck_list import DeckListController, DeckListState
from .flash_card import FlashCardState, SwipeDirection
from .identified import IdentifiedArray
from .persistence import (
    DuckDBPersistenceService,
    InMemoryPersistenceService,
    PersistenceError,
    PersistenceService,
)

__all__ = [
    "AppController",
    "AppState",
    "Deck",
    "Word",
    "DatabaseError",
    "FlashcardDatabase",
    "DeckDetailController",
    "DeckDetailState",
    "DeckListController",
    "DeckListState",
    "FlashCardState",
    "SwipeDirection",
    "IdentifiedArray",
    "DuckDBPersistenceService",
    "InMemoryPersistenceService",
    "PersistenceError",
    "PersistenceService",
]
