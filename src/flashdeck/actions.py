"""Actions accepted by the flashdeck reducers.

Actions are frozen pydantic models. Actions addressed to a nested child
state travel wrapped in the parent's ``...Action`` envelope, for example
``SelectedDeckAction(action=EditWordAction(action=SetTerm(text="Cat")))``.
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .core import Deck, Word


class Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class Envelope(Action):
    """Carries an action for a nested child state."""

    action: Any

    @classmethod
    def wrap(cls, action: Any) -> "Envelope":
        return cls(action=action)


# Shared by the deck list and deck detail reducers


class Activate(Action):
    """The owning screen appeared; loads data the first time only."""


# Word editor


class SetTerm(Action):
    text: str


class SetDefinition(Action):
    text: str


class SaveWord(Action):
    pass


class CancelEdit(Action):
    pass


# Flashcard session


class NextCard(Action):
    pass


class PreviousCard(Action):
    pass


class ToggleDefinition(Action):
    pass


class ResetCards(Action):
    pass


class CompleteCards(Action):
    pass


class DismissCompletion(Action):
    pass


class CloseSession(Action):
    pass


# Create deck form


class TitleChanged(Action):
    text: str


class DescriptionChanged(Action):
    text: str


class SaveDeckTapped(Action):
    pass


class CancelCreate(Action):
    pass


# Deck detail


class WordsLoaded(Action):
    deck_id: str
    words: List[Word]


class AddWordTapped(Action):
    pass


class EditWordTapped(Action):
    word: Word


class EditWordAction(Envelope):
    pass


class WordEditSaved(Action):
    word: Word


class WordEditCancelled(Action):
    pass


class DeleteWords(Action):
    indices: Tuple[int, ...]


class StartFlashcards(Action):
    pass


class EndFlashcards(Action):
    pass


class FlashCardAction(Envelope):
    pass


# Deck list


class DecksLoaded(Action):
    decks: List[Deck]


class OpenCreateForm(Action):
    pass


class CreateDeckAction(Envelope):
    pass


class CreateFormDismissed(Action):
    """Closes the create form. ``title`` defaults to the form's current title."""

    title: Optional[str] = None


class SaveDeck(Action):
    deck: Deck


class SelectDeck(Action):
    deck: Deck


class SelectedDeckAction(Envelope):
    pass


class DeckDetailDismissed(Action):
    pass


class DeleteDecks(Action):
    indices: Tuple[int, ...]


# App root


class AppStart(Action):
    pass


class DidFinishInitialization(Action):
    pass


class DeckListAction(Envelope):
    pass
