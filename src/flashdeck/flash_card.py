"""Flashcard study session over a fixed snapshot of words."""

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .actions import (
    Action,
    CompleteCards,
    DismissCompletion,
    NextCard,
    PreviousCard,
    ResetCards,
    ToggleDefinition,
)
from .core import Word
from .effects import Effect


class SwipeDirection(str, Enum):
    """Direction of a card swipe.

    FORWARD: Swipe towards the next card (leftwards on screen).
    BACKWARD: Swipe back to the previous card (rightwards on screen).
    """

    FORWARD = "forward"
    BACKWARD = "backward"


class FlashCardState(BaseModel):
    """Progress through one flashcard session.

    Attributes:
        words: Words under review, copied when the session started.
        current_index: Position of the card on screen.
        is_showing_definition: Whether the back of the card is visible.
        is_completed: Whether the session reached its end.
    """

    words: Tuple[Word, ...] = ()
    current_index: int = 0
    is_showing_definition: bool = False
    is_completed: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def current_word(self) -> Optional[Word]:
        if 0 <= self.current_index < len(self.words):
            return self.words[self.current_index]
        return None

    @property
    def has_next(self) -> bool:
        return self.current_index < len(self.words) - 1

    @property
    def has_previous(self) -> bool:
        return self.current_index > 0

    @property
    def is_last(self) -> bool:
        return bool(self.words) and self.current_index == len(self.words) - 1


def swipe(state: FlashCardState, direction: SwipeDirection) -> Optional[Action]:
    """Maps a swipe gesture to the action it stands for.

    A forward swipe on the last card completes the session; a backward swipe
    on the first card does nothing.
    """
    if direction == SwipeDirection.FORWARD:
        return CompleteCards() if state.is_last else NextCard()
    if state.has_previous:
        return PreviousCard()
    return None


def reduce_flash_card(state: FlashCardState, action: Any) -> Tuple[FlashCardState, List[Effect]]:
    if isinstance(action, NextCard):
        if not state.words:
            return state, []
        if state.is_last:
            return state.model_copy(update={"is_completed": True}), []
        return (
            state.model_copy(
                update={"current_index": state.current_index + 1, "is_showing_definition": False}
            ),
            [],
        )

    if isinstance(action, PreviousCard):
        if not state.has_previous:
            return state, []
        return (
            state.model_copy(
                update={"current_index": state.current_index - 1, "is_showing_definition": False}
            ),
            [],
        )

    if isinstance(action, ToggleDefinition):
        if state.current_word is None:
            return state, []
        return state.model_copy(update={"is_showing_definition": not state.is_showing_definition}), []

    if isinstance(action, ResetCards):
        if not state.words:
            return state, []
        return (
            state.model_copy(
                update={"current_index": 0, "is_showing_definition": False, "is_completed": False}
            ),
            [],
        )

    if isinstance(action, CompleteCards):
        return state.model_copy(update={"is_completed": True}), []

    if isinstance(action, DismissCompletion):
        return state.model_copy(update={"is_completed": False}), []

    # CloseSession is handled by the owning deck detail reducer.
    return state, []
