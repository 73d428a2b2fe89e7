"""Editor state for a single word, new or existing."""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .actions import SetDefinition, SetTerm
from .core import Word
from .effects import Effect


class EditWordState(BaseModel):
    """In-progress edit of one word.

    Attributes:
        word: The draft being edited.
        original_word: The word being edited, or None when authoring a new one.
            When set, the draft's id is pinned to ``original_word.id``.
    """

    word: Word = Field(default_factory=Word)
    original_word: Optional[Word] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def new(cls) -> "EditWordState":
        return cls(word=Word(term="", definition=""))

    @classmethod
    def editing(cls, word: Word) -> "EditWordState":
        return cls(word=word, original_word=word)

    @property
    def is_new(self) -> bool:
        return self.original_word is None

    @property
    def is_save_disabled(self) -> bool:
        return not self.word.term or not self.word.definition

    def saved_word(self) -> Optional[Word]:
        """Returns the word to hand to the owner on save, or None if save is disabled."""
        if self.is_save_disabled:
            return None
        if self.original_word is not None and self.word.id != self.original_word.id:
            return self.word.model_copy(update={"id": self.original_word.id})
        return self.word


def reduce_edit_word(state: EditWordState, action: Any) -> Tuple[EditWordState, List[Effect]]:
    """Applies field edits to the draft.

    Save and cancel are handled by the owning deck detail reducer, which
    also dismisses this state.
    """
    if isinstance(action, SetTerm):
        return state.model_copy(update={"word": state.word.model_copy(update={"term": action.text})}), []
    if isinstance(action, SetDefinition):
        return (
            state.model_copy(
                update={"word": state.word.model_copy(update={"definition": action.text})}
            ),
            [],
        )
    return state, []
