"""Form state for creating a deck."""

from typing import Any, List, Tuple

from pydantic import BaseModel, ConfigDict

from .actions import DescriptionChanged, TitleChanged
from .effects import Effect


class CreateDeckState(BaseModel):
    title: str = ""
    description: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def is_save_disabled(self) -> bool:
        return not self.title


def reduce_create_deck(state: CreateDeckState, action: Any) -> Tuple[CreateDeckState, List[Effect]]:
    if isinstance(action, TitleChanged):
        return state.model_copy(update={"title": action.text}), []
    if isinstance(action, DescriptionChanged):
        return state.model_copy(update={"description": action.text}), []
    return state, []
