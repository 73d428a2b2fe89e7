"""Core value types for flashdeck decks and words."""

import uuid

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Returns a fresh unique identifier for a deck or a word."""
    return str(uuid.uuid4())


class Word(BaseModel):
    """A term/definition pair, the atomic study unit.

    Words are immutable values. Editing a word means building a copy with the
    same ``id``; two words are the same entity iff their ids match.

    Attributes:
        id: Unique identifier for the word.
        term: The term shown on the front of the card.
        definition: The definition shown on the back of the card.
    """

    id: str = Field(default_factory=new_id, description="Unique identifier")
    term: str = Field(default="", description="Term to learn")
    definition: str = Field(default="", description="Meaning of the term")

    model_config = ConfigDict(frozen=True)


class Deck(BaseModel):
    """A named collection of study words.

    Words are not embedded in the deck; they are associated to it by
    ``id`` in the persistence layer.

    Attributes:
        id: Unique identifier for the deck.
        title: Title shown in the deck list.
        description: Optional free-form description.
    """

    id: str = Field(default_factory=new_id, description="Unique identifier")
    title: str = Field(..., description="Deck title")
    description: str = Field(default="", description="Deck description")

    model_config = ConfigDict(frozen=True)
