"""Unit tests for the value types and the identified collection."""

import pytest
from pydantic import ValidationError

from flashdeck.core import Deck, Word, new_id
from flashdeck.identified import IdentifiedArray


class TestModels:
    def test_word_gets_fresh_id(self) -> None:
        first = Word(term="Cat", definition="猫")
        second = Word(term="Cat", definition="猫")
        assert first.id != second.id

    def test_word_is_immutable(self) -> None:
        word = Word(term="Cat", definition="猫")
        with pytest.raises(ValidationError):
            word.term = "Dog"

    def test_edited_copy_keeps_id(self) -> None:
        word = Word(term="Cat", definition="猫")
        edited = word.model_copy(update={"definition": "ねこ"})
        assert edited.id == word.id
        assert edited.definition == "ねこ"

    def test_deck_defaults(self) -> None:
        deck = Deck(title="Animals")
        assert deck.description == ""
        assert deck.id

    def test_new_id_is_unique(self) -> None:
        assert len({new_id() for _ in range(50)}) == 50


class TestIdentifiedArray:
    def test_rejects_duplicate_ids(self) -> None:
        word = Word(term="Cat", definition="猫")
        with pytest.raises(ValueError):
            IdentifiedArray([word, word])

    def test_deduplicated_keeps_first_seen(self) -> None:
        original = Word(id="w1", term="Cat", definition="猫")
        repeat = Word(id="w1", term="Cat", definition="ねこ")
        other = Word(id="w2", term="Dog", definition="犬")

        array = IdentifiedArray.deduplicated([original, other, repeat])

        assert array.ids == ["w1", "w2"]
        assert array.get("w1").definition == "猫"

    def test_upsert_replaces_in_place(self) -> None:
        array = IdentifiedArray([Word(id="a", term="A"), Word(id="b", term="B")])

        inserted = array.upsert(Word(id="a", term="A2"))

        assert inserted is False
        assert array.ids == ["a", "b"]
        assert array[0].term == "A2"

    def test_upsert_appends_unknown_id(self) -> None:
        array = IdentifiedArray([Word(id="a", term="A")])

        assert array.upsert(Word(id="c", term="C")) is True
        assert array.ids == ["a", "c"]

    def test_ids_at_resolves_offsets(self) -> None:
        array = IdentifiedArray([Word(id=str(i), term=str(i)) for i in range(4)])
        assert array.ids_at([3, 1]) == ["1", "3"]

    def test_ids_at_rejects_bad_offset(self) -> None:
        array = IdentifiedArray([Word(id="a", term="A")])
        with pytest.raises(IndexError):
            array.ids_at([1])

    def test_copy_is_independent(self) -> None:
        array = IdentifiedArray([Word(id="a", term="A")])
        copy = array.copy()
        copy.remove("a")
        assert "a" in array
        assert "a" not in copy

    def test_sorted_and_index_of(self) -> None:
        array = IdentifiedArray(
            [Word(id="1", term="banana"), Word(id="2", term="Apple"), Word(id="3", term="apple")]
        )
        ordered = array.sorted(key=lambda word: word.term)
        assert [word.term for word in ordered] == ["Apple", "apple", "banana"]
        assert ordered.index_of("1") == 2
        assert ordered.index_of("missing") is None

    def test_equality(self) -> None:
        words = [Word(id="a", term="A"), Word(id="b", term="B")]
        assert IdentifiedArray(words) == IdentifiedArray(words)
        assert IdentifiedArray(words) != IdentifiedArray(reversed(words))
