"""Tests for the persistence services."""

from unittest.mock import patch

import duckdb
import pytest

from flashdeck.core import Deck, Word
from flashdeck.persistence import (
    DuckDBPersistenceService,
    InMemoryPersistenceService,
    PersistenceError,
)


class TestDuckDBPersistenceService:
    @pytest.mark.asyncio
    async def test_deck_round_trip(self) -> None:
        service = DuckDBPersistenceService()
        try:
            deck = Deck(title="Animals")
            await service.save_deck(deck)
            await service.update_deck(deck.model_copy(update={"title": "Pets"}))

            assert await service.get_all_decks() == [Deck(id=deck.id, title="Pets")]
            assert (await service.get_deck(deck.id)).title == "Pets"

            await service.delete_deck(deck.id)
            await service.delete_deck(deck.id)
            assert await service.get_all_decks() == []
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_word_operations(self) -> None:
        service = DuckDBPersistenceService()
        try:
            deck = Deck(title="Animals")
            await service.save_deck(deck)
            cat = Word(term="Cat", definition="猫")

            await service.add_word_to_deck(deck.id, cat)
            await service.update_word(cat.model_copy(update={"definition": "ねこ"}))
            assert await service.get_words(deck.id) == [
                Word(id=cat.id, term="Cat", definition="ねこ")
            ]

            await service.remove_word_from_deck(deck.id, cat.id)
            await service.delete_word(cat.id)
            assert await service.get_words(deck.id) == []
            assert (await service.get_stats())["total_words"] == 0
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_delete_deck_removes_orphan_words(self) -> None:
        service = DuckDBPersistenceService()
        try:
            animals = Deck(title="Animals")
            pets = Deck(title="Pets")
            await service.save_deck(animals)
            await service.save_deck(pets)
            cat = Word(term="Cat", definition="猫")
            await service.add_word_to_deck(animals.id, cat)
            await service.add_word_to_deck(animals.id, Word(term="Lion", definition="ライオン"))
            await service.add_word_to_deck(pets.id, cat)

            await service.delete_deck(animals.id)

            assert await service.get_words(pets.id) == [cat]
            assert (await service.get_stats())["total_words"] == 1
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_save_word_without_deck(self) -> None:
        service = DuckDBPersistenceService()
        try:
            word = Word(term="Cat", definition="猫")
            await service.save_word(word)
            assert (await service.get_stats())["total_words"] == 1
        finally:
            await service.close()

    @pytest.mark.asyncio
    async def test_duckdb_errors_become_persistence_errors(self) -> None:
        service = DuckDBPersistenceService()
        try:
            def failing_save(deck):
                raise duckdb.Error("write failed")

            with patch.object(service.database, "save_deck", failing_save):
                with pytest.raises(PersistenceError):
                    await service.save_deck(Deck(title="Animals"))
        finally:
            await service.close()


class TestInMemoryPersistenceService:
    @pytest.mark.asyncio
    async def test_repeated_add_links_duplicates(self) -> None:
        deck = Deck(title="Animals")
        service = InMemoryPersistenceService(decks=[deck])
        cat = Word(term="Cat", definition="猫")

        await service.add_word_to_deck(deck.id, cat)
        await service.add_word_to_deck(deck.id, cat)

        assert [word.id for word in await service.get_words(deck.id)] == [cat.id, cat.id]

    @pytest.mark.asyncio
    async def test_remove_word_drops_every_link(self) -> None:
        deck = Deck(title="Animals")
        service = InMemoryPersistenceService(decks=[deck])
        cat = Word(term="Cat", definition="猫")
        dog = Word(term="Dog", definition="犬")
        await service.add_word_to_deck(deck.id, cat)
        await service.add_word_to_deck(deck.id, dog)
        await service.add_word_to_deck(deck.id, cat)

        await service.remove_word_from_deck(deck.id, cat.id)
        await service.remove_word_from_deck(deck.id, cat.id)

        assert await service.get_words(deck.id) == [dog]
        assert cat.id in service.words

    @pytest.mark.asyncio
    async def test_delete_deck_removes_orphan_words(self) -> None:
        animals = Deck(title="Animals")
        pets = Deck(title="Pets")
        cat = Word(term="Cat", definition="猫")
        lion = Word(term="Lion", definition="ライオン")
        service = InMemoryPersistenceService(
            decks=[animals, pets], words={animals.id: [cat, lion, lion], pets.id: [cat]}
        )

        await service.delete_deck(animals.id)
        await service.delete_deck(animals.id)

        assert list(service.words) == [cat.id]
        assert await service.get_words(pets.id) == [cat]

    @pytest.mark.asyncio
    async def test_unknown_deck_is_noop(self) -> None:
        service = InMemoryPersistenceService()
        await service.add_word_to_deck("missing", Word(term="Cat", definition="猫"))

        assert service.words == {}
        assert await service.get_words("missing") == []

    @pytest.mark.asyncio
    async def test_delete_word_unlinks_everywhere(self) -> None:
        animals = Deck(title="Animals")
        pets = Deck(title="Pets")
        cat = Word(term="Cat", definition="猫")
        service = InMemoryPersistenceService(
            decks=[animals, pets], words={animals.id: [cat], pets.id: [cat]}
        )

        await service.delete_word(cat.id)

        assert await service.get_words(animals.id) == []
        assert await service.get_words(pets.id) == []

    @pytest.mark.asyncio
    async def test_injected_failure_is_recorded(self) -> None:
        service = InMemoryPersistenceService(failing={"save_deck"})

        with pytest.raises(PersistenceError):
            await service.save_deck(Deck(title="Animals"))

        assert len(service.calls_to("save_deck")) == 1
        assert service.decks == {}
