"""Tests for the deck list reducer and controller."""

import pytest

from flashdeck.actions import (
    Activate,
    AddWordTapped,
    CancelCreate,
    CloseSession,
    CreateDeckAction,
    CreateFormDismissed,
    DecksLoaded,
    DeleteDecks,
    DescriptionChanged,
    EditWordAction,
    FlashCardAction,
    NextCard,
    OpenCreateForm,
    SaveDeckTapped,
    SaveWord,
    SelectDeck,
    SelectedDeckAction,
    SetDefinition,
    SetTerm,
    StartFlashcards,
    TitleChanged,
    WordsLoaded,
)
from flashdeck.core import Deck, Word
from flashdeck.deck_detail import DeckDetailController
from flashdeck.deck_list import DeckListController, DeckListState, reduce_deck_list
from flashdeck.effects import LoadDecks, LoadWords, PersistDeck, RemoveDeck
from flashdeck.persistence import InMemoryPersistenceService


def run(state, *actions):
    effects = []
    for action in actions:
        state, new_effects = reduce_deck_list(state, action)
        effects.extend(new_effects)
    return state, effects


class TestReduceDeckList:
    def test_activate_requests_decks_once(self) -> None:
        state, effects = run(DeckListState(), Activate())
        assert effects == [LoadDecks()]
        assert state.is_loading

        _, effects = run(state, Activate())
        assert effects == []

    def test_decks_loaded_keeps_order_and_drops_duplicates(self) -> None:
        animals = Deck(title="Animals")
        fruits = Deck(title="Fruits")

        state, _ = run(DeckListState(), Activate(), DecksLoaded(decks=[fruits, animals, fruits]))

        assert state.decks.elements == [fruits, animals]
        assert not state.is_loading

    def test_create_via_form(self) -> None:
        state, effects = run(
            DeckListState(),
            OpenCreateForm(),
            CreateDeckAction(action=TitleChanged(text="Animals")),
            CreateDeckAction(action=DescriptionChanged(text="Zoo words")),
            CreateDeckAction(action=SaveDeckTapped()),
        )

        assert state.create_deck is None
        deck = state.decks[0]
        assert (deck.title, deck.description) == ("Animals", "Zoo words")
        assert effects == [PersistDeck(deck=deck)]

    def test_save_tapped_with_empty_title_keeps_form(self) -> None:
        state, effects = run(DeckListState(), OpenCreateForm(), CreateDeckAction(action=SaveDeckTapped()))

        assert state.create_deck is not None
        assert len(state.decks) == 0
        assert effects == []

    def test_dismiss_with_title_creates_deck(self) -> None:
        state, effects = run(DeckListState(), CreateFormDismissed(title="Animals"))

        assert [deck.title for deck in state.decks] == ["Animals"]
        assert effects == [PersistDeck(deck=state.decks[0])]

    def test_dismiss_uses_form_title(self) -> None:
        state, _ = run(
            DeckListState(),
            OpenCreateForm(),
            CreateDeckAction(action=TitleChanged(text="Fruits")),
            CreateFormDismissed(),
        )

        assert [deck.title for deck in state.decks] == ["Fruits"]
        assert state.create_deck is None

    def test_dismiss_with_empty_title_discards(self) -> None:
        state, effects = run(DeckListState(), OpenCreateForm(), CreateFormDismissed(title=""))

        assert len(state.decks) == 0
        assert state.create_deck is None
        assert effects == []

    def test_cancel_create_discards(self) -> None:
        state, effects = run(
            DeckListState(),
            OpenCreateForm(),
            CreateDeckAction(action=TitleChanged(text="Animals")),
            CreateDeckAction(action=CancelCreate()),
        )

        assert state.create_deck is None
        assert len(state.decks) == 0
        assert effects == []

    def test_delete_decks_resolves_ids(self) -> None:
        decks = [Deck(title=title) for title in ("A", "B", "C")]
        state = DeckListState(decks=decks)

        state, effects = run(state, DeleteDecks(indices=(0, 2)))

        assert state.decks.elements == [decks[1]]
        assert effects == [RemoveDeck(deck_id=decks[0].id), RemoveDeck(deck_id=decks[2].id)]

    def test_deleting_open_deck_closes_detail(self) -> None:
        animals = Deck(title="Animals")
        fruits = Deck(title="Fruits")
        state, _ = run(DeckListState(decks=[animals, fruits]), SelectDeck(deck=fruits))

        kept, _ = run(state, DeleteDecks(indices=(0,)))
        assert kept.selected_deck.deck_id == fruits.id

        removed, _ = run(state, DeleteDecks(indices=(1,)))
        assert removed.selected_deck is None

    def test_delete_out_of_range_raises(self) -> None:
        with pytest.raises(IndexError):
            run(DeckListState(decks=[Deck(title="A")]), DeleteDecks(indices=(1,)))

    def test_selected_deck_effects_are_wrapped(self) -> None:
        deck = Deck(title="Animals")
        state, _ = run(DeckListState(decks=[deck]), SelectDeck(deck=deck))

        state, effects = run(state, SelectedDeckAction(action=Activate()))

        assert effects == [LoadWords(deck_id=deck.id).map(SelectedDeckAction.wrap)]
        assert effects[0].complete([]) == SelectedDeckAction(
            action=WordsLoaded(deck_id=deck.id, words=[])
        )

    def test_selected_deck_actions_without_selection_are_ignored(self) -> None:
        state = DeckListState()
        new_state, effects = run(state, SelectedDeckAction(action=Activate()))
        assert new_state == state
        assert effects == []


class TestDeckListController:
    @pytest.mark.asyncio
    async def test_activate_loads_decks(self) -> None:
        animals = Deck(title="Animals")
        service = InMemoryPersistenceService(decks=[animals])
        controller = DeckListController(service)

        controller.activate()
        controller.activate()
        await controller.settle()

        assert controller.state.decks.elements == [animals]
        assert len(service.calls_to("get_all_decks")) == 1

    @pytest.mark.asyncio
    async def test_failed_load_gives_empty_list(self) -> None:
        service = InMemoryPersistenceService(decks=[Deck(title="Animals")], failing={"get_all_decks"})
        controller = DeckListController(service)

        controller.activate()
        await controller.settle()

        assert len(controller.state.decks) == 0
        assert not controller.state.is_loading

    @pytest.mark.asyncio
    async def test_create_and_delete_persist(self) -> None:
        service = InMemoryPersistenceService()
        controller = DeckListController(service)
        controller.activate()
        await controller.settle()

        controller.create_form_dismissed("Animals")
        controller.create_form_dismissed("Fruits")
        await controller.settle()
        assert [deck.title for deck in service.decks.values()] == ["Animals", "Fruits"]

        controller.delete_decks([0])
        await controller.settle()
        assert [deck.title for deck in service.decks.values()] == ["Fruits"]

    @pytest.mark.asyncio
    async def test_failed_save_keeps_deck(self) -> None:
        service = InMemoryPersistenceService(failing={"save_deck"})
        controller = DeckListController(service)

        controller.create_form_dismissed("Animals")
        await controller.settle()

        assert [deck.title for deck in controller.state.decks] == ["Animals"]
        assert service.decks == {}

    @pytest.mark.asyncio
    async def test_create_deck_and_word_end_to_end(self) -> None:
        service = InMemoryPersistenceService()
        controller = DeckListController(service)
        controller.activate()
        await controller.settle()

        controller.create_form_dismissed("Animals")
        await controller.settle()
        deck = controller.state.decks[0]

        controller.select_deck(deck)
        controller.selected_deck(Activate())
        await controller.settle()
        controller.selected_deck(AddWordTapped())
        controller.selected_deck(EditWordAction(action=SetTerm(text="Cat")))
        controller.selected_deck(EditWordAction(action=SetDefinition(text="猫")))
        controller.selected_deck(EditWordAction(action=SaveWord()))
        await controller.settle()

        detail = controller.state.selected_deck
        assert [(w.term, w.definition) for w in detail.words] == [("Cat", "猫")]
        assert detail.edit_word is None

        controller.selected_deck(StartFlashcards())
        session = controller.state.selected_deck.flash_card
        assert session.current_word.term == "Cat"
        assert not session.has_next
        assert session.is_last

        controller.selected_deck(FlashCardAction(action=NextCard()))
        session = controller.state.selected_deck.flash_card
        assert session.is_completed
        assert session.current_index == 0

        controller.selected_deck(FlashCardAction(action=CloseSession()))
        assert controller.state.selected_deck.flash_card is None

        controller.deck_detail_dismissed()
        assert controller.state.selected_deck is None

        reloaded = DeckDetailController(service, deck.id, deck.title)
        reloaded.activate()
        await reloaded.settle()
        assert reloaded.state.words.elements == [
            Word(id=detail.words[0].id, term="Cat", definition="猫")
        ]

    @pytest.mark.asyncio
    async def test_open_detail_receives_loaded_words(self) -> None:
        deck = Deck(title="Animals")
        cat = Word(term="Cat", definition="猫")
        service = InMemoryPersistenceService(decks=[deck], words={deck.id: [cat]})
        controller = DeckListController(service)
        controller.activate()
        await controller.settle()

        controller.select_deck(deck)
        controller.selected_deck(Activate())
        await controller.settle()

        assert controller.state.selected_deck.words.elements == [cat]
        assert not controller.state.selected_deck.is_loading
