"""Command-line interface for flashdeck."""

import argparse
import asyncio
import logging
import sys
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from .actions import (
    Activate,
    AddWordTapped,
    CloseSession,
    CreateDeckAction,
    DeleteDecks,
    DeleteWords,
    DescriptionChanged,
    DismissCompletion,
    EditWordAction,
    EditWordTapped,
    FlashCardAction,
    OpenCreateForm,
    ResetCards,
    SaveDeckTapped,
    SaveWord,
    SelectDeck,
    SelectedDeckAction,
    SetDefinition,
    SetTerm,
    StartFlashcards,
    TitleChanged,
    ToggleDefinition,
)
from .app import AppController
from .config import Settings
from .database import DatabaseError
from .deck_detail import DeckDetailState
from .flash_card import SwipeDirection, swipe
from .persistence import DuckDBPersistenceService

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="flashdeck: study decks of term/definition flashcards"
    )
    parser.add_argument("--db", help="Database file (default: FLASHDECK_DB_PATH)")
    parser.add_argument(
        "--no-seed", action="store_true", help="Do not insert demo decks into an empty database"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("decks", help="List decks")

    create_parser = subparsers.add_parser("create-deck", help="Create a deck")
    create_parser.add_argument("title", help="Deck title")
    create_parser.add_argument("--description", default="", help="Deck description")

    delete_parser = subparsers.add_parser("delete-deck", help="Delete a deck")
    delete_parser.add_argument("deck", help="Deck title or number")

    words_parser = subparsers.add_parser("words", help="List the words of a deck")
    words_parser.add_argument("deck", help="Deck title or number")

    add_word_parser = subparsers.add_parser("add-word", help="Add a word to a deck")
    add_word_parser.add_argument("deck", help="Deck title or number")
    add_word_parser.add_argument("term", help="Term to learn")
    add_word_parser.add_argument("definition", help="Meaning of the term")

    edit_word_parser = subparsers.add_parser("edit-word", help="Edit a word of a deck")
    edit_word_parser.add_argument("deck", help="Deck title or number")
    edit_word_parser.add_argument("word", help="Current term of the word")
    edit_word_parser.add_argument("--term", help="New term")
    edit_word_parser.add_argument("--definition", help="New definition")

    delete_word_parser = subparsers.add_parser("delete-word", help="Delete a word from a deck")
    delete_word_parser.add_argument("deck", help="Deck title or number")
    delete_word_parser.add_argument("word", help="Term of the word")

    study_parser = subparsers.add_parser("study", help="Review a deck with flashcards")
    study_parser.add_argument("deck", help="Deck title or number")

    subparsers.add_parser("stats", help="Show database statistics")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        settings = Settings.from_env()
    except ValidationError as e:
        print(f"Error: invalid settings: {e}")
        sys.exit(1)
    if args.db:
        settings = settings.model_copy(update={"db_path": args.db})
    if args.no_seed:
        settings = settings.model_copy(update={"seed_demo_data": False})

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings.ensure_db_dir()
    try:
        service = DuckDBPersistenceService(settings.db_path)
    except DatabaseError as e:
        print(f"Error: {e}")
        sys.exit(1)

    exit_code = asyncio.run(run_command(args, service, settings.seed_demo_data))
    if exit_code:
        sys.exit(exit_code)


async def run_command(args: argparse.Namespace, service: DuckDBPersistenceService, seed: bool) -> int:
    """Starts the app, runs one command and closes the database."""
    app = AppController(service, seed_demo_data=seed)
    logger.debug("Running command %s", args.command)
    try:
        app.start()
        await app.settle()
        return await COMMANDS[args.command](app, args)
    finally:
        await service.close()


def _send_detail(app: AppController, action: Any) -> None:
    app.deck_list(SelectedDeckAction(action=action))


def _detail_state(app: AppController) -> DeckDetailState:
    detail = app.state.deck_list.selected_deck
    if detail is None:
        raise RuntimeError("No deck is open")
    return detail


async def _open_deck(app: AppController, name: str) -> bool:
    deck = app.find_deck(name)
    if deck is None:
        print(f"No deck named {name}")
        return False
    app.deck_list(SelectDeck(deck=deck))
    _send_detail(app, Activate())
    await app.settle()
    return True


async def list_decks(app: AppController, args: argparse.Namespace) -> int:
    decks = app.state.deck_list.decks
    if not decks:
        print("No decks yet. Create one with: flashdeck create-deck TITLE")
        return 0
    for number, deck in enumerate(decks, start=1):
        print(f"{number:3d}. {deck.title}")
    return 0


async def create_deck(app: AppController, args: argparse.Namespace) -> int:
    app.deck_list(OpenCreateForm())
    app.deck_list(CreateDeckAction(action=TitleChanged(text=args.title)))
    app.deck_list(CreateDeckAction(action=DescriptionChanged(text=args.description)))
    app.deck_list(CreateDeckAction(action=SaveDeckTapped()))
    await app.settle()

    if app.state.deck_list.create_deck is not None:
        print("Please provide a deck title.")
        return 1
    print(f"Created deck: {args.title}")
    return 0


async def delete_deck(app: AppController, args: argparse.Namespace) -> int:
    deck = app.find_deck(args.deck)
    if deck is None:
        print(f"No deck named {args.deck}")
        return 1
    app.deck_list(DeleteDecks(indices=(app.state.deck_list.decks.index_of(deck.id),)))
    await app.settle()
    print(f"Deleted deck: {deck.title}")
    return 0


async def show_words(app: AppController, args: argparse.Namespace) -> int:
    if not await _open_deck(app, args.deck):
        return 1
    detail = _detail_state(app)
    print(f"=== {detail.deck_title} ===")
    if not detail.words:
        print("No words in this deck.")
    for word in detail.words:
        print(f"{word.term}: {word.definition}")
    return 0


async def add_word(app: AppController, args: argparse.Namespace) -> int:
    if not await _open_deck(app, args.deck):
        return 1
    _send_detail(app, AddWordTapped())
    _send_detail(app, EditWordAction(action=SetTerm(text=args.term)))
    _send_detail(app, EditWordAction(action=SetDefinition(text=args.definition)))
    _send_detail(app, EditWordAction(action=SaveWord()))
    await app.settle()

    if _detail_state(app).edit_word is not None:
        print("Please provide both term and definition.")
        return 1
    print(f"Added word: {args.term}")
    return 0


def _find_word_index(detail: DeckDetailState, term: str) -> Optional[int]:
    for index, word in enumerate(detail.words):
        if word.term == term:
            return index
    return None


async def edit_word(app: AppController, args: argparse.Namespace) -> int:
    if not await _open_deck(app, args.deck):
        return 1
    detail = _detail_state(app)
    index = _find_word_index(detail, args.word)
    if index is None:
        print(f"No word {args.word} in {detail.deck_title}")
        return 1

    _send_detail(app, EditWordTapped(word=detail.words[index]))
    if args.term is not None:
        _send_detail(app, EditWordAction(action=SetTerm(text=args.term)))
    if args.definition is not None:
        _send_detail(app, EditWordAction(action=SetDefinition(text=args.definition)))
    _send_detail(app, EditWordAction(action=SaveWord()))
    await app.settle()

    if _detail_state(app).edit_word is not None:
        print("Term and definition cannot be empty.")
        return 1
    print(f"Updated word: {args.word}")
    return 0


async def delete_word(app: AppController, args: argparse.Namespace) -> int:
    if not await _open_deck(app, args.deck):
        return 1
    detail = _detail_state(app)
    index = _find_word_index(detail, args.word)
    if index is None:
        print(f"No word {args.word} in {detail.deck_title}")
        return 1
    _send_detail(app, DeleteWords(indices=(index,)))
    await app.settle()
    print(f"Deleted word: {args.word}")
    return 0


_STUDY_KEYS = {
    "": lambda session: ToggleDefinition(),
    "n": lambda session: swipe(session, SwipeDirection.FORWARD),
    "p": lambda session: swipe(session, SwipeDirection.BACKWARD),
    "r": lambda session: ResetCards(),
    "q": lambda session: CloseSession(),
}

_COMPLETED_KEYS = {
    "r": ResetCards,
    "b": DismissCompletion,
    "q": CloseSession,
}


def _prompt(text: str) -> str:
    try:
        return input(text).strip().lower()
    except EOFError:
        return "q"


async def study(app: AppController, args: argparse.Namespace) -> int:
    if not await _open_deck(app, args.deck):
        return 1
    detail = _detail_state(app)
    if not detail.words:
        print("No words in this deck.")
        return 0

    _send_detail(app, StartFlashcards())
    while True:
        session = _detail_state(app).flash_card
        if session is None:
            break

        if session.is_completed:
            print(f"\nWell done! You went through all {len(session.words)} cards.")
            choice = _prompt("r=start again, b=back to the cards, q=quit: ")
            if choice not in _COMPLETED_KEYS:
                print("Unknown command")
                continue
            action = _COMPLETED_KEYS[choice]()
        else:
            word = session.current_word
            print(f"\n[{session.current_index + 1}/{len(session.words)}] {word.term}")
            if session.is_showing_definition:
                print(f"    {word.definition}")
            choice = _prompt("Enter=flip, n=next, p=previous, r=reset, q=quit: ")
            if choice not in _STUDY_KEYS:
                print("Unknown command")
                continue
            action = _STUDY_KEYS[choice](session)

        if action is not None:
            _send_detail(app, FlashCardAction(action=action))
    return 0


async def show_stats(app: AppController, args: argparse.Namespace) -> int:
    stats = await app.service.get_stats()  # type: ignore[attr-defined]

    print("=== Flashdeck Statistics ===")
    print(f"Total decks: {stats['total_decks']}")
    print(f"Total words: {stats['total_words']}")
    print(f"Total deck/word links: {stats['total_links']}")
    return 0


COMMANDS: Dict[str, Callable[[AppController, argparse.Namespace], Awaitable[int]]] = {
    "decks": list_decks,
    "create-deck": create_deck,
    "delete-deck": delete_deck,
    "words": show_words,
    "add-word": add_word,
    "edit-word": edit_word,
    "delete-word": delete_word,
    "study": study,
    "stats": show_stats,
}


if __name__ == "__main__":
    main()
