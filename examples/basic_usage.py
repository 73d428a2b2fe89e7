#!/usr/bin/env python3
"""Basic usage example for flashdeck."""

import asyncio

from flashdeck import AppController, DeckDetailController, DuckDBPersistenceService
from flashdeck.actions import CreateFormDismissed, NextCard, ToggleDefinition


async def main() -> None:
    """Create a deck, add words and run through them as flashcards."""
    print("🎯 flashdeck Basic Usage Example")
    print("=" * 50)

    # In-memory database; pass a path to keep the decks
    service = DuckDBPersistenceService()

    try:
        app = AppController(service, seed_demo_data=False)
        app.start()
        await app.settle()

        print("\n📝 Creating a deck...")
        app.deck_list(CreateFormDismissed(title="Animals"))
        await app.settle()
        deck = app.find_deck("Animals")
        print(f"   ✅ Created: {deck.title}")

        detail = DeckDetailController(service, deck.id, deck.title)
        detail.activate()
        await detail.settle()

        print("\n📝 Adding words...")
        for term, definition in [("Dog", "犬"), ("Cat", "猫"), ("Bird", "鳥")]:
            detail.add_word()
            detail.set_term(term)
            detail.set_definition(definition)
            detail.save_word()
            print(f"   ✅ Added: {term}")
        await detail.settle()

        print("\n📖 Studying...")
        detail.start_flashcards()
        while not detail.state.flash_card.is_completed:
            session = detail.state.flash_card
            detail.flash_card(ToggleDefinition())
            print(f"   {session.current_word.term} → {session.current_word.definition}")
            detail.flash_card(NextCard())
        detail.end_flashcards()

        print("\n📊 Statistics:")
        stats = await service.get_stats()
        print(f"   Total decks: {stats['total_decks']}")
        print(f"   Total words: {stats['total_words']}")

        print("\n🎉 Example completed successfully!")

    finally:
        await service.close()


if __name__ == "__main__":
    asyncio.run(main())
