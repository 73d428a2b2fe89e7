"""Demo decks inserted into an empty database on first start."""

import logging
from typing import List, Tuple

from .core import Deck, Word
from .persistence import PersistenceService

logger = logging.getLogger(__name__)

DEMO_DECKS: List[Tuple[str, List[Tuple[str, str]]]] = [
    (
        "基本英単語",
        [
            ("Apple", "りんご"),
            ("Banana", "バナナ"),
            ("Cat", "猫"),
            ("Dog", "犬"),
            ("Elephant", "象"),
            ("Fish", "魚"),
            ("Giraffe", "キリン"),
            ("House", "家"),
            ("Ice cream", "アイスクリーム"),
            ("Juice", "ジュース"),
        ],
    ),
    (
        "TOEIC頻出単語",
        [
            ("implement", "実装する"),
            ("revenue", "収益"),
            ("negotiate", "交渉する"),
            ("delegate", "委任する"),
            ("initiative", "主導権"),
            ("facilitate", "促進する"),
            ("compliance", "法令順守"),
            ("deadline", "締切"),
            ("expertise", "専門知識"),
            ("optimize", "最適化する"),
        ],
    ),
    (
        "プログラミング用語",
        [
            ("API", "アプリケーションプログラミングインターフェース"),
            ("Git", "分散型バージョン管理システム"),
            ("HTTP", "ハイパーテキスト転送プロトコル"),
            ("JSON", "JavaScript Object Notation"),
            ("REST", "Representational State Transfer"),
            ("SQL", "構造化照会言語"),
            ("UI/UX", "ユーザーインターフェース/ユーザーエクスペリエンス"),
            ("Variable", "変数"),
            ("Function", "関数"),
            ("Object", "オブジェクト"),
        ],
    ),
]


async def insert_demo_data_if_needed(service: PersistenceService) -> bool:
    """Inserts the demo decks and their words when no deck exists yet.

    Args:
        service: The persistence service to populate.

    Returns:
        True if demo data was inserted, False if decks already existed.

    Raises:
        PersistenceError: If a write fails part way through.
    """
    existing_decks = await service.get_all_decks()
    if existing_decks:
        logger.debug("Found %d existing decks, skipping demo data", len(existing_decks))
        return False

    for title, entries in DEMO_DECKS:
        deck = Deck(title=title)
        await service.save_deck(deck)
        for term, definition in entries:
            await service.add_word_to_deck(deck.id, Word(term=term, definition=definition))
        logger.info("Inserted demo deck %s with %d words", title, len(entries))

    return True
