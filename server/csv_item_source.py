"""CSV-backed vocabulary source."""

import csv
import logging
import random

from core.config import (
    DISTRACTOR_COUNT, ITEM_KEY_COLUMN, TRANSLATION_COLUMN, DIFFICULTY_COLUMN
)
from core.errors import NoCandidateAvailable
from core.interfaces import ItemSource
from core.models import Item

logger = logging.getLogger(__name__)


def _normalize(key: str) -> str:
    return key.lower().strip()


class CsvItemSource(ItemSource):
    """Words loaded once from a CSV file with word, translation and difficulty columns."""

    def __init__(self, words_file: str, distractor_count: int = DISTRACTOR_COUNT):
        self.words_file = words_file
        self.distractor_count = distractor_count
        self.items = self._load_items(words_file)
        self._by_key = {_normalize(item.item_key): item for item in self.items}

    @staticmethod
    def _load_items(words_file: str) -> list[Item]:
        items = []
        with open(words_file, 'r', encoding='utf-8', newline='') as f:
            for line_no, row in enumerate(csv.DictReader(f), start=2):
                word = (row.get(ITEM_KEY_COLUMN) or '').strip()
                if not word:
                    logger.warning(f"{words_file}:{line_no}: row without a word, skipped")
                    continue
                try:
                    difficulty = int(row.get(DIFFICULTY_COLUMN) or 1)
                except ValueError:
                    logger.warning(f"{words_file}:{line_no}: bad difficulty for {word!r}, using 1")
                    difficulty = 1
                items.append(Item(word, (row.get(TRANSLATION_COLUMN) or '').strip(), max(difficulty, 0)))
        logger.info(f"Loaded {len(items)} words from {words_file}")
        return items

    def get_item(self, item_key: str) -> Item | None:
        return self._by_key.get(_normalize(item_key))

    def fetch_candidate(self, exclude: set[str], preferred_key: str = None,
                        rng=None) -> tuple[Item, list[Item]]:
        rng = rng or random
        if preferred_key is not None:
            chosen = self.get_item(preferred_key)
            if chosen is None:
                raise NoCandidateAvailable(f"Word not in word list: {preferred_key}")
        else:
            excluded = {_normalize(key) for key in exclude}
            candidates = [item for item in self.items if _normalize(item.item_key) not in excluded]
            if not candidates:
                raise NoCandidateAvailable("Every word in the word list has already been seen")
            chosen = rng.choice(candidates)

        others = [item for item in self.items if item is not chosen]
        distractors = rng.sample(others, min(self.distractor_count, len(others)))
        return chosen, distractors
