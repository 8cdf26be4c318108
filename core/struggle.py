"""Struggle reporter: ranks words by how often the learner gets them wrong."""

import logging

from .config import validate_struggle_barrier
from .interfaces import ItemSource
from .models import StruggleStatRow, WordAccuracyRecord
from .utils import round2

logger = logging.getLogger(__name__)

NOT_FOUND_TRANSLATION = 'Not found'


def report(history: list[WordAccuracyRecord], struggle_barrier: float) -> list[StruggleStatRow]:
    """Return words whose wrong-answer share exceeds the barrier, worst first.

    Words never answered are left out. Equal percentages keep their order
    from `history`.
    """
    validate_struggle_barrier(struggle_barrier)
    rows = []
    for record in history:
        if record.total == 0:
            continue
        struggle_percent = round2(100 * record.wrong_count / record.total)
        if struggle_percent / 100 > struggle_barrier:
            rows.append(StruggleStatRow(record.item_key, struggle_percent, record.total))
    return sorted(rows, key=lambda row: row.struggle_percent, reverse=True)


def with_translations(rows: list[StruggleStatRow], item_source: ItemSource) -> list[StruggleStatRow]:
    """Copy the report rows with each word's translation filled in."""
    enriched = []
    for row in rows:
        item = item_source.get_item(row.item_key)
        if item is None:
            logger.warning(f"No translation found for word: {row.item_key}")
            translation = NOT_FOUND_TRANSLATION
        else:
            translation = item.translation
        enriched.append(StruggleStatRow(row.item_key, row.struggle_percent, row.total_attempts, translation))
    return enriched
