"""Selection policy: decides which word to ask next."""

import logging
import random

from .config import EngineConfig
from .interfaces import ItemSource
from .models import Selection, SelectionSessionState, WordAccuracyRecord
from .utils import format_percent, round2

logger = logging.getLogger(__name__)


def partition_history(history: list[WordAccuracyRecord],
                      struggle_barrier: float) -> tuple[list[WordAccuracyRecord], list[WordAccuracyRecord]]:
    """Split answered words into (struggled, eased) around the barrier.

    Words without answers belong to neither list.
    """
    struggled = []
    eased = []
    for record in history:
        ratio = record.wrong_ratio
        if ratio is None:
            continue
        if ratio > struggle_barrier:
            struggled.append(record)
        else:
            eased.append(record)
    return struggled, eased


def known_item_keys(history: list[WordAccuracyRecord]) -> set[str]:
    """Keys of every word the learner has already met."""
    return {record.item_key for record in history}


def _describe(record: WordAccuracyRecord) -> str:
    return f"{record.item_key}, Struggle %: {format_percent(round2(record.wrong_ratio * 100))}"


def select(history: list[WordAccuracyRecord], state: SelectionSessionState, exclude: set[str],
           item_source: ItemSource, config: EngineConfig = None, rng=None) -> Selection:
    """Choose the next word to present.

    Every `less_struggle_word_interval`-th call re-shows an eased word so it
    is not forgotten. Otherwise calls alternate on `state.toggle`: a
    struggled word when toggled, a new word when not. Empty buckets fall
    back to a new word.

    Mutates only `state` (call counter and toggle), and only once a word was
    actually obtained from the item source.
    """
    config = config or EngineConfig()
    rng = rng or random

    call_count = state.call_count + 1
    struggled, eased = partition_history(history, config.struggle_barrier)

    if call_count % config.less_struggle_word_interval == 0 and eased:
        record = rng.choice(eased)
        logger.info(f"Selected less struggled word: {_describe(record)}")
        chosen, distractors = item_source.fetch_candidate(exclude, record.item_key, rng)
        reason = 'eased'
    elif state.toggle and struggled:
        record = rng.choice(struggled)
        logger.info(f"Selected struggled word: {_describe(record)}")
        chosen, distractors = item_source.fetch_candidate(exclude, record.item_key, rng)
        reason = 'struggled'
    else:
        if state.toggle:
            logger.info("No struggled words found, selecting a new word.")
        else:
            logger.info("Selected a completely new word.")
        chosen, distractors = item_source.fetch_candidate(exclude, None, rng)
        reason = 'new'

    state.call_count = call_count
    state.toggle = not state.toggle
    return Selection(chosen, distractors, reason)
