"""Progression ledger: XP curve, level-ups and answer recording."""

import math

from .config import XP_CURVE_BASE, XP_CURVE_EXPONENT, EngineConfig
from .errors import InvalidArgument
from .models import LearnerProgress, WordAccuracyRecord


def _require_xp_delta(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgument(f"{name} must not be negative, got {value}")
    return value


def xp_required(level: int) -> int:
    """XP needed to advance past `level`. Level 0 needs none."""
    if level < 0:
        raise InvalidArgument(f"level must not be negative, got {level}")
    return math.floor(XP_CURVE_BASE * math.pow(level, XP_CURVE_EXPONENT))


def level_up_on_gain(progress: LearnerProgress, xp_gained: int) -> LearnerProgress:
    """Add XP and advance as many levels as it pays for.

    The threshold is re-evaluated at the new level on every step, and a
    learner exactly on the boundary advances in the same call.
    """
    _require_xp_delta('xp_gained', xp_gained)
    level = progress.level
    current_xp = progress.current_xp + xp_gained
    while current_xp >= xp_required(level):
        current_xp -= xp_required(level)
        level += 1
    return LearnerProgress(level, current_xp)


def apply_loss(progress: LearnerProgress, xp_lost: int) -> LearnerProgress:
    """Remove XP down to a floor of zero. The level is never lowered."""
    _require_xp_delta('xp_lost', xp_lost)
    return LearnerProgress(progress.level, max(progress.current_xp - xp_lost, 0))


def score_answer(progress: LearnerProgress, correct: bool, difficulty: int,
                 config: EngineConfig = None) -> tuple[LearnerProgress, int]:
    """Apply one answer to the learner's progress.

    A correct answer earns the word's difficulty in XP, a wrong one costs
    `wrong_answer_xp_loss`. Returns (new_progress, xp_delta) where xp_delta is
    the signed change credited to the practice session.
    """
    config = config or EngineConfig()
    if correct:
        return level_up_on_gain(progress, difficulty), difficulty
    return apply_loss(progress, config.wrong_answer_xp_loss), -config.wrong_answer_xp_loss


def record_answer(history: list[WordAccuracyRecord], item_key: str, correct: bool) -> WordAccuracyRecord:
    """Count an answer against the word's record, creating it on first encounter."""
    record = next((r for r in history if r.item_key == item_key), None)
    if record is None:
        record = WordAccuracyRecord(item_key)
        history.append(record)
    if correct:
        record.correct_count += 1
    else:
        record.wrong_count += 1
    return record
