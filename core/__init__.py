from .models import (
    WordAccuracyRecord, LearnerProgress, SelectionSessionState,
    StruggleStatRow, Item, Selection, PracticeSession
)
from .interfaces import ItemSource, HistoryStore, ProgressStore, Storage
from .errors import EngineError, InvalidArgument, NoCandidateAvailable
from .selection import select, partition_history, known_item_keys
from .progression import xp_required, level_up_on_gain, apply_loss, score_answer, record_answer
from .struggle import report, with_translations
from .config import (
    EngineConfig,
    STRUGGLE_BARRIER, LESS_STRUGGLE_WORD_INTERVAL, DISTRACTOR_COUNT,
    XP_CURVE_BASE, XP_CURVE_EXPONENT, WRONG_ANSWER_XP_LOSS, LANGUAGE
)

__all__ = [
    'WordAccuracyRecord', 'LearnerProgress', 'SelectionSessionState',
    'StruggleStatRow', 'Item', 'Selection', 'PracticeSession',
    'ItemSource', 'HistoryStore', 'ProgressStore', 'Storage',
    'EngineError', 'InvalidArgument', 'NoCandidateAvailable',
    'select', 'partition_history', 'known_item_keys',
    'xp_required', 'level_up_on_gain', 'apply_loss', 'score_answer', 'record_answer',
    'report', 'with_translations',
    'EngineConfig',
    'STRUGGLE_BARRIER', 'LESS_STRUGGLE_WORD_INTERVAL', 'DISTRACTOR_COUNT',
    'XP_CURVE_BASE', 'XP_CURVE_EXPONENT', 'WRONG_ANSWER_XP_LOSS', 'LANGUAGE'
]
