"""Domain models for sona application."""

import time

from .errors import InvalidArgument
from .utils import format_percent


def _require_key(item_key) -> str:
    if not isinstance(item_key, str) or not item_key.strip():
        raise InvalidArgument(f"item_key must be a non-empty string, got {item_key!r}")
    return item_key


def _require_count(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgument(f"{name} must be a non-negative integer, got {value!r}")
    return value


class WordAccuracyRecord:
    """How often a learner got one word right and wrong."""

    def __init__(self, item_key: str, correct_count: int = 0, wrong_count: int = 0):
        self.item_key = _require_key(item_key)
        self.correct_count = _require_count('correct_count', correct_count)
        self.wrong_count = _require_count('wrong_count', wrong_count)

    @property
    def total(self) -> int:
        return self.correct_count + self.wrong_count

    @property
    def wrong_ratio(self) -> float | None:
        """Share of wrong answers, or None when the word was never answered."""
        if self.total == 0:
            return None
        return self.wrong_count / self.total

    def to_dict(self) -> dict:
        return {
            'item_key': self.item_key,
            'correct_count': self.correct_count,
            'wrong_count': self.wrong_count
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WordAccuracyRecord':
        return cls(data['item_key'], data.get('correct_count', 0), data.get('wrong_count', 0))

    def __eq__(self, other) -> bool:
        if not isinstance(other, WordAccuracyRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"WordAccuracyRecord({self.item_key!r}, correct={self.correct_count}, wrong={self.wrong_count})"


class LearnerProgress:
    """A learner's level and the XP collected towards the next one."""

    def __init__(self, level: int = 0, current_xp: int = 0):
        self.level = _require_count('level', level)
        self.current_xp = _require_count('current_xp', current_xp)

    @property
    def xp_required(self) -> int:
        """XP needed to advance past the current level."""
        from core.progression import xp_required
        return xp_required(self.level)

    def get_progress_display(self) -> str:
        return f"Level {self.level} | XP {self.current_xp}/{self.xp_required}"

    def to_dict(self) -> dict:
        return {
            'level': self.level,
            'current_xp': self.current_xp
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'LearnerProgress':
        return cls(data.get('level', 0), data.get('current_xp', 0))

    def __eq__(self, other) -> bool:
        if not isinstance(other, LearnerProgress):
            return NotImplemented
        return self.level == other.level and self.current_xp == other.current_xp

    def __repr__(self) -> str:
        return f"LearnerProgress(level={self.level}, current_xp={self.current_xp})"


class SelectionSessionState:
    """Per-session counters driving the selection policy."""

    def __init__(self, call_count: int = 0, toggle: bool = False):
        self.call_count = call_count
        self.toggle = toggle

    def to_dict(self) -> dict:
        return {
            'call_count': self.call_count,
            'toggle': self.toggle
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SelectionSessionState':
        return cls(data.get('call_count', 0), data.get('toggle', False))


class Item:
    """A vocabulary word as supplied by the item source."""

    def __init__(self, item_key: str, translation: str, difficulty: int = 1):
        self.item_key = _require_key(item_key)
        self.translation = translation
        self.difficulty = _require_count('difficulty', difficulty)

    def to_dict(self) -> dict:
        return {
            'item_key': self.item_key,
            'translation': self.translation,
            'difficulty': self.difficulty
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Item':
        return cls(data['item_key'], data.get('translation', ''), data.get('difficulty', 1))

    def __repr__(self) -> str:
        return f"Item({self.item_key!r}, {self.translation!r}, difficulty={self.difficulty})"


class Selection:
    """Result of one selection: the word to ask and its distractors."""

    def __init__(self, chosen: Item, distractors: list[Item], reason: str):
        self.chosen = chosen
        self.distractors = distractors
        self.reason = reason  # 'eased', 'struggled' or 'new'

    @property
    def chosen_key(self) -> str:
        return self.chosen.item_key

    @property
    def distractor_keys(self) -> list[str]:
        return [item.item_key for item in self.distractors]


class StruggleStatRow:
    """One line of the struggle report."""

    def __init__(self, item_key: str, struggle_percent: float, total_attempts: int,
                 translation: str = None):
        self.item_key = item_key
        self.struggle_percent = struggle_percent
        self.total_attempts = total_attempts
        self.translation = translation

    @property
    def display_percent(self) -> str:
        return format_percent(self.struggle_percent)

    def to_dict(self) -> dict:
        return {
            'item_key': self.item_key,
            'struggle_percent': self.struggle_percent,
            'struggle_percent_display': self.display_percent,
            'total_attempts': self.total_attempts,
            'translation': self.translation
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, StruggleStatRow):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"StruggleStatRow({self.item_key!r}, {self.display_percent}, attempts={self.total_attempts})"


class PracticeSession:
    """Tally of one sitting: words played, answered correctly and XP earned."""

    def __init__(self, started_at: float = None):
        self.started_at = started_at if started_at is not None else time.time()
        self.words_played = 0
        self.words_guessed_correctly = 0
        self.experience_gained = 0

    def record(self, correct: bool, xp_delta: int) -> None:
        self.words_played += 1
        if correct:
            self.words_guessed_correctly += 1
        self.experience_gained += xp_delta

    def time_played_minutes(self, now: float = None) -> int:
        """Whole minutes since the session started."""
        now = now if now is not None else time.time()
        return max(int((now - self.started_at) // 60), 0)

    def summary(self, now: float = None) -> dict:
        return {
            'words_played': self.words_played,
            'words_guessed_correctly': self.words_guessed_correctly,
            'experience_gained': self.experience_gained,
            'time_played': self.time_played_minutes(now)
        }

    def to_dict(self) -> dict:
        return {
            'started_at': self.started_at,
            'words_played': self.words_played,
            'words_guessed_correctly': self.words_guessed_correctly,
            'experience_gained': self.experience_gained
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PracticeSession':
        session = cls(data.get('started_at'))
        session.words_played = data.get('words_played', 0)
        session.words_guessed_correctly = data.get('words_guessed_correctly', 0)
        session.experience_gained = data.get('experience_gained', 0)
        return session
