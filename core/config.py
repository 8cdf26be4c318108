"""Configuration constants for sona application."""

from .errors import InvalidArgument

LANGUAGE = 'Estonian'

# Selection policy
STRUGGLE_BARRIER = 0.3            # Wrong-answer ratio above this marks a word as "struggled"
LESS_STRUGGLE_WORD_INTERVAL = 4   # Every Nth selection re-shows an eased word
DISTRACTOR_COUNT = 3              # Additional words offered alongside the chosen one

# XP curve: xp_required(level) = floor(XP_CURVE_BASE * level ** XP_CURVE_EXPONENT)
XP_CURVE_BASE = 100
XP_CURVE_EXPONENT = 1.5

# Answer scoring
WRONG_ANSWER_XP_LOSS = 1          # Correct answers gain the word's difficulty instead

# Word list columns
ITEM_KEY_COLUMN = 'Estonian Word'
TRANSLATION_COLUMN = 'English Translation'
DIFFICULTY_COLUMN = 'Difficulty'


class EngineConfig:
    """Tunable options for the practice engine."""

    def __init__(self, struggle_barrier: float = STRUGGLE_BARRIER,
                 less_struggle_word_interval: int = LESS_STRUGGLE_WORD_INTERVAL,
                 distractor_count: int = DISTRACTOR_COUNT,
                 wrong_answer_xp_loss: int = WRONG_ANSWER_XP_LOSS):
        self.struggle_barrier = struggle_barrier
        self.less_struggle_word_interval = less_struggle_word_interval
        self.distractor_count = distractor_count
        self.wrong_answer_xp_loss = wrong_answer_xp_loss

    def validate(self) -> 'EngineConfig':
        """Raise InvalidArgument if any option is out of range."""
        validate_struggle_barrier(self.struggle_barrier)
        if not isinstance(self.less_struggle_word_interval, int) or self.less_struggle_word_interval < 1:
            raise InvalidArgument("less_struggle_word_interval must be a positive integer")
        if not isinstance(self.distractor_count, int) or self.distractor_count < 0:
            raise InvalidArgument("distractor_count must be a non-negative integer")
        if not isinstance(self.wrong_answer_xp_loss, int) or self.wrong_answer_xp_loss < 0:
            raise InvalidArgument("wrong_answer_xp_loss must be a non-negative integer")
        return self

    def to_dict(self) -> dict:
        return {
            'struggle_barrier': self.struggle_barrier,
            'less_struggle_word_interval': self.less_struggle_word_interval,
            'distractor_count': self.distractor_count,
            'wrong_answer_xp_loss': self.wrong_answer_xp_loss
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'EngineConfig':
        """Build a validated config, falling back to defaults for missing keys."""
        try:
            config = cls(
                struggle_barrier=float(data.get('struggle_barrier', STRUGGLE_BARRIER)),
                less_struggle_word_interval=int(data.get('less_struggle_word_interval', LESS_STRUGGLE_WORD_INTERVAL)),
                distractor_count=int(data.get('distractor_count', DISTRACTOR_COUNT)),
                wrong_answer_xp_loss=int(data.get('wrong_answer_xp_loss', WRONG_ANSWER_XP_LOSS))
            )
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"Invalid engine option: {e}") from e
        return config.validate()


def validate_struggle_barrier(struggle_barrier: float) -> float:
    if isinstance(struggle_barrier, bool) or not isinstance(struggle_barrier, (int, float)):
        raise InvalidArgument(f"struggle_barrier must be a number, got {struggle_barrier!r}")
    if not 0 < struggle_barrier < 1:
        raise InvalidArgument(f"struggle_barrier must be in (0, 1), got {struggle_barrier}")
    return struggle_barrier
