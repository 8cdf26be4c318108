"""Error types raised by the practice engine."""


class EngineError(Exception):
    """Base class for practice engine errors."""


class InvalidArgument(EngineError, ValueError):
    """Input outside the engine's contract (negative XP, empty key, bad barrier)."""


class NoCandidateAvailable(EngineError, LookupError):
    """The item source has no word left to offer."""
