"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod

from .models import (
    Item, LearnerProgress, PracticeSession, SelectionSessionState, WordAccuracyRecord
)


class ItemSource(ABC):
    """Abstract base class for the vocabulary supply."""

    @abstractmethod
    def fetch_candidate(self, exclude: set[str], preferred_key: str = None,
                        rng=None) -> tuple[Item, list[Item]]:
        """Pick a word and its distractors. Returns (chosen, distractors).

        `preferred_key` forces the chosen word even if it is in `exclude`.
        Raises NoCandidateAvailable if no word can be offered."""
        pass

    @abstractmethod
    def get_item(self, item_key: str) -> Item | None:
        """Look up a single word. Returns None if unknown."""
        pass


class HistoryStore(ABC):
    """Abstract base class for per-word answer history."""

    @abstractmethod
    def load_history(self, user_id: str) -> list[WordAccuracyRecord]:
        """Load every word record for a user (empty list if none)."""
        pass

    @abstractmethod
    def record_answer(self, user_id: str, item_key: str, correct: bool) -> None:
        """Count one answer for a word, creating its record if needed."""
        pass


class ProgressStore(ABC):
    """Abstract base class for level/XP persistence."""

    @abstractmethod
    def load_progress(self, user_id: str) -> LearnerProgress:
        """Load progress for a user. Returns a fresh LearnerProgress if none."""
        pass

    @abstractmethod
    def save_progress(self, user_id: str, progress: LearnerProgress) -> None:
        """Save progress for a user."""
        pass


class Storage(HistoryStore, ProgressStore):
    """Abstract base class for everything the server persists."""

    @abstractmethod
    def load_config(self) -> dict:
        """Load configuration. Returns config dict (empty if there is none)."""
        pass

    @abstractmethod
    def load_session_state(self, user_id: str) -> SelectionSessionState | None:
        """Load the selection counters for a user's session, or None."""
        pass

    @abstractmethod
    def save_session_state(self, user_id: str, state: SelectionSessionState) -> None:
        """Save the selection counters for a user's session."""
        pass

    @abstractmethod
    def save_practice_session(self, user_id: str, session: PracticeSession) -> None:
        """Store the tally of a finished practice session."""
        pass

    @abstractmethod
    def list_users(self) -> list[str]:
        """List all user IDs with stored progress or history."""
        pass

    @abstractmethod
    def user_exists(self, user_id: str) -> bool:
        """Check whether anything is stored for a user."""
        pass
