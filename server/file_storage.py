"""File-based storage implementation."""

import json
import logging
import os

from core.interfaces import Storage
from core.models import LearnerProgress, PracticeSession, SelectionSessionState, WordAccuracyRecord

logger = logging.getLogger(__name__)


class FileStorage(Storage):
    """File-based storage implementation, one JSON state file per user."""

    def __init__(self, config_file: str = None, state_dir: str = None):
        self.config_file = config_file or os.path.expanduser('~/.config/sona/config.json')
        # Project root is one level up from server/
        project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.state_dir = state_dir or project_root

    def _get_state_file(self, user_id: str) -> str:
        """Get state file path for a user."""
        if user_id == "default":
            return os.path.join(self.state_dir, 'sona_state.json')
        return os.path.join(self.state_dir, f'sona_state_{user_id}.json')

    def _load_state(self, user_id: str) -> dict:
        state_file = self._get_state_file(user_id)
        if os.path.exists(state_file):
            try:
                with open(state_file, 'r') as f:
                    return json.load(f)
            except (OSError, ValueError) as e:
                logger.error(f"Error loading state for {user_id}: {e}")
        return {}

    def _save_state(self, user_id: str, state: dict) -> None:
        state_file = self._get_state_file(user_id)
        with open(state_file, 'w') as f:
            json.dump(state, f, indent=2)

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            return {}
        with open(self.config_file, 'r') as f:
            return json.load(f)

    def load_history(self, user_id: str) -> list[WordAccuracyRecord]:
        state = self._load_state(user_id)
        return [WordAccuracyRecord.from_dict(r) for r in state.get('history', [])]

    def record_answer(self, user_id: str, item_key: str, correct: bool) -> None:
        state = self._load_state(user_id)
        history = state.setdefault('history', [])
        record = next((r for r in history if r['item_key'] == item_key), None)
        if record is None:
            record = {'item_key': item_key, 'correct_count': 0, 'wrong_count': 0}
            history.append(record)
        if correct:
            record['correct_count'] += 1
        else:
            record['wrong_count'] += 1
        self._save_state(user_id, state)

    def load_progress(self, user_id: str) -> LearnerProgress:
        state = self._load_state(user_id)
        return LearnerProgress.from_dict(state.get('progress', {}))

    def save_progress(self, user_id: str, progress: LearnerProgress) -> None:
        state = self._load_state(user_id)
        state['progress'] = progress.to_dict()
        self._save_state(user_id, state)

    def load_session_state(self, user_id: str) -> SelectionSessionState | None:
        data = self._load_state(user_id).get('session_state')
        return SelectionSessionState.from_dict(data) if data else None

    def save_session_state(self, user_id: str, state: SelectionSessionState) -> None:
        user_state = self._load_state(user_id)
        user_state['session_state'] = state.to_dict()
        self._save_state(user_id, user_state)

    def save_practice_session(self, user_id: str, session: PracticeSession) -> None:
        state = self._load_state(user_id)
        state.setdefault('practice_sessions', []).append({
            'played_at': session.started_at,
            **session.summary()
        })
        self._save_state(user_id, state)

    def load_practice_sessions(self, user_id: str) -> list[dict]:
        """Summaries of finished practice sessions, oldest first."""
        return self._load_state(user_id).get('practice_sessions', [])

    def list_users(self) -> list[str]:
        """List all existing user IDs."""
        users = []
        if os.path.exists(self.state_dir):
            for filename in os.listdir(self.state_dir):
                if filename == 'sona_state.json':
                    users.append('default')
                elif filename.startswith('sona_state_') and filename.endswith('.json'):
                    user_id = filename[11:-5]  # Remove 'sona_state_' and '.json'
                    users.append(user_id)
        return sorted(users)

    def user_exists(self, user_id: str) -> bool:
        """Check if a user exists."""
        return os.path.exists(self._get_state_file(user_id))
