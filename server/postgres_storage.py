"""PostgreSQL storage implementation."""

import json
import logging
import os

import psycopg2
from psycopg2.extras import RealDictCursor

from core.interfaces import Storage
from core.models import LearnerProgress, PracticeSession, SelectionSessionState, WordAccuracyRecord

logger = logging.getLogger(__name__)


class PostgresStorage(Storage):
    """PostgreSQL-based storage implementation."""

    def __init__(self, config_file: str = None, db_url: str = None):
        self.config_file = config_file or os.path.expanduser('~/.config/sona/config.json')
        self.db_url = db_url or os.environ.get(
            'DATABASE_URL',
            'postgresql://localhost:5432/sona'
        )
        self._conn = None
        self._initialized = False

    @property
    def conn(self):
        """Lazy connection initialization."""
        if self._conn is None or self._conn.closed:
            self._conn = psycopg2.connect(self.db_url)
            if not self._initialized:
                self._init_db()
                self._initialized = True
        return self._conn

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._conn.cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS user_progress (
                    user_id VARCHAR(255) PRIMARY KEY,
                    level INTEGER NOT NULL DEFAULT 0,
                    current_xp INTEGER NOT NULL DEFAULT 0,
                    session_state JSONB,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS user_words (
                    id SERIAL PRIMARY KEY,
                    user_id VARCHAR(255) NOT NULL,
                    item_key VARCHAR(100) NOT NULL,
                    guessed_correctly INTEGER NOT NULL DEFAULT 0,
                    guessed_wrong INTEGER NOT NULL DEFAULT 0,
                    CONSTRAINT user_word_unique UNIQUE (user_id, item_key)
                )
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS practice_sessions (
                    id SERIAL PRIMARY KEY,
                    user_id VARCHAR(255) NOT NULL,
                    played_at TIMESTAMP NOT NULL,
                    experience_gained INTEGER NOT NULL,
                    words_played INTEGER NOT NULL,
                    words_guessed_correctly INTEGER NOT NULL,
                    time_played INTEGER NOT NULL
                )
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_practice_sessions_user
                ON practice_sessions(user_id)
            """)
        self._conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn and not self._conn.closed:
            self._conn.close()

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            return {}
        with open(self.config_file, 'r') as f:
            return json.load(f)

    def load_history(self, user_id: str) -> list[WordAccuracyRecord]:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT item_key, guessed_correctly, guessed_wrong
                    FROM user_words WHERE user_id = %s ORDER BY id
                """, (user_id,))
                return [
                    WordAccuracyRecord(row['item_key'], row['guessed_correctly'], row['guessed_wrong'])
                    for row in cur.fetchall()
                ]
        except psycopg2.Error as e:
            logger.error(f"Error loading history for {user_id}: {e}")
            return []

    def record_answer(self, user_id: str, item_key: str, correct: bool) -> None:
        column = 'guessed_correctly' if correct else 'guessed_wrong'
        try:
            with self.conn.cursor() as cur:
                cur.execute(f"""
                    INSERT INTO user_words (user_id, item_key, {column})
                    VALUES (%s, %s, 1)
                    ON CONFLICT (user_id, item_key)
                    DO UPDATE SET {column} = user_words.{column} + 1
                """, (user_id, item_key))
            self.conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Error recording answer for {user_id}: {e}")
            self.conn.rollback()
            raise

    def load_progress(self, user_id: str) -> LearnerProgress:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    "SELECT level, current_xp FROM user_progress WHERE user_id = %s",
                    (user_id,)
                )
                row = cur.fetchone()
                if row:
                    return LearnerProgress(row['level'], row['current_xp'])
        except psycopg2.Error as e:
            logger.error(f"Error loading progress for {user_id}: {e}")
        return LearnerProgress()

    def save_progress(self, user_id: str, progress: LearnerProgress) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO user_progress (user_id, level, current_xp, updated_at)
                    VALUES (%s, %s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (user_id)
                    DO UPDATE SET level = EXCLUDED.level, current_xp = EXCLUDED.current_xp,
                                  updated_at = CURRENT_TIMESTAMP
                """, (user_id, progress.level, progress.current_xp))
            self.conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Error saving progress for {user_id}: {e}")
            self.conn.rollback()
            raise

    def load_session_state(self, user_id: str) -> SelectionSessionState | None:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    "SELECT session_state FROM user_progress WHERE user_id = %s",
                    (user_id,)
                )
                row = cur.fetchone()
                if row and row['session_state']:
                    return SelectionSessionState.from_dict(row['session_state'])
        except psycopg2.Error as e:
            logger.error(f"Error loading session state for {user_id}: {e}")
        return None

    def save_session_state(self, user_id: str, state: SelectionSessionState) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO user_progress (user_id, session_state, updated_at)
                    VALUES (%s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (user_id)
                    DO UPDATE SET session_state = EXCLUDED.session_state, updated_at = CURRENT_TIMESTAMP
                """, (user_id, json.dumps(state.to_dict())))
            self.conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Error saving session state for {user_id}: {e}")
            self.conn.rollback()
            raise

    def save_practice_session(self, user_id: str, session: PracticeSession) -> None:
        summary = session.summary()
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO practice_sessions
                        (user_id, played_at, experience_gained, words_played,
                         words_guessed_correctly, time_played)
                    VALUES (%s, to_timestamp(%s), %s, %s, %s, %s)
                """, (user_id, session.started_at, summary['experience_gained'],
                      summary['words_played'], summary['words_guessed_correctly'],
                      summary['time_played']))
            self.conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Error saving practice session for {user_id}: {e}")
            self.conn.rollback()
            raise

    def load_practice_sessions(self, user_id: str) -> list[dict]:
        """Summaries of finished practice sessions, oldest first."""
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT EXTRACT(EPOCH FROM played_at) AS played_at, experience_gained,
                           words_played, words_guessed_correctly, time_played
                    FROM practice_sessions WHERE user_id = %s ORDER BY played_at
                """, (user_id,))
                return [{**row, 'played_at': float(row['played_at'])} for row in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Error loading practice sessions for {user_id}: {e}")
            return []

    def list_users(self) -> list[str]:
        """List all existing user IDs."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    SELECT user_id FROM user_progress
                    UNION SELECT DISTINCT user_id FROM user_words
                    ORDER BY user_id
                """)
                return [row[0] for row in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Error listing users: {e}")
            return []

    def user_exists(self, user_id: str) -> bool:
        """Check if a user exists."""
        return user_id in self.list_users()
