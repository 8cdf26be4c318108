"""FastAPI server for sona application."""

import logging
import os
import random
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

from core.config import EngineConfig, LANGUAGE
from core.errors import InvalidArgument, NoCandidateAvailable
from core.interfaces import ItemSource, Storage
from core.models import Item, LearnerProgress, PracticeSession, SelectionSessionState, WordAccuracyRecord
from core.progression import record_answer, score_answer
from core.selection import known_item_keys, select
from core.struggle import report, with_translations

from server.csv_item_source import CsvItemSource
from server.file_storage import FileStorage
from server.postgres_storage import PostgresStorage

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_WORDS_FILE = PROJECT_ROOT / "data" / "words.csv"


# Pydantic models for API
class AnswerRequest(BaseModel):
    item_key: str
    answer: str
    user_id: str = "default"


class EndSessionRequest(BaseModel):
    user_id: str = "default"


class StatusResponse(BaseModel):
    language: str
    level: int
    current_xp: int
    xp_required: int
    progress_display: str
    words_seen: int
    struggled_words_count: int
    session: dict  # {words_played, words_guessed_correctly, experience_gained, time_played}


class NextWordResponse(BaseModel):
    item_key: str
    difficulty: int
    choices: list[str]
    reason: str  # 'eased', 'struggled' or 'new'
    progress_display: str
    skipped_previous: bool


class AnswerResponse(BaseModel):
    correct: bool
    correct_translation: str
    xp_delta: int
    level: int
    current_xp: int
    xp_required: int
    level_changed: bool


class SessionSummaryResponse(BaseModel):
    words_played: int
    words_guessed_correctly: int
    experience_gained: int
    time_played: int


class DrillSession:
    """Server-side state for one learner's sitting."""

    def __init__(self, selection_state: SelectionSessionState = None):
        self.selection_state = selection_state or SelectionSessionState()
        self.practice = PracticeSession()
        self.pending_item: Optional[Item] = None


# Global state (in production, use proper DI)
storage: Storage = None
item_source: ItemSource = None
engine_config: EngineConfig = EngineConfig()
rng = random.Random()
user_histories: dict[str, list[WordAccuracyRecord]] = {}
user_progress: dict[str, LearnerProgress] = {}
drill_sessions: dict[str, DrillSession] = {}


app = FastAPI(title="Sona API", description="Adaptive vocabulary drill API")


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NoCandidateAvailable)
async def no_candidate_handler(request: Request, exc: NoCandidateAvailable):
    logger.warning(f"No candidate available: {exc}")
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def load_engine_config(file_config: dict) -> EngineConfig:
    """Build engine options from the config file, overridden by environment variables."""
    merged = dict(file_config)
    if os.environ.get('SONA_STRUGGLE_BARRIER'):
        merged['struggle_barrier'] = os.environ['SONA_STRUGGLE_BARRIER']
    if os.environ.get('SONA_LESS_STRUGGLE_WORD_INTERVAL'):
        merged['less_struggle_word_interval'] = os.environ['SONA_LESS_STRUGGLE_WORD_INTERVAL']
    return EngineConfig.from_dict(merged)


def get_history(user_id: str = "default") -> list[WordAccuracyRecord]:
    """Get or load the word history for a user."""
    if user_id not in user_histories:
        user_histories[user_id] = storage.load_history(user_id)
    return user_histories[user_id]


def get_progress(user_id: str = "default") -> LearnerProgress:
    """Get or load level/XP for a user."""
    if user_id not in user_progress:
        user_progress[user_id] = storage.load_progress(user_id)
    return user_progress[user_id]


def get_session(user_id: str = "default") -> DrillSession:
    """Get or start the drill session for a user."""
    if user_id not in drill_sessions:
        drill_sessions[user_id] = DrillSession(storage.load_session_state(user_id))
        logger.info(f"Started practice session for {user_id}")
    return drill_sessions[user_id]


def apply_answer(user_id: str, item: Item, correct: bool) -> tuple[LearnerProgress, LearnerProgress, int]:
    """Score an answer, update caches and persist. Returns (before, after, xp_delta)."""
    session = get_session(user_id)
    before = get_progress(user_id)
    after, xp_delta = score_answer(before, correct, item.difficulty, engine_config)

    record_answer(get_history(user_id), item.item_key, correct)
    user_progress[user_id] = after
    session.practice.record(correct, xp_delta)
    session.pending_item = None

    storage.record_answer(user_id, item.item_key, correct)
    storage.save_progress(user_id, after)
    return before, after, xp_delta


def is_correct_answer(item: Item, answer: str) -> bool:
    """Accept the full translation (as offered in choices) or any comma-separated part of it."""
    expected = {alt.strip().lower() for alt in item.translation.split(',') if alt.strip()}
    expected.add(item.translation.strip().lower())
    return answer.strip().lower() in expected


@app.on_event("startup")
async def startup():
    """Initialize storage, the word list and engine options on startup."""
    global storage, item_source, engine_config

    # Use PostgreSQL by default, set SONA_STORAGE=file to use file storage
    storage_type = os.environ.get('SONA_STORAGE', 'postgres')
    if storage_type == 'file':
        storage = FileStorage()
        logger.info("Using file storage")
    else:
        storage = PostgresStorage()
        logger.info("Using PostgreSQL storage")

    engine_config = load_engine_config(storage.load_config())

    words_file = os.environ.get('SONA_WORDS_FILE', str(DEFAULT_WORDS_FILE))
    item_source = CsvItemSource(words_file, distractor_count=engine_config.distractor_count)
    logger.info(f"Engine options: {engine_config.to_dict()}")


@app.get("/")
async def root():
    """Health check."""
    return {"service": "sona", "status": "ok"}


@app.get("/api/users")
async def list_users():
    """List all existing users."""
    users = [u for u in storage.list_users() if u != 'default']
    return {"users": users}


@app.get("/api/status", response_model=StatusResponse)
async def get_status(user_id: str = "default"):
    """Get level, XP and the current session tally."""
    history = get_history(user_id)
    progress = get_progress(user_id)
    session = get_session(user_id)

    return StatusResponse(
        language=LANGUAGE,
        level=progress.level,
        current_xp=progress.current_xp,
        xp_required=progress.xp_required,
        progress_display=progress.get_progress_display(),
        words_seen=len(history),
        struggled_words_count=len(report(history, engine_config.struggle_barrier)),
        session=session.practice.summary()
    )


@app.get("/api/next", response_model=NextWordResponse)
async def get_next_word(user_id: str = "default"):
    """Select the next word. A word left unanswered counts as a wrong answer."""
    session = get_session(user_id)

    skipped_previous = False
    if session.pending_item is not None:
        logger.info(f"Unanswered word {session.pending_item.item_key} for {user_id}, counting it as wrong")
        apply_answer(user_id, session.pending_item, False)
        skipped_previous = True

    history = get_history(user_id)
    selection = select(history, session.selection_state, known_item_keys(history),
                       item_source, engine_config, rng)
    storage.save_session_state(user_id, session.selection_state)
    session.pending_item = selection.chosen

    choices = [selection.chosen.translation] + [item.translation for item in selection.distractors]
    rng.shuffle(choices)

    return NextWordResponse(
        item_key=selection.chosen_key,
        difficulty=selection.chosen.difficulty,
        choices=choices,
        reason=selection.reason,
        progress_display=get_progress(user_id).get_progress_display(),
        skipped_previous=skipped_previous
    )


@app.post("/api/answer", response_model=AnswerResponse)
async def submit_answer(request: AnswerRequest):
    """Judge an answer for the pending word and update progress."""
    session = get_session(request.user_id)
    item = session.pending_item
    if item is None:
        raise HTTPException(status_code=400, detail="No word waiting for an answer")
    if item.item_key != request.item_key:
        raise HTTPException(status_code=400, detail="Word mismatch")

    correct = is_correct_answer(item, request.answer)
    before, after, xp_delta = apply_answer(request.user_id, item, correct)
    logger.info(f"{request.user_id} answered {item.item_key}: correct={correct}, xp {xp_delta:+d}")

    return AnswerResponse(
        correct=correct,
        correct_translation=item.translation,
        xp_delta=xp_delta,
        level=after.level,
        current_xp=after.current_xp,
        xp_required=after.xp_required,
        level_changed=after.level != before.level
    )


@app.get("/api/struggles")
async def get_struggles(user_id: str = "default"):
    """Get the words the user struggles with most, worst first."""
    rows = report(get_history(user_id), engine_config.struggle_barrier)
    rows = with_translations(rows, item_source)

    return {
        "total": len(rows),
        "words": [row.to_dict() for row in rows]
    }


@app.post("/api/session/end", response_model=SessionSummaryResponse)
async def end_session(request: EndSessionRequest):
    """Close the user's practice session and store its tally."""
    session = drill_sessions.pop(request.user_id, None)
    if session is None:
        raise HTTPException(status_code=400, detail="No active session")

    summary = session.practice.summary()
    storage.save_practice_session(request.user_id, session.practice)
    logger.info(f"Ended practice session for {request.user_id}: {summary}")
    return SessionSummaryResponse(**summary)


@app.get("/api/sessions")
async def get_sessions(user_id: str = "default"):
    """Get finished practice sessions with running totals."""
    if not hasattr(storage, 'load_practice_sessions'):
        return {"error": "Session history not available with current storage"}
    if not storage.user_exists(user_id):
        raise HTTPException(status_code=404, detail=f"Unknown user: {user_id}")

    sessions = storage.load_practice_sessions(user_id)
    return {
        "sessions": sessions,
        "total_words_played": sum(s['words_played'] for s in sessions),
        "total_words_guessed_correctly": sum(s['words_guessed_correctly'] for s in sessions),
        "total_experience_gained": sum(s['experience_gained'] for s in sessions)
    }


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app
