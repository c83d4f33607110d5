"""Note persistence.

Generation never touches storage; routes hand accepted results to a
``NoteRepository``.  The in-memory repository is what the service runs with
out of the box; a database-backed one only has to implement the protocol.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Note(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str
    title: str
    content: str
    summary: str
    quiz_questions: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NoteRepository(Protocol):
    async def create_note(self, user_id: str, title: str, content: str, summary: str) -> Note:
        ...

    async def get_note(self, note_id: str) -> Optional[Note]:
        ...

    async def set_quiz_questions(self, note_id: str, questions: List[Dict[str, Any]]) -> Optional[Note]:
        ...


class InMemoryNoteRepository:
    def __init__(self):
        self._notes: Dict[str, Note] = {}
        self._lock = asyncio.Lock()

    async def create_note(self, user_id: str, title: str, content: str, summary: str) -> Note:
        note = Note(user_id=str(user_id), title=title, content=content, summary=summary)
        async with self._lock:
            self._notes[note.id] = note
        logger.info(f"Created note: {note.id} for user: {user_id}")
        return note

    async def get_note(self, note_id: str) -> Optional[Note]:
        note = self._notes.get(str(note_id))
        return note.model_copy(deep=True) if note else None

    async def set_quiz_questions(self, note_id: str, questions: List[Dict[str, Any]]) -> Optional[Note]:
        async with self._lock:
            note = self._notes.get(str(note_id))
            if note is None:
                return None
            note = note.model_copy(update={"quiz_questions": list(questions)})
            self._notes[note.id] = note
        logger.info(f"Stored {len(questions)} quiz questions on note: {note_id}")
        return note


_repository = InMemoryNoteRepository()


def get_note_repository() -> NoteRepository:
    """FastAPI dependency returning the process-wide repository."""
    return _repository
