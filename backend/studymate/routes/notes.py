"""AI note and quiz generation routes."""

import asyncio
import logging
import threading
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from studymate.services.auth import CurrentUser, get_current_user
from studymate.services.llm_service.errors import (
    ExhaustedRetriesError,
    GenerationCancelledError,
    GenerationError,
    ResultValidationError,
    TransportError,
)
from studymate.services.note_service import Note, NoteRepository, get_note_repository
from studymate.services.quiz.generator import generate_quiz
from studymate.services.summary.generator import generate_summary
from studymate.services.text_processing.normalizer import normalize_text

logger = logging.getLogger(__name__)
router = APIRouter()

DISCONNECT_POLL_SECONDS = 1.0


class GenerateNoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = None
    summary_length: Optional[str] = Field(default=None, alias="summaryLength")


class GenerateQuizRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    note_id: str = Field(alias="noteId")


def _note_payload(note: Note) -> dict:
    return {
        "id": note.id,
        "userId": note.user_id,
        "title": note.title,
        "content": note.content,
        "summary": note.summary,
        "quizQuestions": note.quiz_questions,
        "createdAt": note.created_at.isoformat(),
    }


def _generation_http_error(exc: GenerationError, invalid_detail: str) -> HTTPException:
    """Map a pipeline failure to the response the client sees."""
    if isinstance(exc, TransportError):
        return HTTPException(status_code=502, detail="AI service unavailable")
    if isinstance(exc, ExhaustedRetriesError):
        return HTTPException(status_code=500, detail="AI returned invalid JSON")
    if isinstance(exc, ResultValidationError):
        return HTTPException(status_code=500, detail=invalid_detail)
    if isinstance(exc, GenerationCancelledError):
        return HTTPException(status_code=503, detail="Generation cancelled")
    return HTTPException(status_code=500, detail="Generation failed")


async def _run_blocking(fn, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(fn, *args, **kwargs))


async def _run_generation(http_request: Request, fn, *args, **kwargs):
    """Run a generation pipeline, cancelling it between attempts if the client goes away."""
    cancel_event = threading.Event()
    work = asyncio.ensure_future(
        _run_blocking(fn, *args, cancel_event=cancel_event, **kwargs)
    )
    while not work.done():
        done, _ = await asyncio.wait({work}, timeout=DISCONNECT_POLL_SECONDS)
        if done or cancel_event.is_set():
            continue
        if await http_request.is_disconnected():
            logger.info("Client disconnected; cancelling generation after the current attempt")
            cancel_event.set()
    return work.result()


@router.post("/generate")
async def generate_note(
    request: GenerateNoteRequest,
    http_request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    notes: NoteRepository = Depends(get_note_repository),
):
    cleaned = normalize_text(request.content)
    if not cleaned:
        raise HTTPException(status_code=400, detail="No text provided")

    try:
        result = await _run_generation(
            http_request, generate_summary, cleaned, request.summary_length
        )
    except GenerationError as e:
        logger.error(f"Summary generation failed: {e}")
        raise _generation_http_error(e, "AI returned an invalid summary")

    note = await notes.create_note(
        user_id=current_user.id,
        title=result.title,
        content=cleaned,
        summary=result.summary,
    )
    return JSONResponse(content=_note_payload(note))


@router.post("/quiz")
async def create_quiz(
    request: GenerateQuizRequest,
    http_request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    notes: NoteRepository = Depends(get_note_repository),
):
    note = await notes.get_note(request.note_id)
    if not note or note.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Note not found")

    try:
        questions = await _run_generation(http_request, generate_quiz, note.summary)
    except GenerationError as e:
        logger.error(f"Quiz generation failed for note {note.id}: {e}")
        raise _generation_http_error(e, "AI returned an invalid question set")

    await notes.set_quiz_questions(note.id, questions)
    return JSONResponse(content={"quizQuestions": questions})
