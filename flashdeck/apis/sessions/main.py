from __future__ import annotations

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from flashdeck.core.config import settings
from flashdeck.apis.deps import get_session_manager
from flashdeck.apis.sessions.schemas import (
    CreateSessionRequest,
    JudgeRequest,
    SessionStateResponse,
)
from flashdeck.modules.study.manager import SessionManager
from flashdeck.modules.study.models import SessionSummary


router = APIRouter()

Manager = Annotated[SessionManager, Depends(get_session_manager)]

_ERRORS = {
    "session_not_found": (404, "Session not found"),
    "level_required": (422, "level is required for generated sessions"),
    "session_in_progress": (409, "Session is still in progress"),
    "no_more_blocks": (409, "No more blocks in this word list"),
    "not_paginated": (409, "Session is not paginated"),
    "nothing_to_review": (409, "Session has no unknown words"),
    "custom_level_not_generated": (400, "Custom words are not generated"),
    "custom_category_not_generated": (400, "Custom words are not generated"),
}


def _raise_for(e: ValueError) -> NoReturn:
    code = str(e)
    if code in _ERRORS:
        http_status, detail = _ERRORS[code]
        raise HTTPException(status_code=http_status, detail=detail)
    raise e


@router.post(
    f"/{settings.app.version}/sessions",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["sessions"],
)
async def create_session(
    req: CreateSessionRequest, manager: Manager
) -> SessionStateResponse:
    try:
        session = await manager.create_session(
            mode=req.mode,
            language=req.language,
            direction=req.direction,
            level=req.level,
            category=req.category,
        )
    except ValueError as e:
        _raise_for(e)
    return SessionStateResponse(state=session.to_state())


@router.get(
    f"/{settings.app.version}/sessions",
    response_model=list[SessionSummary],
    tags=["sessions"],
)
async def list_sessions(manager: Manager) -> list[SessionSummary]:
    return [s.to_summary() for s in manager.list_sessions()]


@router.get(
    f"/{settings.app.version}/sessions/{{session_id}}",
    response_model=SessionStateResponse,
    tags=["sessions"],
)
async def get_session_state(session_id: str, manager: Manager) -> SessionStateResponse:
    try:
        session = manager.get_session(session_id)
    except ValueError as e:
        _raise_for(e)
    return SessionStateResponse(state=session.to_state())


@router.post(
    f"/{settings.app.version}/sessions/{{session_id}}/judge",
    response_model=SessionStateResponse,
    tags=["sessions"],
)
async def judge(
    session_id: str, req: JudgeRequest, manager: Manager
) -> SessionStateResponse:
    try:
        session = manager.judge(session_id, known=req.known)
    except ValueError as e:
        _raise_for(e)
    return SessionStateResponse(state=session.to_state())


@router.post(
    f"/{settings.app.version}/sessions/{{session_id}}/flip",
    response_model=SessionStateResponse,
    tags=["sessions"],
)
async def flip(session_id: str, manager: Manager) -> SessionStateResponse:
    try:
        session = manager.flip(session_id)
    except ValueError as e:
        _raise_for(e)
    return SessionStateResponse(state=session.to_state())


@router.post(
    f"/{settings.app.version}/sessions/{{session_id}}/next-block",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["sessions"],
)
async def next_block(session_id: str, manager: Manager) -> SessionStateResponse:
    try:
        session = manager.next_block(session_id)
    except ValueError as e:
        _raise_for(e)
    return SessionStateResponse(state=session.to_state())


@router.post(
    f"/{settings.app.version}/sessions/{{session_id}}/review",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["sessions"],
)
async def review_unknown(session_id: str, manager: Manager) -> SessionStateResponse:
    try:
        session = manager.review_unknown(session_id)
    except ValueError as e:
        _raise_for(e)
    return SessionStateResponse(state=session.to_state())


@router.delete(
    f"/{settings.app.version}/sessions/{{session_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["sessions"],
)
async def close_session(session_id: str, manager: Manager) -> None:
    try:
        manager.close_session(session_id)
    except ValueError as e:
        _raise_for(e)
