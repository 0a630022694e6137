"""AI Reporter interview endpoints."""

import json
from typing import Any

from fastapi import APIRouter, Depends, Header, Request, status

from ..errors import Unauthorized
from ..interview.service import InterviewService

router = APIRouter(prefix="/interviews", tags=["Interviews"])


def get_service(request: Request) -> InterviewService:
    return request.app.state.service


async def get_caller_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity placed on the request by the upstream auth layer."""
    if not x_user_id or not x_user_id.strip():
        raise Unauthorized("Unauthorized")
    return x_user_id.strip()


async def _json_body(request: Request) -> dict[str, Any] | None:
    """Parse the body leniently: empty, invalid or non-object JSON is None."""
    raw = await request.body()
    if not raw:
        return None
    try:
        body = json.loads(raw)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


@router.post("", status_code=status.HTTP_201_CREATED)
async def start_interview(
    request: Request,
    user_id: str = Depends(get_caller_id),
    service: InterviewService = Depends(get_service),
):
    """Start a new interview. Body ``{"type"?, "language"?}`` is optional."""
    body = await _json_body(request) or {}
    session = await service.start_interview(
        user_id,
        interview_type=body.get("type"),
        language=body.get("language"),
    )
    return {"session": session.to_record()}


@router.post("/{session_id}/messages")
async def send_message(
    session_id: str,
    request: Request,
    user_id: str = Depends(get_caller_id),
    service: InterviewService = Depends(get_service),
):
    body = await _json_body(request) or {}
    message = body.get("message")
    session = await service.send_message(
        session_id,
        user_id,
        message if isinstance(message, str) else None,
    )
    return {"session": session.to_record()}


@router.get("/{session_id}")
async def get_interview(
    session_id: str,
    user_id: str = Depends(get_caller_id),
    service: InterviewService = Depends(get_service),
):
    session = await service.get_interview(session_id, user_id)
    return {"session": session.to_record()}


@router.delete("/{session_id}")
async def cancel_interview(
    session_id: str,
    user_id: str = Depends(get_caller_id),
    service: InterviewService = Depends(get_service),
):
    session = await service.cancel_interview(session_id, user_id)
    return {"session": session.to_record()}
