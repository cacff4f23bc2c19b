"""
DevFlow Backend — Vote Routes

    POST /api/votes           cast / toggle off / switch (auth)
    GET  /api/votes/status    caller's vote on a target (auth)
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from devflow.routes.envelope import compact, respond
from devflow.security import get_auth_session
from devflow.services.guard import AuthSession
from devflow.services.vote_service import vote_service

router = APIRouter(prefix="/api/votes", tags=["Votes"])


@router.post("", summary="Vote on a question or answer")
async def create_vote(
    body: Dict[str, Any] = Body(...),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    return respond(await vote_service.create_vote(body, session=session))


@router.get("/status", summary="Has the caller voted on a target")
async def has_voted(
    target_id: Optional[str] = Query(default=None),
    target_type: Optional[str] = Query(default=None),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    params = compact(target_id=target_id, target_type=target_type)
    return respond(await vote_service.has_voted(params, session=session))
