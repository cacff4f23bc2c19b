"""
DevFlow Backend — Interaction & Search Routes

    POST /api/interactions    record an activity (auth)
    GET  /api/search          global search {query, type?}
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from devflow.routes.envelope import compact, respond
from devflow.security import get_auth_session
from devflow.services.guard import AuthSession
from devflow.services.interaction_service import interaction_service
from devflow.services.search_service import search_service

router = APIRouter(prefix="/api", tags=["Interactions"])


@router.post("/interactions", summary="Record an interaction", status_code=201)
async def create_interaction(
    body: Dict[str, Any] = Body(...),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    return respond(await interaction_service.create_interaction(body, session=session))


@router.get("/search", summary="Search questions, answers, users and tags")
async def global_search(
    query: Optional[str] = Query(default=None),
    type: Optional[str] = Query(default=None),
):
    return respond(await search_service.global_search(compact(query=query, type=type)))
