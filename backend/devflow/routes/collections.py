"""
DevFlow Backend — Collection Routes

    GET  /api/collections                  caller's saved questions (auth)
    POST /api/collections                  toggle save {question_id} (auth)
    GET  /api/collections/{question_id}    is it saved (auth)
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from devflow.routes.envelope import respond, search_params
from devflow.security import get_auth_session
from devflow.services.collection_service import collection_service
from devflow.services.guard import AuthSession

router = APIRouter(prefix="/api/collections", tags=["Collections"])


@router.get("", summary="List saved questions")
async def get_saved_questions(
    params: Dict[str, Any] = Depends(search_params),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    return respond(await collection_service.get_saved_questions(params, session=session))


@router.post("", summary="Save or unsave a question")
async def toggle_save_question(
    body: Dict[str, Any] = Body(...),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    return respond(await collection_service.toggle_save_question(body, session=session))


@router.get("/{question_id}", summary="Is a question saved")
async def has_saved_question(
    question_id: str,
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    params = {"question_id": question_id}
    return respond(await collection_service.has_saved_question(params, session=session))
