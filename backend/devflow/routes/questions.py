"""
DevFlow Backend — Question & Answer Routes
============================================

    GET  /api/questions                     paginated list (query, filter)
    POST /api/questions                     ask (auth)
    GET  /api/questions/hot                 top 5 by views, then upvotes
    GET  /api/questions/{id}                detail
    PUT  /api/questions/{id}                edit (auth, author only)
    POST /api/questions/{id}/views          count a view
    GET  /api/questions/{id}/answers        paginated answers
    POST /api/questions/{id}/answers        answer (auth)

Authorized routes read `Authorization: Bearer <token>`; a missing or bad
token reaches the action as "no session" and comes back as 401.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from devflow.routes.envelope import respond, search_params
from devflow.security import get_auth_session
from devflow.services.answer_service import answer_service
from devflow.services.guard import AuthSession
from devflow.services.question_service import question_service

router = APIRouter(prefix="/api/questions", tags=["Questions"])


@router.get("", summary="List questions")
async def get_questions(params: Dict[str, Any] = Depends(search_params)):
    return respond(await question_service.get_questions(params))


@router.post("", summary="Ask a question", status_code=201)
async def create_question(
    body: Dict[str, Any] = Body(...),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    return respond(await question_service.create_question(body, session=session))


@router.get("/hot", summary="Hot questions")
async def get_hot_questions():
    return respond(await question_service.get_hot_questions())


@router.get("/{question_id}", summary="Get a question")
async def get_question(question_id: str):
    return respond(await question_service.get_question({"question_id": question_id}))


@router.put("/{question_id}", summary="Edit a question")
async def edit_question(
    question_id: str,
    body: Dict[str, Any] = Body(...),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    params = {**body, "question_id": question_id}
    return respond(await question_service.edit_question(params, session=session))


@router.post("/{question_id}/views", summary="Count a view")
async def increment_views(question_id: str):
    return respond(await question_service.increment_views({"question_id": question_id}))


@router.get("/{question_id}/answers", summary="List answers to a question")
async def get_answers(question_id: str, params: Dict[str, Any] = Depends(search_params)):
    return respond(await answer_service.get_answers({**params, "question_id": question_id}))


@router.post("/{question_id}/answers", summary="Answer a question", status_code=201)
async def create_answer(
    question_id: str,
    body: Dict[str, Any] = Body(...),
    session: Optional[AuthSession] = Depends(get_auth_session),
):
    params = {**body, "question_id": question_id}
    return respond(await answer_service.create_answer(params, session=session))
