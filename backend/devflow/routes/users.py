"""
DevFlow Backend — User Routes
===============================

    GET  /api/users                    all users
    POST /api/users                    create (409 on duplicate email/username)
    GET  /api/users/search             paginated, filterable list
    GET  /api/users/{id}               profile + question/answer totals
    GET  /api/users/{id}/questions     the user's questions
    GET  /api/users/{id}/answers       the user's answers
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from devflow.routes.envelope import respond, search_params
from devflow.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", summary="List all users")
async def list_users():
    return respond(await user_service.list_users())


@router.post("", summary="Create a user", status_code=201)
async def create_user(body: Dict[str, Any] = Body(...)):
    return respond(await user_service.create_user(body))


@router.get("/search", summary="Search users with pagination")
async def get_users(params: Dict[str, Any] = Depends(search_params)):
    return respond(await user_service.get_users(params))


@router.get("/{user_id}", summary="Get a user profile")
async def get_user(user_id: str):
    return respond(await user_service.get_user_by_id({"user_id": user_id}))


@router.get("/{user_id}/questions", summary="List a user's questions")
async def get_user_questions(user_id: str, params: Dict[str, Any] = Depends(search_params)):
    return respond(await user_service.get_user_questions({**params, "user_id": user_id}))


@router.get("/{user_id}/answers", summary="List a user's answers")
async def get_user_answers(user_id: str, params: Dict[str, Any] = Depends(search_params)):
    return respond(await user_service.get_user_answers({**params, "user_id": user_id}))
