"""
DevFlow Backend — Tag Routes

    GET /api/tags                   paginated (filters: popular, recent, oldest, name)
    GET /api/tags/top               five most used tags
    GET /api/tags/{id}/questions    questions under a tag
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from devflow.routes.envelope import respond, search_params
from devflow.services.tag_service import tag_service

router = APIRouter(prefix="/api/tags", tags=["Tags"])


@router.get("", summary="List tags")
async def get_tags(params: Dict[str, Any] = Depends(search_params)):
    return respond(await tag_service.get_tags(params))


@router.get("/top", summary="Most used tags")
async def get_top_tags():
    return respond(await tag_service.get_top_tags())


@router.get("/{tag_id}/questions", summary="Questions with a tag")
async def get_tag_questions(tag_id: str, params: Dict[str, Any] = Depends(search_params)):
    return respond(await tag_service.get_tag_questions({**params, "tag_id": tag_id}))
