"""
DevFlow Backend — Credential Auth Routes

    POST /api/auth/sign-up    register + credentials account, returns token
    POST /api/auth/sign-in    verify password, returns token
"""

from typing import Any, Dict

from fastapi import APIRouter, Body

from devflow.routes.envelope import respond
from devflow.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/sign-up", summary="Sign up with email and password", status_code=201)
async def sign_up(body: Dict[str, Any] = Body(...)):
    return respond(await auth_service.sign_up_with_credentials(body))


@router.post("/sign-in", summary="Sign in with email and password")
async def sign_in(body: Dict[str, Any] = Body(...)):
    return respond(await auth_service.sign_in_with_credentials(body))
