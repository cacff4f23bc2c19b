"""
DevFlow Backend — Account Routes

    GET  /api/accounts     all accounts (password hashes never included)
    POST /api/accounts     link a provider account (409 on duplicate pair)
"""

from typing import Any, Dict

from fastapi import APIRouter, Body

from devflow.routes.envelope import respond
from devflow.services.account_service import account_service

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", summary="List all accounts")
async def list_accounts():
    return respond(await account_service.list_accounts())


@router.post("", summary="Create an account", status_code=201)
async def create_account(body: Dict[str, Any] = Body(...)):
    return respond(await account_service.create_account(body))
