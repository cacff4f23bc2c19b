"""
DevFlow Backend — API Client
==============================

What:  Typed-ish wrapper over the users and accounts HTTP endpoints, built
       on `fetch_handler`.
Who:   Other services and scripts that talk to a running DevFlow API; tests
       point it at the app through `httpx.ASGITransport`.

Usage:
    client = ApiClient("http://localhost:8000/api")
    result = await client.users.create({"name": "Ada", ...})
    if result.success:
        print(result.data["id"])
"""

import uuid
from typing import Any, Dict, Mapping, Optional

import httpx

from devflow.config import settings
from devflow.schemas.common import ActionResponse
from devflow.services.fetch import fetch_handler


class _Resource:
    def __init__(self, client: "ApiClient", path: str):
        self._client = client
        self._path = path

    async def get_all(self) -> ActionResponse:
        return await self._client.request(self._path)

    async def create(self, data: Mapping[str, Any]) -> ActionResponse:
        return await self._client.request(self._path, "POST", json=dict(data))


class _Users(_Resource):
    async def get_by_id(self, user_id: uuid.UUID) -> ActionResponse:
        """Profile envelope: data is {user, total_questions, total_answers}."""
        return await self._client.request(f"{self._path}/{user_id}")


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport
        self.users = _Users(self, "/users")
        self.accounts = _Resource(self, "/accounts")

    async def request(
        self, path: str, method: str = "GET", *, json: Any = None
    ) -> ActionResponse:
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return await fetch_handler(
            f"{self.base_url}{path}",
            method,
            json=json,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )
