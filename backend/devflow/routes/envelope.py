"""
DevFlow Backend — Route Helpers
=================================

What:  Turn an ActionResponse into an HTTP response, and gather the shared
       pagination query parameters into the raw params dict an action
       expects.
Why:   Routes stay thin: collect raw input, call the action, respond. All
       validation happens in the Action Guard, not in FastAPI signatures.
"""

from typing import Any, Dict, Optional

from fastapi import Query
from fastapi.responses import JSONResponse

from devflow.schemas.common import ActionResponse


def respond(result: ActionResponse) -> JSONResponse:
    """
    Render the envelope with the status the action chose.

        success → {"success": true, "data": ...}
        failure → {"success": false, "error": {"kind", "message", "details"?}}
    """
    if result.success:
        content = {"success": True, "data": result.model_dump(mode="json")["data"]}
    else:
        content = {
            "success": False,
            "error": result.error.model_dump(mode="json", exclude_none=True),
        }
    return JSONResponse(status_code=result.status, content=content)


def compact(**values: Any) -> Dict[str, Any]:
    """Drop unset values so action defaults apply."""
    return {key: value for key, value in values.items() if value is not None}


async def search_params(
    page: Optional[int] = Query(default=None, description="Page number (1-based)"),
    page_size: Optional[int] = Query(default=None, description="Items per page"),
    query: Optional[str] = Query(default=None, description="Search text"),
    filter: Optional[str] = Query(default=None, description="Sort filter name"),
) -> Dict[str, Any]:
    """Dependency: pagination query string → raw params dict."""
    return compact(page=page, page_size=page_size, query=query, filter=filter)
