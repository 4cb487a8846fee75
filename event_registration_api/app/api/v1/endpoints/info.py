"""
Information endpoint for API v1.

Returns the service name and version.  It requires no authentication
and doubles as a health check.
"""

from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_info(request: Request) -> Dict[str, Any]:
    settings = request.app.state.settings
    return {"message": settings.project_name, "version": settings.api_version}
