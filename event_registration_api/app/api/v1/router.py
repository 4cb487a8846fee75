"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.  The
auth router exposes ``/register`` and ``/login`` at the root of the
version, matching the public URL scheme of the platform.
"""

from fastapi import APIRouter

from .endpoints import auth, events, info

router = APIRouter()

router.include_router(info.router, tags=["info"])
router.include_router(auth.router, tags=["auth"])
router.include_router(events.router, prefix="/events", tags=["events"])
