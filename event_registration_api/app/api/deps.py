"""
FastAPI dependencies giving endpoints access to the service container.
"""

from fastapi import Request

from ..services.container import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services
