"""
Authentication endpoints for API v1.

``POST /register`` creates an account and ``POST /login`` checks
credentials.  Both return the user together with a freshly signed
bearer token, so a client can start calling the event endpoints right
away.

The handlers are plain ``def`` functions: PBKDF2 hashing is CPU bound,
so FastAPI runs them in its threadpool instead of on the event loop.
"""

from fastapi import APIRouter, Depends, Request, status

from event_registration_api.app.api.deps import get_services
from event_registration_api.app.core.security import create_access_token
from event_registration_api.app.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead
from event_registration_api.app.services.container import ServiceContainer

router = APIRouter()


def _issue_token(request: Request, user: UserRead) -> str:
    settings = request.app.state.settings
    return create_access_token(
        {"sub": user.id, "email": user.email, "role": user.role.value},
        expires_delta=settings.access_token_expire_minutes * 60,
        secret_key=settings.secret_key,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user: UserCreate,
    request: Request,
    services: ServiceContainer = Depends(get_services),
) -> AuthResponse:
    """Register a new user.

    Returns 400 listing every validation problem, or 409 if the email
    is already taken.  The role defaults to ``attendee``.
    """
    created = services.users.create_user(user)
    return AuthResponse(
        message="User registered successfully",
        user=created,
        token=_issue_token(request, created),
    )


@router.post("/login", response_model=AuthResponse)
def login_user(
    credentials: UserLogin,
    request: Request,
    services: ServiceContainer = Depends(get_services),
) -> AuthResponse:
    """Authenticate a user by email and password and return a token."""
    user = services.users.authenticate(credentials.email, credentials.password)
    return AuthResponse(
        message="Login successful",
        user=user,
        token=_issue_token(request, user),
    )
