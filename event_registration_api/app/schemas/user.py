"""
Pydantic models for user data.

Request fields are deliberately loose (all optional strings): shape
rules such as "name is required" or the minimum password length are
checked by ``UserService`` so that every problem can be reported in a
single 400 response.  The stored password hash is never part of any
response model.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..models import Role


class UserCreate(BaseModel):
    """Schema for registering a user."""

    name: Optional[str] = Field(None, examples=["Jane Doe"])
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    password: Optional[str] = Field(None, examples=["password123"])
    # Defaults to ``attendee`` when omitted.
    role: Optional[str] = Field(None, examples=["attendee"])


class UserLogin(BaseModel):
    email: Optional[str] = Field(None, examples=["jane@example.com"])
    password: Optional[str] = Field(None, examples=["password123"])


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: str
    name: str
    email: str
    role: Role

    model_config = {
        "from_attributes": True,
    }


class AuthResponse(BaseModel):
    """Returned by both registration and login."""

    message: str
    user: UserRead
    token: str
