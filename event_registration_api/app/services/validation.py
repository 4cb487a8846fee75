"""
Input shape validation.

Each validator returns the list of problems it found (an empty list
means the input is valid) so services can report all of them at once
through a single ``ValidationError``.
"""

import re
from typing import Any, Dict, List, Optional

from ..models import Role

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

EVENT_TEXT_FIELDS = ("title", "description", "date", "time", "location")


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_registration(
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: Optional[str],
    password_min_length: int = 6,
) -> List[str]:
    errors: List[str] = []

    if _is_blank(name):
        errors.append("Name is required")

    if _is_blank(email):
        errors.append("Email is required")
    elif not EMAIL_RE.match(email.strip()):
        errors.append("Invalid email format")

    if not isinstance(password, str) or not password:
        errors.append("Password is required")
    elif len(password) < password_min_length:
        errors.append(f"Password must be at least {password_min_length} characters")

    if role is not None and role not in Role.values():
        errors.append("Role must be either 'organizer' or 'attendee'")

    return errors


def validate_capacity(capacity: Any) -> List[str]:
    # bool is an int subclass; reject it explicitly.
    if capacity is None:
        return []
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        return ["Capacity must be a positive integer"]
    return []


def validate_event(data: Dict[str, Any]) -> List[str]:
    """Validate the fields of a new event."""
    errors = [f"{field.capitalize()} is required" for field in EVENT_TEXT_FIELDS if _is_blank(data.get(field))]
    errors.extend(validate_capacity(data.get("capacity")))
    return errors


def validate_event_patch(patch: Dict[str, Any]) -> List[str]:
    """Validate a partial update.

    Only the fields present in ``patch`` are checked.  ``None`` for a
    text field means "leave unchanged", while ``None`` for capacity
    means "make unlimited"; both are valid.
    """
    errors = [
        f"{field.capitalize()} must not be empty"
        for field in EVENT_TEXT_FIELDS
        if patch.get(field) is not None and _is_blank(patch[field])
    ]
    if "capacity" in patch:
        errors.extend(validate_capacity(patch["capacity"]))
    return errors
