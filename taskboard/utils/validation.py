"""Normalize-or-reject checks for request bodies.

Each ``validate_*`` function takes the decoded JSON body and either
returns clean values or raises ``ValidationError`` with a message that
is safe to show the user.
"""
import re
from datetime import datetime, timezone

from taskboard.errors import ValidationError
from taskboard.models.task_model import PRIORITIES, STATUSES, UNSET, TaskPayload


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 8


def validate_task_payload(data):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be an object.")

    return TaskPayload(
        title=_required_string(data.get("title"), "title"),
        description=_required_string(data.get("description"), "description"),
        status=_choice(data.get("status"), "status", STATUSES),
        priority=_choice(data.get("priority"), "priority", PRIORITIES),
        due_date=_optional_date(data["dueDate"]) if "dueDate" in data else UNSET,
    )


def validate_signup_payload(data):
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")

    username = data.get("username")
    email = data.get("email")
    password = data.get("password")

    if not username or not isinstance(username, str):
        raise ValidationError("Username is required")
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    username = username.strip()
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
        )

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email address")

    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")

    return {"username": username, "email": email, "password": password}


def validate_login_payload(data):
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")

    identifier = data.get("identifier")
    password = data.get("password")

    if not identifier or not isinstance(identifier, str):
        raise ValidationError("Email or username is required")
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    return {"identifier": identifier.strip(), "password": password}


def parse_date(value):
    """Parse an ISO-8601 date or datetime string into an aware UTC datetime.

    Returns None when the string is not a recognisable date, or when the
    UTC instant falls outside the representable years 1-9999. Naive values
    are taken as UTC and the result is truncated to milliseconds.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        else:
            parsed = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None
    return parsed.replace(microsecond=parsed.microsecond // 1000 * 1000)


def _required_string(value, field_name):
    if not isinstance(value, str):
        raise ValidationError(f'Field "{field_name}" must be a string.')
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f'Field "{field_name}" is required.')
    return trimmed


def _choice(value, field_name, allowed):
    if not isinstance(value, str) or value not in allowed:
        raise ValidationError(f'Field "{field_name}" must be one of: {", ".join(allowed)}.')
    return value


def _optional_date(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError('Field "dueDate" must be a date string.')
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError('Field "dueDate" must be a valid date.')
    return parsed
