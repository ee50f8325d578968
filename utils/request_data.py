from flask import request

from utils.errors import ApiError, ErrorType


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def is_valid_email(email) -> bool:
    return isinstance(email, str) and "@" in email and len(email) <= 255


def require_fields(data: dict, *names: str) -> list:
    """Returns the named string fields in order, or raises VALIDATION listing the missing ones."""
    missing = [n for n in names if not isinstance(data.get(n), str) or not data.get(n)]
    if missing:
        raise ApiError(ErrorType.VALIDATION, "Missing or invalid fields", fields=missing)
    return [data[n] for n in names]


def require_email(email: str) -> str:
    email = email.strip()
    if not is_valid_email(email):
        raise ApiError(ErrorType.VALIDATION, "Invalid email", fields=["email"])
    return email


def int_arg(name: str):
    """Positive integer query argument, or None when absent or unusable."""
    value = request.args.get(name, type=int)
    return value if value and value > 0 else None
