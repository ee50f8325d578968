import secrets
from functools import lru_cache

import bcrypt
from flask import current_app


# bcrypt only reads the first 72 bytes; newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72


def password_too_long(plain_password: str) -> bool:
    return len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _rounds() -> int:
    return int(current_app.config.get("BCRYPT_ROUNDS", 12))


def hash_password(plain_password: str, rounds: int = None) -> str:
    if not isinstance(plain_password, str) or len(plain_password) == 0:
        raise ValueError("Password must be a non-empty string")
    if password_too_long(plain_password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    # bcrypt expects bytes
    salt = bcrypt.gensalt(rounds=rounds or _rounds())
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


@lru_cache(maxsize=None)
def _filler_hash(rounds: int) -> str:
    return hash_password(secrets.token_urlsafe(32), rounds=rounds)


def filler_hash() -> str:
    """
    A real bcrypt hash of a throwaway secret at the configured cost, so a
    check against it takes as long as a check against a stored password.
    Nothing can match it.
    """
    return _filler_hash(_rounds())


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Constant-time bcrypt comparison; malformed input counts as a mismatch."""
    if not isinstance(plain_password, str) or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8")
        )
    except ValueError:
        return False
