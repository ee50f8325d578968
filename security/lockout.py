from datetime import datetime, timedelta
from enum import Enum

from flask import current_app


class LoginState(Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"
    EXPIRED_LOCK = "expired_lock"


def threshold() -> int:
    return int(current_app.config.get("MAX_LOGIN_ATTEMPTS", 5))


def window_seconds() -> int:
    return int(current_app.config.get("LOCKOUT_WINDOW_SECONDS", 1800))


def lockout_message() -> str:
    seconds = window_seconds()
    if seconds % 60 == 0:
        minutes = seconds // 60
        span = f"{minutes} minute" + ("" if minutes == 1 else "s")
    else:
        span = f"{seconds} second" + ("" if seconds == 1 else "s")
    return f"Too many failed login attempts, wait {span} before trying again"


def lockout_expiry(user):
    if user.updated_on is None:
        return None
    return user.updated_on + timedelta(seconds=window_seconds())


def evaluate(user, now: datetime = None) -> LoginState:
    """
    UNLOCKED while attempt <= threshold. Past the threshold the account is
    LOCKED until updated_on + window, then EXPIRED_LOCK.
    """
    if user is None or (user.attempt or 0) <= threshold():
        return LoginState.UNLOCKED

    expiry = lockout_expiry(user)
    now = now or datetime.utcnow()
    if expiry is not None and now < expiry:
        return LoginState.LOCKED
    return LoginState.EXPIRED_LOCK


def seconds_remaining(user, now: datetime = None) -> int:
    expiry = lockout_expiry(user)
    if expiry is None:
        return 0
    now = now or datetime.utcnow()
    if expiry <= now:
        return 0
    return max(int((expiry - now).total_seconds()), 1)
