from datetime import datetime

from repositories import users as users_repository
from security import lockout
from security.lockout import LoginState
from security.password import filler_hash, verify_password
from security.session import issue_token
from utils.audit import log_event
from utils.errors import ApiError, ErrorType


def check_login_credentials(email: str, password: str, now: datetime = None):
    """
    Check email and password for login.

    Returns the session descriptor {email, name, user_id, token} when the
    user exists and the password matches, otherwise None. Raises LOCKED_OUT
    while the account is inside its lockout window; the password is not
    checked and the counter is left alone in that case.
    """
    now = now or datetime.utcnow()
    user = users_repository.get_user_by_email(email)

    state = lockout.evaluate(user, now)
    if state is LoginState.LOCKED:
        retry_after = lockout.seconds_remaining(user, now)
        log_event(
            "LOGIN_LOCKED",
            user_id=user.id,
            metadata={"email": email, "attempt": user.attempt, "retry_after_seconds": retry_after},
        )
        raise ApiError(ErrorType.LOCKED_OUT, lockout.lockout_message(), retry_after_seconds=retry_after)

    if state is LoginState.EXPIRED_LOCK:
        if users_repository.reset_expired_attempt(email, lockout.threshold(), lockout.window_seconds(), now):
            log_event("LOGIN_LOCK_EXPIRED", user_id=user.id, metadata={"email": email})

    # Always run the password check, against a filler hash when the email is
    # unknown, so response time does not reveal whether the account exists.
    password_hash = user.password_hash if user else filler_hash()
    password_checked = verify_password(password, password_hash)

    if user and password_checked:
        users_repository.reset_attempt(email, now)
        log_event("LOGIN_SUCCESS", user_id=user.id)
        return {
            "email": user.email,
            "name": user.name,
            "user_id": user.id,
            "token": issue_token(user.email, user.id),
        }

    # Unknown emails match no row; the UPDATE still runs so both paths cost the same.
    attempt = users_repository.increment_attempt(email, now)
    log_event(
        "LOGIN_FAIL",
        user_id=user.id if user else None,
        metadata={"email": email, "attempt": attempt, "known_user": user is not None},
    )
    return None
