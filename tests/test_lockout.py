from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from security import lockout
from security.lockout import LoginState


T = datetime(2026, 1, 1, 12, 0, 0)


def _user(attempt, updated_on=T):
    return SimpleNamespace(attempt=attempt, updated_on=updated_on)


@pytest.mark.parametrize("attempt", [0, 1, 5])
def test_at_or_below_threshold_is_unlocked(app, attempt):
    assert lockout.evaluate(_user(attempt), T + timedelta(seconds=1)) is LoginState.UNLOCKED


def test_unknown_user_is_unlocked(app):
    assert lockout.evaluate(None, T) is LoginState.UNLOCKED


def test_over_threshold_inside_window_is_locked(app):
    user = _user(6)
    now = T + timedelta(seconds=5)
    assert lockout.evaluate(user, now) is LoginState.LOCKED
    assert lockout.seconds_remaining(user, now) == 5


@pytest.mark.parametrize("elapsed", [10, 15, 3600])
def test_over_threshold_after_window_is_expired(app, elapsed):
    user = _user(6)
    now = T + timedelta(seconds=elapsed)
    assert lockout.evaluate(user, now) is LoginState.EXPIRED_LOCK
    assert lockout.seconds_remaining(user, now) == 0


def test_over_threshold_without_timestamp_counts_as_expired(app):
    assert lockout.evaluate(_user(9, updated_on=None), T) is LoginState.EXPIRED_LOCK


def test_threshold_and_window_follow_config(app):
    app.config["MAX_LOGIN_ATTEMPTS"] = 2
    app.config["LOCKOUT_WINDOW_SECONDS"] = 60
    user = _user(3)
    assert lockout.lockout_expiry(user) == T + timedelta(seconds=60)
    assert lockout.evaluate(user, T + timedelta(seconds=30)) is LoginState.LOCKED


@pytest.mark.parametrize("seconds, span", [
    (10, "10 seconds"),
    (60, "1 minute"),
    (1800, "30 minutes"),
])
def test_lockout_message_matches_window(app, seconds, span):
    app.config["LOCKOUT_WINDOW_SECONDS"] = seconds
    assert span in lockout.lockout_message()
