from datetime import datetime, timedelta

from models import db
from models.session import Session
from models.user import User


def get_user(user_id: int):
    return db.session.get(User, user_id)


def get_user_by_email(email: str):
    return User.query.filter_by(email=email).first()


def email_is_registered(email: str, exclude_id: int = None) -> bool:
    q = User.query.filter(User.email == email)
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    return db.session.query(q.exists()).scalar()


def list_users(search_field=None, search_key=None, sort_field="email", sort_order="asc",
               offset=None, limit=None):
    """
    Returns (rows, total) for the filtered set. `total` counts every match,
    rows are only the requested window.
    """
    q = User.query
    if search_field and search_key:
        column = getattr(User, search_field)
        q = q.filter(column.icontains(search_key, autoescape=True))

    total = q.count()

    # case-folded so "alice" and "Bob" sort alphabetically
    key = db.func.lower(getattr(User, sort_field))
    q = q.order_by(key.desc() if sort_order == "desc" else key.asc(), User.id.asc())
    if offset:
        q = q.offset(offset)
    if limit is not None:
        q = q.limit(limit)
    return q.all(), total


def create_user(name: str, email: str, password_hash: str) -> User:
    user = User(name=name, email=email, password_hash=password_hash, attempt=0)
    db.session.add(user)
    db.session.commit()
    return user


def update_user(user_id: int, name: str, email: str) -> bool:
    user = get_user(user_id)
    if not user:
        return False
    user.name = name
    user.email = email
    db.session.commit()
    return True


def delete_user(user_id: int) -> bool:
    user = get_user(user_id)
    if not user:
        return False
    Session.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    db.session.delete(user)
    db.session.commit()
    return True


def change_password(user_id: int, password_hash: str) -> bool:
    user = get_user(user_id)
    if not user:
        return False
    user.password_hash = password_hash
    db.session.commit()
    return True


# Attempt counter. Every mutation is a single UPDATE so concurrent logins
# against one account cannot lose increments.

def increment_attempt(email: str, now: datetime):
    """
    attempt = attempt + 1, updated_on = now. Returns the new count, or None
    when no user has this email.
    """
    User.query.filter(User.email == email).update(
        {User.attempt: User.attempt + 1, User.updated_on: now}, synchronize_session=False
    )
    db.session.commit()
    # reads back even when nothing matched, so unknown emails cost the same
    return db.session.query(User.attempt).filter(User.email == email).scalar()


def reset_attempt(email: str, now: datetime) -> bool:
    updated = (
        User.query
        .filter(User.email == email, User.attempt != 0)
        .update({User.attempt: 0, User.updated_on: now}, synchronize_session=False)
    )
    db.session.commit()
    return bool(updated)


def reset_expired_attempt(email: str, threshold: int, window_seconds: int, now: datetime) -> bool:
    """
    Clears the counter only if the account is still over the threshold and
    its lock has run out, so a failure recorded in between is not wiped.
    """
    expired_before = now - timedelta(seconds=window_seconds)
    updated = (
        User.query
        .filter(
            User.email == email,
            User.attempt > threshold,
            db.or_(User.updated_on.is_(None), User.updated_on <= expired_before),
        )
        .update({User.attempt: 0, User.updated_on: now}, synchronize_session=False)
    )
    db.session.commit()
    return bool(updated)
