import math
from enum import Enum

from repositories import users as users_repository
from security.password import MAX_PASSWORD_BYTES, filler_hash, hash_password, password_too_long, verify_password
from security.session import revoke_all_sessions
from utils.audit import log_event
from utils.errors import ApiError, ErrorType


class SortField(Enum):
    EMAIL = "email"
    NAME = "name"

    @classmethod
    def default(cls):
        return cls.EMAIL


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def default(cls):
        return cls.ASC


class SearchField(Enum):
    EMAIL = "email"
    NAME = "name"


def _lookup(enum_cls, value):
    try:
        return enum_cls((value or "").strip().lower())
    except ValueError:
        return None


def parse_sort(sort: str = None):
    """'field:order' -> (SortField, SortOrder). Unknown parts fall back to email / asc."""
    field, _, order = (sort or "").partition(":")
    return (
        _lookup(SortField, field) or SortField.default(),
        _lookup(SortOrder, order) or SortOrder.default(),
    )


def parse_search(search: str = None):
    """'field:value' -> (SearchField, value), or (None, None) when the field is not searchable."""
    field, sep, key = (search or "").partition(":")
    search_field = _lookup(SearchField, field)
    if not sep or search_field is None or not key:
        return None, None
    return search_field, key


def get_users(page_number=None, page_size=None, search=None, sort=None) -> dict:
    search_field, search_key = parse_search(search)
    sort_field, sort_order = parse_sort(sort)

    if page_size:
        page_number = page_number or 1
        offset = (page_number - 1) * page_size
    else:
        page_number, page_size, offset = None, None, 0

    rows, count = users_repository.list_users(
        search_field=search_field.value if search_field else None,
        search_key=search_key,
        sort_field=sort_field.value,
        sort_order=sort_order.value,
        offset=offset,
        limit=page_size,
    )

    if page_size:
        total_pages = math.ceil(count / page_size)
        has_previous_page = page_number > 1
        has_next_page = offset + page_size < count
    else:
        total_pages = 1 if count else 0
        has_previous_page = has_next_page = False

    return {
        "page_number": page_number,
        "page_size": page_size,
        "count": count,
        "total_pages": total_pages,
        "has_previous_page": has_previous_page,
        "has_next_page": has_next_page,
        "users": [u.to_dict() for u in rows],
    }


def _require_hashable(password: str, field: str):
    if password_too_long(password):
        raise ApiError(
            ErrorType.VALIDATION, f"Password must be at most {MAX_PASSWORD_BYTES} bytes", fields=[field]
        )


def get_user(user_id: int):
    user = users_repository.get_user(user_id)
    if not user:
        raise ApiError(ErrorType.UNPROCESSABLE_ENTITY, "Unknown user")
    return user.to_dict()


def create_user(name: str, email: str, password: str, password_confirm: str) -> dict:
    if password != password_confirm:
        raise ApiError(ErrorType.INVALID_PASSWORD, "Password confirmation mismatched")
    _require_hashable(password, "password")

    if users_repository.email_is_registered(email):
        raise ApiError(ErrorType.EMAIL_ALREADY_TAKEN, "Email is already registered")

    user = users_repository.create_user(name, email, hash_password(password))
    log_event("USER_CREATE", user_id=user.id, entity="user", entity_id=user.id)
    return {"name": name, "email": email}


def update_user(user_id: int, name: str, email: str) -> dict:
    # the user keeping their own address is not a conflict
    if users_repository.email_is_registered(email, exclude_id=user_id):
        raise ApiError(ErrorType.EMAIL_ALREADY_TAKEN, "Email is already registered")

    if not users_repository.update_user(user_id, name, email):
        raise ApiError(ErrorType.UNPROCESSABLE_ENTITY, "Failed to update user")

    log_event("USER_UPDATE", entity="user", entity_id=user_id)
    return {"id": user_id}


def delete_user(user_id: int) -> dict:
    if not users_repository.delete_user(user_id):
        raise ApiError(ErrorType.UNPROCESSABLE_ENTITY, "Failed to delete user")

    log_event("USER_DELETE", entity="user", entity_id=user_id)
    return {"id": user_id}


def check_password(user_id: int, password: str) -> bool:
    user = users_repository.get_user(user_id)
    matched = verify_password(password, user.password_hash if user else filler_hash())
    return bool(user) and matched


def change_password(user_id: int, password_old: str, password_new: str, password_confirm: str) -> dict:
    if password_new != password_confirm:
        raise ApiError(ErrorType.INVALID_PASSWORD, "Password confirmation mismatched")
    _require_hashable(password_new, "password_new")

    if not check_password(user_id, password_old):
        raise ApiError(ErrorType.INVALID_CREDENTIALS, "Wrong password")

    if not users_repository.change_password(user_id, hash_password(password_new)):
        raise ApiError(ErrorType.UNPROCESSABLE_ENTITY, "Failed to change password")

    revoke_all_sessions(user_id)
    log_event("PASSWORD_CHANGED", user_id=user_id)
    return {"id": user_id}
