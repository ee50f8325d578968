from functools import wraps
from flask import g
from models import db
from models.user import User
from security.session import get_session, token_from_request
from utils.errors import ApiError, ErrorType

def load_current_user():
    sess = get_session(token_from_request())
    if not sess:
        g.user = None
        g.session = None
        return
    g.session = sess
    g.user = db.session.get(User, sess.user_id)

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            raise ApiError(ErrorType.UNAUTHORIZED, "Authentication required")
        return fn(*args, **kwargs)
    return wrapper
