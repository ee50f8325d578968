from flask import Blueprint, g, jsonify

from security.session import revoke_session, token_from_request
from services.authentication import check_login_credentials
from utils.auth_context import login_required
from utils.errors import ApiError, ErrorType
from utils.request_data import json_body, require_fields


auth_bp = Blueprint("auth", __name__, url_prefix="/api/authentication")


@auth_bp.post("/login")
def login():
    email, password = require_fields(json_body(), "email", "password")

    login_success = check_login_credentials(email.strip(), password)
    if not login_success:
        raise ApiError(ErrorType.INVALID_CREDENTIALS, "Wrong email or password")

    return jsonify(login_success), 200


@auth_bp.post("/logout")
@login_required
def logout():
    revoke_session(token_from_request())
    return jsonify(message="Logged out", user_id=g.user.id), 200
