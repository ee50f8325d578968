from flask import Blueprint, jsonify, request

from services import users as users_service
from utils.auth_context import login_required
from utils.request_data import int_arg, json_body, require_email, require_fields


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@login_required
def get_users():
    result = users_service.get_users(
        page_number=int_arg("page_number"),
        page_size=int_arg("page_size"),
        search=request.args.get("search"),
        sort=request.args.get("sort"),
    )
    return jsonify(result), 200


@users_bp.post("")
@login_required
def create_user():
    name, email, password, password_confirm = require_fields(
        json_body(), "name", "email", "password", "password_confirm"
    )
    created = users_service.create_user(name.strip(), require_email(email), password, password_confirm)
    return jsonify(created), 200


@users_bp.get("/<int:user_id>")
@login_required
def get_user(user_id: int):
    return jsonify(users_service.get_user(user_id)), 200


@users_bp.put("/<int:user_id>")
@login_required
def update_user(user_id: int):
    name, email = require_fields(json_body(), "name", "email")
    return jsonify(users_service.update_user(user_id, name.strip(), require_email(email))), 200


@users_bp.delete("/<int:user_id>")
@login_required
def delete_user(user_id: int):
    return jsonify(users_service.delete_user(user_id)), 200


@users_bp.patch("/<int:user_id>/change-password")
@login_required
def change_password(user_id: int):
    password_old, password_new, password_confirm = require_fields(
        json_body(), "password_old", "password_new", "password_confirm"
    )
    result = users_service.change_password(user_id, password_old, password_new, password_confirm)
    return jsonify(result), 200
