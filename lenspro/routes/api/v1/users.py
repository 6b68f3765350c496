from flask import Blueprint, jsonify, request

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.services import UserService
from lenspro.session import current_session

api_user_bp = Blueprint("api_user", __name__)


@api_user_bp.get("")
@gated(Requirement.ADMIN)
def list_users():
    return jsonify([user.to_dict() for user in UserService.list_users()])


@api_user_bp.get("/me")
@gated(Requirement.AUTHENTICATED)
def me():
    return jsonify(current_session().user.to_dict())


@api_user_bp.patch("/me")
@gated(Requirement.AUTHENTICATED)
def update_me():
    user = current_session().user
    payload = request.get_json(silent=True) or {}
    return jsonify(UserService.update_user(user.id, payload, actor=user).to_dict())


@api_user_bp.patch("/<int:user_id>/role")
@gated(Requirement.ADMIN)
def change_role(user_id):
    payload = request.get_json(silent=True) or {}
    user = UserService.change_role(user_id, payload.get("role"), current_session().user)
    return jsonify(user.to_dict())
