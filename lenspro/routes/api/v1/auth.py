from flask import Blueprint, jsonify, request

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.extensions import limiter
from lenspro.session import current_session

api_auth_bp = Blueprint("api_auth", __name__)


@api_auth_bp.post("/register")
@limiter.limit("15 per minute")
def api_register():
    payload = request.get_json(silent=True) or {}
    user = current_session().sign_up(
        name=payload.get("name", ""),
        email=payload.get("email", ""),
        password=payload.get("password", ""),
        phone=payload.get("phone", ""),
    )
    return jsonify(user.to_dict()), 201


@api_auth_bp.post("/login")
@limiter.limit("20 per minute")
def api_login():
    payload = request.get_json(silent=True) or {}
    user = current_session().sign_in(payload.get("email", ""), payload.get("password", ""))
    return jsonify(user.to_dict())


@api_auth_bp.post("/logout")
@gated(Requirement.AUTHENTICATED)
def api_logout():
    current_session().sign_out()
    return jsonify({"ok": True})


@api_auth_bp.get("/session")
def api_session():
    user = current_session().user
    return jsonify(
        {
            "authenticated": user is not None,
            "user": user.to_dict() if user is not None else None,
        }
    )
