from flask import Blueprint, jsonify, request

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.extensions import limiter
from lenspro.services import SuggestionService

api_suggestion_bp = Blueprint("api_suggestion", __name__)


@api_suggestion_bp.post("")
@limiter.limit("10 per minute")
def create_suggestion():
    payload = request.get_json(silent=True) or {}
    suggestion = SuggestionService.create_suggestion(
        payload.get("suggestion_text"),
        payload.get("suggested_by"),
    )
    return jsonify(suggestion.to_dict()), 201


@api_suggestion_bp.get("")
@gated(Requirement.ADMIN)
def list_suggestions():
    rows = SuggestionService.list_suggestions(status=request.args.get("status"))
    return jsonify([row.to_dict() for row in rows])


@api_suggestion_bp.patch("/<int:suggestion_id>")
@gated(Requirement.ADMIN)
def update_suggestion(suggestion_id):
    payload = request.get_json(silent=True) or {}
    return jsonify(SuggestionService.update_status(suggestion_id, payload.get("status")).to_dict())


@api_suggestion_bp.delete("/<int:suggestion_id>")
@gated(Requirement.ADMIN)
def delete_suggestion(suggestion_id):
    SuggestionService.delete(suggestion_id)
    return jsonify({"ok": True})
