from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.errors import AppError
from lenspro.models import SUGGESTION_STATUSES, USER_ROLES
from lenspro.services import EquipmentService, FileService, OrderService, SuggestionService, UserService
from lenspro.session import current_session

web_admin_bp = Blueprint("web_admin", __name__, url_prefix="/admin")


def _equipment_payload():
    payload = {
        "name": request.form.get("name", ""),
        "description": request.form.get("description", ""),
        "rate_12hr": request.form.get("rate_12hr", ""),
        "rate_24hr": request.form.get("rate_24hr", ""),
        "available": bool(request.form.get("available")),
    }
    image_path = FileService.save_equipment_image(request.files.get("image"), current_app.config["UPLOAD_DIR"])
    if image_path:
        payload["image_url"] = image_path
    elif request.form.get("image_url"):
        payload["image_url"] = request.form.get("image_url")
    return payload


@web_admin_bp.get("")
@gated(Requirement.ADMIN)
def dashboard():
    return render_template(
        "admin.html",
        equipment=EquipmentService.list_all(),
        users=UserService.list_users(),
        suggestions=SuggestionService.list_suggestions(),
        summary=OrderService.revenue_summary(),
        roles=USER_ROLES,
        suggestion_statuses=SUGGESTION_STATUSES,
    )


@web_admin_bp.post("/equipment")
@gated(Requirement.ADMIN)
def create_equipment():
    try:
        item = EquipmentService.create(_equipment_payload())
        flash(f"{item.name} added to the catalog.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_admin.dashboard"))


@web_admin_bp.post("/equipment/<int:equipment_id>")
@gated(Requirement.ADMIN)
def update_equipment(equipment_id):
    try:
        item = EquipmentService.update(equipment_id, _equipment_payload())
        flash(f"{item.name} updated.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_admin.dashboard"))


@web_admin_bp.post("/equipment/<int:equipment_id>/delete")
@gated(Requirement.ADMIN)
def delete_equipment(equipment_id):
    try:
        EquipmentService.delete(equipment_id)
        flash("Equipment removed.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_admin.dashboard"))


@web_admin_bp.post("/users/<int:user_id>/role")
@gated(Requirement.ADMIN)
def change_role(user_id):
    try:
        user = UserService.change_role(user_id, request.form.get("role", ""), current_session().user)
        flash(f"{user.name} is now {user.role}.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_admin.dashboard"))


@web_admin_bp.post("/suggestions/<int:suggestion_id>/status")
@gated(Requirement.ADMIN)
def update_suggestion(suggestion_id):
    try:
        SuggestionService.update_status(suggestion_id, request.form.get("status", ""))
        flash("Suggestion updated.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_admin.dashboard"))


@web_admin_bp.post("/suggestions/<int:suggestion_id>/delete")
@gated(Requirement.ADMIN)
def delete_suggestion(suggestion_id):
    try:
        SuggestionService.delete(suggestion_id)
        flash("Suggestion deleted.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_admin.dashboard"))
