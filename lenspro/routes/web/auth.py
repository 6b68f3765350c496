from flask import Blueprint, flash, redirect, render_template, request, url_for

from lenspro.authz import Requirement, safe_next_path
from lenspro.decorators import gated
from lenspro.errors import AppError
from lenspro.extensions import limiter
from lenspro.services import UserService
from lenspro.session import current_session

web_auth_bp = Blueprint("web_auth", __name__)


@web_auth_bp.route("/register", methods=["GET", "POST"])
@limiter.limit("15 per minute", methods=["POST"])
def register():
    store = current_session()
    if store.user is not None:
        return redirect(url_for("web_catalog.index"))

    if request.method == "GET":
        return render_template("register.html")

    try:
        if request.form.get("password", "") != request.form.get("confirm_password", ""):
            raise AppError("Passwords do not match.", 400)
        store.sign_up(
            name=request.form.get("name", ""),
            email=request.form.get("email", ""),
            password=request.form.get("password", ""),
            phone=request.form.get("phone", ""),
        )
        flash("Account created successfully.", "success")
        return redirect(url_for("web_catalog.index"))
    except AppError as exc:
        flash(exc.message, "error")
        return redirect(url_for("web_auth.register"))


@web_auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit("20 per minute", methods=["POST"])
def login():
    store = current_session()
    next_path = safe_next_path(request.values.get("next"), url_for("web_catalog.index"))
    if store.user is not None:
        return redirect(next_path)

    if request.method == "GET":
        return render_template("login.html", next=next_path)

    try:
        user = store.sign_in(
            email=request.form.get("email", ""),
            password=request.form.get("password", ""),
            remember=bool(request.form.get("remember")),
        )
        flash(f"Welcome back, {user.name}.", "success")
        return redirect(next_path)
    except AppError as exc:
        flash(exc.message, "error")
        return redirect(url_for("web_auth.login", next=next_path))


@web_auth_bp.post("/logout")
@gated(Requirement.AUTHENTICATED)
def logout():
    current_session().sign_out()
    flash("Logged out successfully.", "success")
    return redirect(url_for("web_catalog.index"))


@web_auth_bp.route("/profile", methods=["GET", "POST"])
@gated(Requirement.AUTHENTICATED)
def profile():
    user = current_session().user
    if request.method == "GET":
        return render_template("profile.html", user=user)

    try:
        UserService.update_user(
            user.id,
            {"name": request.form.get("name", ""), "phone": request.form.get("phone", "")},
            actor=user,
        )
        flash("Profile updated.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_auth.profile"))
