from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from lenspro.authz import Requirement, can, safe_next_path
from lenspro.errors import AppError
from lenspro.extensions import limiter
from lenspro.services import CheckoutService, CustomerInfo, EquipmentService, SuggestionService
from lenspro.session import current_session

web_catalog_bp = Blueprint("web_catalog", __name__)


@web_catalog_bp.get("/")
def index():
    equipment = EquipmentService.list_available()
    return render_template("index.html", equipment=equipment)


@web_catalog_bp.get("/cart")
def view_cart():
    return render_template("cart.html", cart=current_session().cart())


@web_catalog_bp.post("/cart/add")
def add_to_cart():
    try:
        item = EquipmentService.get(request.form.get("equipment_id", type=int), available_only=True)
        line = current_session().cart().add_to_cart(
            item,
            request.form.get("duration", ""),
            request.form.get("rent_date", ""),
            request.form.get("return_date", ""),
        )
        flash(f"{line.equipment.name} added to cart.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(safe_next_path(request.form.get("next"), url_for("web_catalog.index")))


@web_catalog_bp.post("/cart/<int:equipment_id>/quantity")
def update_quantity(equipment_id):
    quantity = request.form.get("quantity", type=int)
    if quantity is None:
        flash("Quantity must be a whole number.", "error")
    else:
        current_session().cart().update_quantity(equipment_id, quantity)
    return redirect(url_for("web_catalog.view_cart"))


@web_catalog_bp.post("/cart/<int:equipment_id>/remove")
def remove_from_cart(equipment_id):
    current_session().cart().remove_from_cart(equipment_id)
    flash("Item removed from cart.", "success")
    return redirect(url_for("web_catalog.view_cart"))


@web_catalog_bp.post("/cart/clear")
def clear_cart():
    current_session().cart().clear_cart()
    flash("Cart cleared.", "success")
    return redirect(url_for("web_catalog.view_cart"))


@web_catalog_bp.post("/cart/checkout")
def checkout():
    store = current_session()
    if store.user is None:
        flash("Please sign in to check out.", "error")
        return redirect(url_for("web_auth.login", next=url_for("web_catalog.view_cart")))
    if not can(store.user, Requirement.STAFF_OR_ADMIN):
        return redirect(url_for("web_catalog.contact_staff"))

    try:
        result = CheckoutService.checkout(
            store.cart(),
            CustomerInfo.from_mapping(request.form),
            store.user,
        )
    except AppError as exc:
        flash(exc.message, "error")
        return redirect(url_for("web_catalog.view_cart"))

    if not result.ok:
        flash(result.error, "error")
        return redirect(url_for("web_catalog.view_cart"))

    flash(f"Successfully created {result.order_count} order(s)!", "success")
    return redirect(url_for("web_staff.orders"))


@web_catalog_bp.get("/checkout/contact-staff")
def contact_staff():
    return render_template("contact_staff.html", cart=current_session().cart())


@web_catalog_bp.route("/suggestions", methods=["GET", "POST"])
@limiter.limit("10 per minute", methods=["POST"])
def suggestions():
    if request.method == "GET":
        return render_template("suggestions.html")

    try:
        SuggestionService.create_suggestion(
            request.form.get("suggestion_text", ""),
            request.form.get("suggested_by", ""),
        )
        current_app.logger.info("New equipment suggestion received")
        flash("Thanks! Your suggestion has been sent to our team.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_catalog.suggestions"))
