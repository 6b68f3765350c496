from flask import Blueprint, flash, redirect, render_template, request, url_for

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.errors import AppError
from lenspro.models import ORDER_STATUSES
from lenspro.services import OrderService
from lenspro.services.order_service import ORDER_TRANSITIONS
from lenspro.session import current_session

web_staff_bp = Blueprint("web_staff", __name__)


@web_staff_bp.get("/staff")
@gated(Requirement.STAFF_OR_ADMIN)
def dashboard():
    summary = OrderService.revenue_summary()
    recent_orders = OrderService.list_orders()[:10]
    return render_template("staff_dashboard.html", summary=summary, recent_orders=recent_orders)


@web_staff_bp.get("/orders")
@gated(Requirement.STAFF_OR_ADMIN)
def orders():
    status = (request.args.get("status") or "all").strip().lower()
    search = (request.args.get("q") or "").strip()
    try:
        rows = OrderService.list_orders(status=status, search=search)
    except AppError as exc:
        flash(exc.message, "error")
        return redirect(url_for("web_staff.orders"))
    return render_template(
        "orders.html",
        orders=rows,
        status=status,
        search=search,
        statuses=ORDER_STATUSES,
        transitions=ORDER_TRANSITIONS,
    )


@web_staff_bp.post("/orders/<int:order_id>/status")
@gated(Requirement.STAFF_OR_ADMIN)
def update_order_status(order_id):
    try:
        order = OrderService.get(order_id)
        OrderService.transition(order, request.form.get("status", ""), current_session().user)
        flash(f"Order #{order.id} is now {order.status}.", "success")
    except AppError as exc:
        flash(exc.message, "error")
    return redirect(url_for("web_staff.orders", status=request.args.get("status", "all")))
