from flask import Blueprint, jsonify, request

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.services import OrderService
from lenspro.session import current_session

api_order_bp = Blueprint("api_order", __name__)


@api_order_bp.get("")
@gated(Requirement.STAFF_OR_ADMIN)
def list_orders():
    rows = OrderService.list_orders(status=request.args.get("status"), search=request.args.get("q"))
    return jsonify([order.to_dict() for order in rows])


@api_order_bp.get("/summary")
@gated(Requirement.STAFF_OR_ADMIN)
def revenue_summary():
    summary = OrderService.revenue_summary()
    return jsonify(
        {
            "total_revenue": str(summary["total_revenue"]),
            "monthly_revenue": str(summary["monthly_revenue"]),
            "order_count": summary["order_count"],
        }
    )


@api_order_bp.get("/<int:order_id>")
@gated(Requirement.STAFF_OR_ADMIN)
def get_order(order_id):
    return jsonify(OrderService.get(order_id).to_dict())


@api_order_bp.patch("/<int:order_id>/status")
@gated(Requirement.STAFF_OR_ADMIN)
def update_status(order_id):
    payload = request.get_json(silent=True) or {}
    order = OrderService.transition(OrderService.get(order_id), payload.get("status"), current_session().user)
    return jsonify(order.to_dict())
