from flask import Blueprint, jsonify, request

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.errors import AppError
from lenspro.services import CheckoutService, CustomerInfo, EquipmentService
from lenspro.session import current_session

api_cart_bp = Blueprint("api_cart", __name__)
api_checkout_bp = Blueprint("api_checkout", __name__)


@api_cart_bp.get("")
def get_cart():
    return jsonify(current_session().cart().to_dict())


@api_cart_bp.post("/items")
def add_item():
    payload = request.get_json(silent=True) or {}
    item = EquipmentService.get(payload.get("equipment_id"), available_only=True)
    cart = current_session().cart()
    cart.add_to_cart(item, payload.get("duration"), payload.get("rent_date"), payload.get("return_date"))
    return jsonify(cart.to_dict()), 201


@api_cart_bp.patch("/items/<int:equipment_id>")
def update_item(equipment_id):
    payload = request.get_json(silent=True) or {}
    try:
        quantity = int(payload.get("quantity"))
    except (TypeError, ValueError) as exc:
        raise AppError("Quantity must be a whole number.", 400) from exc
    cart = current_session().cart()
    cart.update_quantity(equipment_id, quantity)
    return jsonify(cart.to_dict())


@api_cart_bp.delete("/items/<int:equipment_id>")
def remove_item(equipment_id):
    cart = current_session().cart()
    cart.remove_from_cart(equipment_id)
    return jsonify(cart.to_dict())


@api_cart_bp.delete("")
def clear_cart():
    cart = current_session().cart()
    cart.clear_cart()
    return jsonify(cart.to_dict())


@api_checkout_bp.post("")
@gated(Requirement.AUTHENTICATED)
def checkout():
    store = current_session()
    result = CheckoutService.checkout(
        store.cart(),
        CustomerInfo.from_mapping(request.get_json(silent=True) or {}),
        store.user,
    )
    if not result.ok:
        return jsonify({"error": result.error, "order_count": 0}), 500
    return (
        jsonify(
            {
                "order_count": result.order_count,
                "orders": [order.to_dict() for order in result.orders],
            }
        ),
        201,
    )
