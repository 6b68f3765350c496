from dataclasses import dataclass, field
from enum import Enum

from flask import current_app

from lenspro.authz import Requirement, can
from lenspro.errors import AppError
from lenspro.services.auth_service import is_valid_email
from lenspro.services.order_service import OrderService

CHECKOUT_FAILED_MESSAGE = "Failed to create orders. Please try again."
CONTACT_STAFF_MESSAGE = "Only staff and admin can create orders. Please contact support."


class CheckoutFailurePolicy(str, Enum):
    # Orders created before the failing line stay in place.
    BEST_EFFORT = "best_effort"
    # Orders created before the failing line are deleted again.
    COMPENSATE = "compensate"

    @classmethod
    def from_config(cls, config):
        raw = (config.get("CHECKOUT_FAILURE_POLICY") or cls.BEST_EFFORT.value).strip().lower()
        try:
            return cls(raw)
        except ValueError:
            current_app.logger.warning("Unknown CHECKOUT_FAILURE_POLICY %r; using best_effort", raw)
            return cls.BEST_EFFORT


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    email: str
    phone: str = None

    @classmethod
    def from_mapping(cls, data):
        return cls(
            name=(data.get("name") or data.get("customer_name") or "").strip(),
            email=(data.get("email") or data.get("customer_email") or "").strip(),
            phone=(data.get("phone") or data.get("customer_phone") or "").strip() or None,
        )


@dataclass
class CheckoutResult:
    order_count: int
    orders: list = field(default_factory=list)
    error: str = None
    failure_policy: CheckoutFailurePolicy = CheckoutFailurePolicy.BEST_EFFORT

    @property
    def ok(self):
        return self.error is None


class CheckoutService:
    @staticmethod
    def validate(cart, customer, actor):
        if actor is None:
            raise AppError("Please sign in to check out.", 401)
        if not can(actor, Requirement.STAFF_OR_ADMIN):
            raise AppError(CONTACT_STAFF_MESSAGE, 403)
        if not cart.lines:
            raise AppError("Your cart is empty.", 400)
        if not customer.name or not customer.email:
            raise AppError("Please fill in all customer information.", 400)
        if not is_valid_email(customer.email):
            raise AppError("Please enter a valid customer email address.", 400)

    @staticmethod
    def checkout(cart, customer, actor, policy=None):
        """Turn every cart line into one order.

        Lines are written one by one, each committed separately. The cart is
        cleared only if every line was written.
        """
        CheckoutService.validate(cart, customer, actor)
        policy = policy or CheckoutFailurePolicy.from_config(current_app.config)

        created = []
        for line in cart.lines:
            try:
                order = OrderService.create_order(
                    {
                        "customer_name": customer.name,
                        "customer_email": customer.email,
                        "customer_phone": customer.phone,
                        "equipment_id": line.equipment_id,
                        "duration": line.duration.value,
                        "rent_date": line.rent_date,
                        "return_date": line.return_date,
                        "total_cost": line.total_cost,
                        "handled_by": actor.id,
                        "status": "confirmed",
                    }
                )
            except Exception:
                current_app.logger.exception(
                    "Checkout failed on equipment %s after %s order(s) were created",
                    line.equipment_id,
                    len(created),
                )
                if policy is CheckoutFailurePolicy.COMPENSATE:
                    CheckoutService._compensate(created)
                return CheckoutResult(0, [], CHECKOUT_FAILED_MESSAGE, policy)
            created.append(order)

        cart.clear_cart()
        current_app.logger.info("Checkout by user %s created %s order(s)", actor.id, len(created))
        return CheckoutResult(len(created), created, None, policy)

    @staticmethod
    def _compensate(orders):
        for order in orders:
            try:
                OrderService.delete_order(order.id)
            except Exception:
                current_app.logger.exception("Compensating delete failed for order %s", order.id)
