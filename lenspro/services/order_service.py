from datetime import date, datetime, timezone
from decimal import Decimal

from flask import current_app
from sqlalchemy import func, or_

from lenspro.errors import AppError
from lenspro.extensions import db
from lenspro.models import ORDER_STATUSES, Equipment, Order
from lenspro.pricing import Duration

ORDER_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}


class OrderService:
    @staticmethod
    def _parse_date(value, label):
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value or "").strip()[:10])
        except ValueError as exc:
            raise AppError(f"Invalid {label}.", 400) from exc

    @staticmethod
    def list_orders(status=None, search=None):
        query = Order.query.order_by(Order.created_at.desc())
        if status and status != "all":
            if status not in ORDER_STATUSES:
                raise AppError("Invalid order status.", 400)
            query = query.filter(Order.status == status)
        term = (search or "").strip()
        if term:
            like = f"%{term}%"
            query = query.outerjoin(Equipment, Equipment.id == Order.equipment_id).filter(
                or_(
                    Order.customer_name.ilike(like),
                    Order.customer_email.ilike(like),
                    Equipment.name.ilike(like),
                )
            )
        return query.all()

    @staticmethod
    def get(order_id):
        order = db.session.get(Order, order_id) if order_id is not None else None
        if not order:
            raise AppError("Order not found.", 404)
        return order

    @staticmethod
    def create_order(fields):
        """Insert one order row and commit it on its own."""
        equipment_id = fields.get("equipment_id")
        if not db.session.get(Equipment, equipment_id):
            raise AppError("Equipment not found.", 404)

        status = fields.get("status") or "pending"
        if status not in ORDER_STATUSES:
            raise AppError("Invalid order status.", 400)
        total_cost = Decimal(str(fields.get("total_cost")))
        if total_cost < 0:
            raise AppError("Total cost cannot be negative.", 400)

        order = Order(
            customer_name=(fields.get("customer_name") or "").strip(),
            customer_email=(fields.get("customer_email") or "").strip().lower(),
            customer_phone=(fields.get("customer_phone") or "").strip() or None,
            equipment_id=equipment_id,
            duration=Duration.parse(fields.get("duration")).value,
            rent_date=OrderService._parse_date(fields.get("rent_date"), "rent date"),
            return_date=OrderService._parse_date(fields.get("return_date"), "return date"),
            total_cost=total_cost,
            status=status,
            handled_by=fields.get("handled_by"),
        )
        try:
            db.session.add(order)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return order

    @staticmethod
    def update_order(order_id, patch):
        order = OrderService.get(order_id)
        if "status" in patch:
            status = (patch.get("status") or "").strip().lower()
            if status not in ORDER_STATUSES:
                raise AppError("Invalid order status.", 400)
            order.status = status
        if "handled_by" in patch:
            order.handled_by = patch.get("handled_by")
        if "customer_phone" in patch:
            order.customer_phone = (patch.get("customer_phone") or "").strip() or None
        db.session.commit()
        return order

    @staticmethod
    def transition(order, new_status, actor):
        current = (order.status or "").lower()
        new_status = (new_status or "").strip().lower()
        if new_status not in ORDER_TRANSITIONS.get(current, set()):
            raise AppError(f"Invalid status transition from {current} to {new_status}.", 400)
        order = OrderService.update_order(order.id, {"status": new_status, "handled_by": actor.id})
        current_app.logger.info("Order %s moved %s -> %s by user %s", order.id, current, new_status, actor.id)
        return order

    @staticmethod
    def delete_order(order_id):
        order = OrderService.get(order_id)
        db.session.delete(order)
        db.session.commit()

    @staticmethod
    def revenue_summary():
        now = datetime.now(timezone.utc)
        month_start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
        active = Order.status != "cancelled"
        total = db.session.query(func.coalesce(func.sum(Order.total_cost), 0)).filter(active).scalar()
        monthly = (
            db.session.query(func.coalesce(func.sum(Order.total_cost), 0))
            .filter(active)
            .filter(Order.created_at >= month_start)
            .scalar()
        )
        return {
            "total_revenue": Decimal(str(total or 0)),
            "monthly_revenue": Decimal(str(monthly or 0)),
            "order_count": Order.query.count(),
        }
