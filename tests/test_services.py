from datetime import date
from decimal import Decimal

import pytest

from lenspro.errors import AppError
from lenspro.extensions import db
from lenspro.models import Order, User
from lenspro.services import EquipmentService, OrderService, SuggestionService, UserService


def _order_fields(equipment_id, /, **overrides):
    fields = {
        "customer_name": "Asha Rao",
        "customer_email": "Asha@Example.com",
        "equipment_id": equipment_id,
        "duration": "12hr",
        "rent_date": "2024-06-01",
        "return_date": "2024-06-02",
        "total_cost": Decimal("500"),
    }
    fields.update(overrides)
    return fields


def test_create_order_defaults_to_pending(app, make_equipment):
    equipment_id = make_equipment()
    with app.app_context():
        order = OrderService.create_order(_order_fields(equipment_id))

        assert order.status == "pending"
        assert order.customer_email == "asha@example.com"
        assert order.rent_date == date(2024, 6, 1)


@pytest.mark.parametrize(
    "overrides,status_code",
    [
        ({"duration": "48hr"}, 400),
        ({"status": "shipped"}, 400),
        ({"total_cost": Decimal("-1")}, 400),
        ({"equipment_id": 999}, 404),
    ],
)
def test_create_order_rejects_bad_fields(app, make_equipment, overrides, status_code):
    equipment_id = make_equipment()
    with app.app_context():
        with pytest.raises(AppError) as exc:
            OrderService.create_order(_order_fields(equipment_id, **overrides))
        assert exc.value.status_code == status_code
        assert Order.query.count() == 0


def test_transition_table(app, make_user, make_equipment):
    staff_id = make_user("staff")
    equipment_id = make_equipment()
    with app.app_context():
        staff = db.session.get(User, staff_id)
        order = OrderService.create_order(_order_fields(equipment_id))

        order = OrderService.transition(order, "confirmed", staff)
        assert order.handled_by == staff_id
        order = OrderService.transition(order, "completed", staff)
        with pytest.raises(AppError):
            OrderService.transition(order, "cancelled", staff)


def test_list_orders_filters_by_status_and_search(app, make_equipment):
    camera_id = make_equipment("Canon EOS R5")
    lens_id = make_equipment("Sigma 35mm Art")
    with app.app_context():
        OrderService.create_order(_order_fields(camera_id, status="confirmed"))
        OrderService.create_order(_order_fields(lens_id, customer_name="Vikram"))

        assert len(OrderService.list_orders(status="confirmed")) == 1
        assert [o.customer_name for o in OrderService.list_orders(search="sigma")] == ["Vikram"]
        assert len(OrderService.list_orders(status="all")) == 2
        with pytest.raises(AppError):
            OrderService.list_orders(status="lost")


def test_revenue_summary_ignores_cancelled_orders(app, make_equipment):
    equipment_id = make_equipment()
    with app.app_context():
        OrderService.create_order(_order_fields(equipment_id, status="confirmed", total_cost=Decimal("800")))
        OrderService.create_order(_order_fields(equipment_id, status="cancelled", total_cost=Decimal("300")))

        summary = OrderService.revenue_summary()

        assert summary["total_revenue"] == Decimal("800")
        assert summary["monthly_revenue"] == Decimal("800")
        assert summary["order_count"] == 2


def test_equipment_with_orders_cannot_be_deleted(app, make_equipment):
    equipment_id = make_equipment()
    with app.app_context():
        OrderService.create_order(_order_fields(equipment_id))
        with pytest.raises(AppError) as exc:
            EquipmentService.delete(equipment_id)
        assert exc.value.status_code == 409


def test_equipment_update_hides_item_from_catalog(app, make_equipment):
    equipment_id = make_equipment("Canon EOS R5")
    with app.app_context():
        EquipmentService.update(equipment_id, {"available": False})

        assert EquipmentService.list_available() == []
        with pytest.raises(AppError):
            EquipmentService.get(equipment_id, available_only=True)


def test_suggestion_lifecycle(app):
    with app.app_context():
        suggestion = SuggestionService.create_suggestion("Blackmagic Pocket 6K", "Meera")
        SuggestionService.update_status(suggestion.id, "implemented")

        assert SuggestionService.list_suggestions(status="implemented")[0].id == suggestion.id
        with pytest.raises(AppError):
            SuggestionService.update_status(suggestion.id, "archived")
        with pytest.raises(AppError):
            SuggestionService.create_suggestion("", "Meera")


def test_staff_cannot_edit_other_users(app, make_user):
    staff_id = make_user("staff")
    customer_id = make_user("customer")
    with app.app_context():
        staff = db.session.get(User, staff_id)
        with pytest.raises(AppError) as exc:
            UserService.update_user(customer_id, {"name": "Hacked"}, actor=staff)
        assert exc.value.status_code == 403


def test_invalid_role_is_rejected(app, make_user):
    admin_id = make_user("admin")
    customer_id = make_user("customer")
    with app.app_context():
        admin = db.session.get(User, admin_id)
        with pytest.raises(AppError):
            UserService.change_role(customer_id, "owner", admin)
