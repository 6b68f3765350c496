from decimal import Decimal

import pytest

from lenspro.cart import CartStore
from lenspro.errors import AppError
from lenspro.extensions import db
from lenspro.models import Equipment, Order, User
from lenspro.services import CheckoutFailurePolicy, CheckoutService, CustomerInfo
from lenspro.services.checkout_service import CHECKOUT_FAILED_MESSAGE, CONTACT_STAFF_MESSAGE

CUSTOMER = CustomerInfo(name="Asha Rao", email="asha@example.com", phone="9876543210")


@pytest.fixture()
def three_items(make_equipment):
    return [
        make_equipment("Canon EOS R5", "500", "800"),
        make_equipment("Sony A7 IV", "400", "700"),
        make_equipment("Godox AD600", "300", "450"),
    ]


def _fill_cart(ids):
    cart = CartStore({}, "cart")
    for equipment_id in ids:
        cart.add_to_cart(db.session.get(Equipment, equipment_id), "12hr", "2024-06-01", "2024-06-01")
    return cart


def test_checkout_creates_one_order_per_line_and_clears_cart(app, make_user, three_items):
    staff_id = make_user("staff")
    with app.test_request_context():
        cart = _fill_cart(three_items)
        cart.update_quantity(three_items[0], 2)

        result = CheckoutService.checkout(cart, CUSTOMER, db.session.get(User, staff_id))

        assert result.ok
        assert result.order_count == 3
        assert len(cart) == 0
        orders = Order.query.order_by(Order.id).all()
        assert [order.status for order in orders] == ["confirmed"] * 3
        assert {order.handled_by for order in orders} == {staff_id}
        assert orders[0].total_cost == Decimal("1000.00")


@pytest.mark.parametrize(
    "policy,orders_left",
    [(CheckoutFailurePolicy.BEST_EFFORT, 1), (CheckoutFailurePolicy.COMPENSATE, 0)],
)
def test_failure_on_second_line_reports_zero_and_keeps_cart(app, make_user, three_items, policy, orders_left):
    staff_id = make_user("staff")
    with app.test_request_context():
        cart = _fill_cart(three_items)
        # The second line's equipment disappears before checkout, so its insert fails.
        db.session.delete(db.session.get(Equipment, three_items[1]))
        db.session.commit()

        result = CheckoutService.checkout(cart, CUSTOMER, db.session.get(User, staff_id), policy=policy)

        assert not result.ok
        assert result.order_count == 0
        assert result.error == CHECKOUT_FAILED_MESSAGE
        assert len(cart) == 3
        assert Order.query.count() == orders_left


def test_policy_comes_from_config(app, make_user, three_items):
    app.config["CHECKOUT_FAILURE_POLICY"] = "compensate"
    staff_id = make_user("staff")
    with app.test_request_context():
        cart = _fill_cart(three_items)
        db.session.delete(db.session.get(Equipment, three_items[2]))
        db.session.commit()

        result = CheckoutService.checkout(cart, CUSTOMER, db.session.get(User, staff_id))

        assert result.failure_policy is CheckoutFailurePolicy.COMPENSATE
        assert Order.query.count() == 0


def test_customer_cannot_check_out(app, make_user, three_items):
    customer_id = make_user("customer")
    with app.test_request_context():
        cart = _fill_cart(three_items)
        with pytest.raises(AppError) as exc:
            CheckoutService.checkout(cart, CUSTOMER, db.session.get(User, customer_id))
        assert exc.value.status_code == 403
        assert exc.value.message == CONTACT_STAFF_MESSAGE
        assert Order.query.count() == 0


def test_anonymous_checkout_is_rejected(app, three_items):
    with app.test_request_context():
        with pytest.raises(AppError) as exc:
            CheckoutService.checkout(_fill_cart(three_items), CUSTOMER, None)
        assert exc.value.status_code == 401


@pytest.mark.parametrize(
    "customer",
    [
        CustomerInfo(name="", email="asha@example.com"),
        CustomerInfo(name="Asha", email=""),
        CustomerInfo(name="Asha", email="not-an-email"),
    ],
)
def test_customer_details_are_validated_before_any_write(app, make_user, three_items, customer):
    admin_id = make_user("admin")
    with app.test_request_context():
        cart = _fill_cart(three_items)
        with pytest.raises(AppError) as exc:
            CheckoutService.checkout(cart, customer, db.session.get(User, admin_id))
        assert exc.value.status_code == 400
        assert Order.query.count() == 0
        assert len(cart) == 3


def test_empty_cart_is_rejected(app, make_user):
    admin_id = make_user("admin")
    with app.test_request_context():
        with pytest.raises(AppError) as exc:
            CheckoutService.checkout(CartStore({}, "cart"), CUSTOMER, db.session.get(User, admin_id))
        assert exc.value.message == "Your cart is empty."
