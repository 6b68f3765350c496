from types import SimpleNamespace

import pytest

from lenspro.authz import (
    GateState,
    Requirement,
    SessionSnapshot,
    can,
    evaluate,
    login_url_for,
    safe_next_path,
)


def _user(role):
    return SimpleNamespace(id=1, role=role)


def test_loading_wins_over_everything():
    decision = evaluate(SessionSnapshot(user=_user("admin"), loading=True), Requirement.ADMIN)
    assert decision.state is GateState.LOADING
    assert not decision.allowed


def test_public_pages_are_always_authorized():
    assert evaluate(SessionSnapshot(), Requirement.NONE).state is GateState.AUTHORIZED


def test_anonymous_visitor_is_sent_to_login_with_next():
    decision = evaluate(SessionSnapshot(), Requirement.STAFF_OR_ADMIN, requested_path="/orders?status=pending")

    assert decision.state is GateState.UNAUTHENTICATED
    assert decision.login_redirect == "/login?next=%2Forders%3Fstatus%3Dpending"


@pytest.mark.parametrize(
    "role,requirement,expected",
    [
        ("customer", Requirement.AUTHENTICATED, GateState.AUTHORIZED),
        ("customer", Requirement.STAFF_OR_ADMIN, GateState.INSUFFICIENT_ROLE),
        ("customer", Requirement.ADMIN, GateState.INSUFFICIENT_ROLE),
        ("staff", Requirement.STAFF_OR_ADMIN, GateState.AUTHORIZED),
        ("staff", Requirement.ADMIN, GateState.INSUFFICIENT_ROLE),
        ("admin", Requirement.STAFF_OR_ADMIN, GateState.AUTHORIZED),
        ("admin", Requirement.ADMIN, GateState.AUTHORIZED),
    ],
)
def test_role_matrix(role, requirement, expected):
    assert evaluate(SessionSnapshot(user=_user(role)), requirement).state is expected


def test_unknown_role_is_treated_as_no_role():
    assert not can(_user("superuser"), Requirement.STAFF_OR_ADMIN)
    assert can(_user("superuser"), Requirement.AUTHENTICATED)


def test_can_without_user():
    assert can(None, Requirement.NONE)
    assert not can(None, Requirement.AUTHENTICATED)


def test_login_url_without_next():
    assert login_url_for(None) == "/login"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("/orders", "/orders"),
        ("https://evil.example/", "/"),
        ("//evil.example/", "/"),
        ("", "/"),
    ],
)
def test_safe_next_path(value, expected):
    assert safe_next_path(value) == expected
