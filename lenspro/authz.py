"""Authorization gate shared by every protected page and API endpoint.

A view declares a :class:`Requirement`; on each request the current
:class:`SessionSnapshot` is evaluated against it and the resulting
:class:`GateDecision` tells the caller whether to show a loading state,
send the visitor to the login page, show an access-denied message, or
render the protected content.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from lenspro.errors import AppError


class Role(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    CUSTOMER = "customer"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError as exc:
            raise AppError("Invalid role.", 400) from exc


class Requirement(str, Enum):
    NONE = "none"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    STAFF_OR_ADMIN = "staff_or_admin"


class GateState(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    INSUFFICIENT_ROLE = "insufficient_role"
    AUTHORIZED = "authorized"


ROLES_FOR_REQUIREMENT = {
    Requirement.ADMIN: frozenset({Role.ADMIN}),
    Requirement.STAFF_OR_ADMIN: frozenset({Role.ADMIN, Role.STAFF}),
}


@dataclass(frozen=True)
class SessionSnapshot:
    user: Optional[object] = None
    loading: bool = False


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    login_redirect: Optional[str] = None

    @property
    def allowed(self):
        return self.state is GateState.AUTHORIZED


def login_url_for(next_path, login_path="/login"):
    if not next_path:
        return login_path
    return f"{login_path}?{urlencode({'next': next_path})}"


def safe_next_path(value, default="/"):
    """Only same-site absolute paths are honoured as post-login destinations."""
    value = (value or "").strip()
    if not value.startswith("/") or value.startswith("//") or "\\" in value:
        return default
    return value


def role_of(user):
    if user is None:
        return None
    role = getattr(user, "role", None)
    if role is None:
        return None
    try:
        return Role.parse(role)
    except AppError:
        return None


def can(user, requirement):
    """Capability check: does ``user`` satisfy ``requirement``?"""
    requirement = Requirement(requirement)
    if requirement is Requirement.NONE:
        return True
    if user is None:
        return False
    if requirement is Requirement.AUTHENTICATED:
        return True
    return role_of(user) in ROLES_FOR_REQUIREMENT[requirement]


def evaluate(snapshot, requirement, requested_path=None, login_path="/login"):
    requirement = Requirement(requirement)
    if snapshot.loading:
        return GateDecision(GateState.LOADING)
    if requirement is Requirement.NONE:
        return GateDecision(GateState.AUTHORIZED)
    if snapshot.user is None:
        return GateDecision(
            GateState.UNAUTHENTICATED,
            login_redirect=login_url_for(requested_path, login_path),
        )
    if not can(snapshot.user, requirement):
        return GateDecision(GateState.INSUFFICIENT_ROLE)
    return GateDecision(GateState.AUTHORIZED)
