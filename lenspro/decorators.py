from functools import wraps

from flask import jsonify, redirect, render_template, request, url_for

from lenspro.authz import GateState, Requirement, evaluate
from lenspro.session import current_session


def _requested_path():
    path = request.full_path if request.query_string else request.path
    return path.rstrip("?")


def gated(requirement):
    """Run the authorization gate for ``requirement`` on every request to the view."""
    requirement = Requirement(requirement)

    def wrapper(func):
        @wraps(func)
        def inner(*args, **kwargs):
            wants_json = request.path.startswith("/api/")
            decision = evaluate(
                current_session().snapshot(),
                requirement,
                requested_path=_requested_path(),
                login_path=url_for("web_auth.login"),
            )

            if decision.state is GateState.LOADING:
                if wants_json:
                    return jsonify({"error": "Session is still loading"}), 503
                return render_template("loading.html"), 503
            if decision.state is GateState.UNAUTHENTICATED:
                if wants_json:
                    return jsonify({"error": "Unauthorized", "login_url": decision.login_redirect}), 401
                return redirect(decision.login_redirect)
            if decision.state is GateState.INSUFFICIENT_ROLE:
                if wants_json:
                    return jsonify({"error": "Forbidden"}), 403
                return render_template("access_denied.html", requirement=requirement), 403
            return func(*args, **kwargs)

        return inner

    return wrapper
