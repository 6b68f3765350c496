import pytest

from lenspro.extensions import db
from lenspro.models import Account, User
from lenspro.services import AuthService, ProfileOutcome, ProfileService, RetryPolicy


def _account_without_profile(app, email="cli@lenspro.test", display_name="Ravi Kumar"):
    with app.app_context():
        return AuthService.create_account(email, "secret123", display_name).id


def test_delay_schedule():
    policy = RetryPolicy(max_attempts=4, delay=0.5, backoff=2.0)
    assert [policy.delay_before(n) for n in range(1, 5)] == [0.0, 0.5, 1.0, 2.0]


def test_existing_profile_is_found_first_try(app, make_user):
    user_id = make_user("staff")
    with app.app_context():
        account = db.session.get(Account, user_id)
        resolution = ProfileService.resolve(account, policy=RetryPolicy(max_attempts=3, delay=0))
        assert resolution.outcome is ProfileOutcome.FOUND
        assert resolution.attempts == 1
        assert resolution.user.role == "staff"


def test_profile_appearing_late_is_found_on_retry(app, make_user):
    user_id = make_user("customer")
    calls = []
    sleeps = []

    def flaky_lookup(account_id):
        calls.append(account_id)
        if len(calls) < 3:
            return None
        return db.session.get(User, account_id)

    with app.app_context():
        account = db.session.get(Account, user_id)
        resolution = ProfileService.resolve(
            account,
            policy=RetryPolicy(max_attempts=3, delay=0.1, backoff=2.0),
            lookup=flaky_lookup,
            sleep=sleeps.append,
        )
        assert resolution.outcome is ProfileOutcome.FOUND
        assert resolution.attempts == 3
        assert sleeps == [0.1, 0.2]


def test_missing_profile_falls_back_to_customer(app):
    account_id = _account_without_profile(app)
    with app.app_context():
        account = db.session.get(Account, account_id)
        resolution = ProfileService.resolve(account, policy=RetryPolicy(max_attempts=2, delay=0))

        assert resolution.outcome is ProfileOutcome.CREATED_FALLBACK
        assert resolution.ok
        assert resolution.user.role == "customer"
        assert resolution.user.name == "Ravi Kumar"
        assert db.session.get(User, account_id) is not None


def test_fallback_failure_is_reported(app, monkeypatch):
    account_id = _account_without_profile(app)

    def broken(_account):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(ProfileService, "_create_fallback", staticmethod(broken))
    with app.app_context():
        account = db.session.get(Account, account_id)
        resolution = ProfileService.resolve(account, policy=RetryPolicy(max_attempts=1, delay=0))

        assert resolution.outcome is ProfileOutcome.FAILED
        assert not resolution.ok
        assert resolution.user is None


def test_sign_in_fails_cleanly_when_profile_cannot_be_resolved(app, client, monkeypatch):
    _account_without_profile(app, email="ghost@lenspro.test")

    def broken(_account):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(ProfileService, "_create_fallback", staticmethod(broken))
    resp = client.post("/api/v1/auth/login", json={"email": "ghost@lenspro.test", "password": "secret123"})

    assert resp.status_code == 503
    assert resp.get_json()["error"] == "We could not load your profile. Please try again."


@pytest.mark.parametrize("attempts", [0, -3])
def test_policy_from_config_keeps_at_least_one_attempt(attempts):
    policy = RetryPolicy.from_config({"PROFILE_RETRY_ATTEMPTS": attempts})
    assert policy.max_attempts == 1
