"""Resolve the storefront profile that belongs to a signed-in account.

Profiles can lag behind their account (accounts created from the CLI, or
profiles removed by an admin). Resolution retries the lookup a bounded number
of times and, if the profile still does not exist, provisions a customer
profile from the account details.
"""
import time
from dataclasses import dataclass
from enum import Enum

from flask import current_app

from lenspro.authz import Role
from lenspro.extensions import db
from lenspro.models import User


class ProfileOutcome(str, Enum):
    FOUND = "found"
    CREATED_FALLBACK = "created_fallback"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay: float = 0.5
    backoff: float = 2.0

    @classmethod
    def from_config(cls, config):
        return cls(
            max_attempts=max(1, int(config.get("PROFILE_RETRY_ATTEMPTS", 3))),
            delay=max(0.0, float(config.get("PROFILE_RETRY_DELAY", 0.5))),
            backoff=max(1.0, float(config.get("PROFILE_RETRY_BACKOFF", 2.0))),
        )

    def delay_before(self, attempt):
        # attempt is 1-based; no wait before the first lookup.
        if attempt <= 1:
            return 0.0
        return self.delay * (self.backoff ** (attempt - 2))


@dataclass(frozen=True)
class ProfileResolution:
    outcome: ProfileOutcome
    user: User = None
    attempts: int = 0

    @property
    def ok(self):
        return self.outcome is not ProfileOutcome.FAILED


def _lookup_profile(account_id):
    return db.session.get(User, account_id)


class ProfileService:
    @staticmethod
    def resolve(account, policy=None, lookup=None, sleep=time.sleep):
        policy = policy or RetryPolicy.from_config(current_app.config)
        lookup = lookup or _lookup_profile

        for attempt in range(1, policy.max_attempts + 1):
            wait = policy.delay_before(attempt)
            if wait:
                sleep(wait)
            user = lookup(account.id)
            if user is not None:
                return ProfileResolution(ProfileOutcome.FOUND, user, attempt)

        current_app.logger.warning(
            "Profile for account %s not found after %s attempts; creating fallback profile",
            account.id,
            policy.max_attempts,
        )
        try:
            user = ProfileService._create_fallback(account)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Fallback profile creation failed for account %s", account.id)
            return ProfileResolution(ProfileOutcome.FAILED, None, policy.max_attempts)
        return ProfileResolution(ProfileOutcome.CREATED_FALLBACK, user, policy.max_attempts)

    @staticmethod
    def _create_fallback(account):
        name = account.display_name or account.email.split("@", 1)[0]
        user = User(
            id=account.id,
            name=name,
            email=account.email,
            role=Role.CUSTOMER.value,
        )
        db.session.add(user)
        db.session.commit()
        return user
