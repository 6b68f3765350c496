import re
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy.exc import IntegrityError

from lenspro.authz import Role
from lenspro.errors import AppError
from lenspro.extensions import bcrypt, db
from lenspro.models import Account, User

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def normalize_email(email):
    return (email or "").strip().lower()


def is_valid_email(email):
    return bool(EMAIL_PATTERN.match(email or ""))


class AuthService:
    @staticmethod
    def _hash(password):
        return bcrypt.generate_password_hash(password).decode("utf-8")

    @staticmethod
    def _validate_credentials(email, password):
        if not is_valid_email(email):
            raise AppError("Please enter a valid email address.", 400)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AppError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.", 400)

    @staticmethod
    def create_account(email, password, display_name=None):
        """Create an identity record without a storefront profile."""
        normalized_email = normalize_email(email)
        AuthService._validate_credentials(normalized_email, password)
        if Account.query.filter_by(email=normalized_email).first():
            raise AppError("Email already registered.", 409)
        account = Account(
            email=normalized_email,
            display_name=(display_name or "").strip() or None,
            password_hash=AuthService._hash(password),
        )
        db.session.add(account)
        db.session.commit()
        return account

    @staticmethod
    def register_user(name, email, password, phone=None, role=None):
        name = (name or "").strip()
        normalized_email = normalize_email(email)
        if not name:
            raise AppError("Name is required.", 400)
        AuthService._validate_credentials(normalized_email, password)
        role = Role.parse(role or current_app.config.get("DEFAULT_SIGNUP_ROLE", "customer"))

        if Account.query.filter_by(email=normalized_email).first():
            raise AppError("Email already registered.", 409)

        account = Account(
            email=normalized_email,
            display_name=name,
            password_hash=AuthService._hash(password),
        )
        try:
            db.session.add(account)
            db.session.flush()
            user = User(
                id=account.id,
                name=name,
                email=normalized_email,
                phone=(phone or "").strip() or None,
                role=role.value,
            )
            db.session.add(user)
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            message = str(getattr(exc, "orig", exc)).lower()
            if "email" in message:
                raise AppError("Email already registered.", 409) from exc
            raise AppError("Could not create account due to invalid data.", 400) from exc
        current_app.logger.info("Registered user %s with role %s", user.id, user.role)
        return user

    @staticmethod
    def authenticate(email, password):
        account = Account.query.filter_by(email=normalize_email(email)).first()
        if not account:
            raise AppError("Invalid credentials.", 401)
        try:
            is_valid = bcrypt.check_password_hash(account.password_hash, password or "")
        except ValueError:
            is_valid = False
        if not is_valid:
            raise AppError("Invalid credentials.", 401)
        if not account.is_active:
            raise AppError("User account is inactive.", 403)
        account.last_login = datetime.now(timezone.utc)
        db.session.commit()
        return account
