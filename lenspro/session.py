"""Per-application session store exposed to views through ``current_session()``.

One :class:`SessionStore` is built by ``create_app`` and kept in
``app.extensions``. It wraps Flask-Login for the signed-in user and binds a
:class:`~lenspro.cart.CartStore` to the browser session cookie for each
request.
"""
from flask import current_app, g, session
from flask_login import current_user, login_user, logout_user

from lenspro.authz import SessionSnapshot
from lenspro.cart import CartStore
from lenspro.errors import AppError
from lenspro.services import AuthService, ProfileService, RetryPolicy

EXTENSION_KEY = "lenspro.session"


class SessionStore:
    def __init__(self, app=None):
        self.cart_key = "lenspro-cart"
        self.retry_policy = RetryPolicy()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.cart_key = app.config.get("CART_STORAGE_KEY", self.cart_key)
        self.retry_policy = RetryPolicy.from_config(app.config)
        app.extensions[EXTENSION_KEY] = self

    @property
    def user(self):
        if current_user and current_user.is_authenticated:
            return current_user._get_current_object()
        return None

    @property
    def loading(self):
        # Set only while sign_in/sign_up resolve, within the login or register request.
        return bool(g.get("session_loading", False))

    def snapshot(self):
        return SessionSnapshot(user=self.user, loading=self.loading)

    def cart(self):
        # Built per call: every mutation is written straight back to the cookie.
        return CartStore(session, self.cart_key)

    def sign_in(self, email, password, remember=False):
        g.session_loading = True
        try:
            account = AuthService.authenticate(email, password)
            resolution = ProfileService.resolve(account, policy=self.retry_policy)
            if not resolution.ok:
                raise AppError("We could not load your profile. Please try again.", 503)
            login_user(resolution.user, remember=remember)
            current_app.logger.info(
                "User %s signed in (profile %s)", resolution.user.id, resolution.outcome.value
            )
            return resolution.user
        finally:
            g.session_loading = False

    def sign_up(self, name, email, password, phone=None):
        g.session_loading = True
        try:
            user = AuthService.register_user(name=name, email=email, password=password, phone=phone)
            login_user(user)
            return user
        finally:
            g.session_loading = False

    def sign_out(self):
        user = self.user
        logout_user()
        if user is not None:
            current_app.logger.info("User %s signed out", user.id)


def current_session():
    return current_app.extensions[EXTENSION_KEY]
