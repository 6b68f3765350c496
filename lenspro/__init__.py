import os
from decimal import Decimal

from dotenv import load_dotenv
from flask import Flask
from flask_wtf.csrf import generate_csrf
from werkzeug.middleware.proxy_fix import ProxyFix

from lenspro.authz import Requirement, can
from lenspro.cli import register_cli
from lenspro.config import config_by_env
from lenspro.errors import register_error_handlers
from lenspro.extensions import bcrypt, cache, csrf, db, limiter, login_manager, migrate
from lenspro.models import User
from lenspro.routes.api.v1 import api_v1_bp
from lenspro.routes.web.admin import web_admin_bp
from lenspro.routes.web.auth import web_auth_bp
from lenspro.routes.web.catalog import web_catalog_bp
from lenspro.routes.web.staff import web_staff_bp
from lenspro.session import SessionStore, current_session


@login_manager.user_loader
def load_user(user_id):
    user = db.session.get(User, int(user_id))
    if user is None or not user.is_active:
        return None
    return user


def create_app(config_object=None):
    load_dotenv()
    env = os.getenv("FLASK_ENV", "development")

    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or config_by_env.get(env, config_by_env["development"]))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////") and db_uri != "sqlite:///:memory:":
        relative_path = db_uri.replace("sqlite:///", "", 1)
        absolute_path = os.path.join(project_root, relative_path)
        os.makedirs(os.path.dirname(absolute_path), exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{absolute_path}"

    upload_dir = app.config["UPLOAD_DIR"]
    if not os.path.isabs(upload_dir):
        upload_dir = os.path.join(app.root_path, upload_dir)
    app.config["UPLOAD_DIR"] = upload_dir

    os.makedirs(app.instance_path, exist_ok=True)
    os.makedirs(app.config["UPLOAD_DIR"], exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    csrf.init_app(app)
    cache.init_app(app)
    limiter.init_app(app)
    login_manager.init_app(app)
    SessionStore(app)
    _init_sentry(app)

    register_error_handlers(app)
    register_cli(app)

    app.register_blueprint(web_catalog_bp)
    app.register_blueprint(web_auth_bp)
    app.register_blueprint(web_staff_bp)
    app.register_blueprint(web_admin_bp)
    app.register_blueprint(api_v1_bp, url_prefix="/api/v1")

    if env == "development" and not app.config.get("TESTING"):
        with app.app_context():
            db.create_all()

    @app.context_processor
    def inject_globals():
        store = current_session()
        return {
            "csrf_token": generate_csrf,
            "cart_item_count": store.cart().get_item_count(),
            "can": can,
            "Requirement": Requirement,
        }

    @app.template_filter("currency")
    def format_currency(amount):
        value = Decimal(str(amount or 0))
        return f"{app.config['CURRENCY_SYMBOL']}{value:,.2f}"

    return app


def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.05")),
            environment=os.getenv("FLASK_ENV", "production"),
        )
        app.logger.info("Sentry initialized.")
    except Exception as exc:
        app.logger.warning("Sentry initialization failed: %s", exc)


__all__ = ["create_app"]
