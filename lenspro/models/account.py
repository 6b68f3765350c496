from lenspro.extensions import db
from lenspro.models.base import PKType, TimestampMixin


class Account(TimestampMixin, db.Model):
    """Identity record: credentials only. The storefront profile lives in ``users``."""

    __tablename__ = "accounts"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    display_name = db.Column(db.String(120), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_login = db.Column(db.DateTime(timezone=True), nullable=True)

    profile = db.relationship("User", back_populates="account", uselist=False)
