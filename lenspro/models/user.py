from flask_login import UserMixin

from lenspro.authz import Role
from lenspro.extensions import db
from lenspro.models.base import PKType, TimestampMixin

USER_ROLES = tuple(role.value for role in Role)


class User(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(PKType, db.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(20), nullable=True)
    role = db.Column(db.String(24), nullable=False, default=Role.CUSTOMER.value, index=True)

    account = db.relationship("Account", back_populates="profile")
    handled_orders = db.relationship("Order", back_populates="handler", lazy="dynamic")

    __table_args__ = (
        db.CheckConstraint("role IN ('admin', 'staff', 'customer')", name="ck_users_role"),
    )

    @property
    def role_enum(self):
        return Role.parse(self.role)

    @property
    def is_active(self):
        return self.account is None or bool(self.account.is_active)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
        }
