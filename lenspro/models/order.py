from lenspro.extensions import db
from lenspro.models.base import PKType, TimestampMixin

ORDER_STATUSES = ("pending", "confirmed", "completed", "cancelled")


class Order(TimestampMixin, db.Model):
    __tablename__ = "orders"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False, index=True)
    customer_phone = db.Column(db.String(20), nullable=True)
    equipment_id = db.Column(PKType, db.ForeignKey("equipments.id", ondelete="CASCADE"), nullable=False, index=True)
    duration = db.Column(db.String(8), nullable=False)
    rent_date = db.Column(db.Date, nullable=False)
    return_date = db.Column(db.Date, nullable=False)
    total_cost = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(db.String(24), nullable=False, default="pending", index=True)
    handled_by = db.Column(PKType, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    equipment = db.relationship("Equipment", back_populates="orders")
    handler = db.relationship("User", back_populates="handled_orders")

    __table_args__ = (
        db.CheckConstraint("duration IN ('12hr', '24hr')", name="ck_orders_duration"),
        db.CheckConstraint("total_cost >= 0", name="ck_orders_total_cost"),
        db.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_orders_status",
        ),
        db.Index("ix_orders_status_created", "status", "created_at"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "equipment_id": self.equipment_id,
            "equipment_name": self.equipment.name if self.equipment else None,
            "duration": self.duration,
            "rent_date": self.rent_date.isoformat(),
            "return_date": self.return_date.isoformat(),
            "total_cost": str(self.total_cost),
            "status": self.status,
            "handled_by": self.handled_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
