from lenspro.extensions import db
from lenspro.models.base import PKType, TimestampMixin


class Equipment(TimestampMixin, db.Model):
    __tablename__ = "equipments"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    name = db.Column(db.String(160), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    rate_12hr = db.Column(db.Numeric(10, 2), nullable=False)
    rate_24hr = db.Column(db.Numeric(10, 2), nullable=False)
    available = db.Column(db.Boolean, nullable=False, default=True, index=True)

    orders = db.relationship("Order", back_populates="equipment", lazy="dynamic")

    __table_args__ = (
        db.CheckConstraint("rate_12hr >= 0", name="ck_equipments_rate_12hr"),
        db.CheckConstraint("rate_24hr >= 0", name="ck_equipments_rate_24hr"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "rate_12hr": str(self.rate_12hr),
            "rate_24hr": str(self.rate_24hr),
            "available": self.available,
        }
