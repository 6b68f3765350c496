from lenspro.extensions import db
from lenspro.models.base import PKType, utcnow

SUGGESTION_STATUSES = ("pending", "reviewed", "implemented")


class Suggestion(db.Model):
    __tablename__ = "suggestions"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    suggestion_text = db.Column(db.Text, nullable=False)
    suggested_by = db.Column(db.String(120), nullable=False)
    status = db.Column(db.String(24), nullable=False, default="pending", index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending', 'reviewed', 'implemented')",
            name="ck_suggestions_status",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "suggestion_text": self.suggestion_text,
            "suggested_by": self.suggested_by,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
