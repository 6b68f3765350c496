from lenspro.errors import AppError
from lenspro.extensions import db
from lenspro.models import SUGGESTION_STATUSES, Suggestion


class SuggestionService:
    @staticmethod
    def create_suggestion(text, suggested_by):
        text = (text or "").strip()
        suggested_by = (suggested_by or "").strip()
        if not text or not suggested_by:
            raise AppError("Please tell us your name and the equipment you would like to see.", 400)
        suggestion = Suggestion(suggestion_text=text, suggested_by=suggested_by, status="pending")
        db.session.add(suggestion)
        db.session.commit()
        return suggestion

    @staticmethod
    def list_suggestions(status=None):
        query = Suggestion.query.order_by(Suggestion.created_at.desc())
        if status:
            query = query.filter_by(status=status)
        return query.all()

    @staticmethod
    def get(suggestion_id):
        suggestion = db.session.get(Suggestion, suggestion_id) if suggestion_id is not None else None
        if not suggestion:
            raise AppError("Suggestion not found.", 404)
        return suggestion

    @staticmethod
    def update_status(suggestion_id, status):
        status = (status or "").strip().lower()
        if status not in SUGGESTION_STATUSES:
            raise AppError("Invalid suggestion status.", 400)
        suggestion = SuggestionService.get(suggestion_id)
        suggestion.status = status
        db.session.commit()
        return suggestion

    @staticmethod
    def delete(suggestion_id):
        suggestion = SuggestionService.get(suggestion_id)
        db.session.delete(suggestion)
        db.session.commit()
