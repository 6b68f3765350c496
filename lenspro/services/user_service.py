from flask import current_app

from lenspro.authz import Role
from lenspro.errors import AppError
from lenspro.extensions import db
from lenspro.models import User

SELF_EDITABLE_FIELDS = {"name", "phone"}


class UserService:
    @staticmethod
    def list_users():
        return User.query.order_by(User.name).all()

    @staticmethod
    def get(user_id):
        user = db.session.get(User, user_id) if user_id is not None else None
        if not user:
            raise AppError("User not found.", 404)
        return user

    @staticmethod
    def update_user(user_id, patch, actor=None):
        user = UserService.get(user_id)
        is_admin = actor is not None and actor.role_enum is Role.ADMIN
        if actor is not None and not is_admin:
            if actor.id != user.id:
                raise AppError("Not authorized to edit this user.", 403)
            disallowed = set(patch) - SELF_EDITABLE_FIELDS
            if disallowed:
                raise AppError("Only name and phone can be changed.", 403)

        if "name" in patch:
            name = (patch.get("name") or "").strip()
            if not name:
                raise AppError("Name is required.", 400)
            user.name = name
        if "phone" in patch:
            user.phone = (patch.get("phone") or "").strip() or None
        if "role" in patch:
            user.role = Role.parse(patch.get("role")).value
        db.session.commit()
        return user

    @staticmethod
    def change_role(user_id, role, actor):
        role = Role.parse(role)
        if actor.id == user_id and role is not Role.ADMIN:
            raise AppError("Admins cannot demote themselves.", 400)
        user = UserService.update_user(user_id, {"role": role.value}, actor=actor)
        current_app.logger.info("User %s role set to %s by %s", user.id, user.role, actor.id)
        return user
