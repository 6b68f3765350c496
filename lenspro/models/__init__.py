from lenspro.models.account import Account
from lenspro.models.equipment import Equipment
from lenspro.models.order import ORDER_STATUSES, Order
from lenspro.models.suggestion import SUGGESTION_STATUSES, Suggestion
from lenspro.models.user import USER_ROLES, User

__all__ = [
    "Account",
    "User",
    "Equipment",
    "Order",
    "Suggestion",
    "ORDER_STATUSES",
    "SUGGESTION_STATUSES",
    "USER_ROLES",
]
