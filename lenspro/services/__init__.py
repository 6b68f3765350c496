from lenspro.services.auth_service import AuthService
from lenspro.services.checkout_service import CheckoutFailurePolicy, CheckoutResult, CheckoutService, CustomerInfo
from lenspro.services.equipment_service import EquipmentService
from lenspro.services.file_service import FileService
from lenspro.services.order_service import OrderService
from lenspro.services.profile_service import ProfileOutcome, ProfileResolution, ProfileService, RetryPolicy
from lenspro.services.suggestion_service import SuggestionService
from lenspro.services.user_service import UserService

__all__ = [
    "AuthService",
    "CheckoutFailurePolicy",
    "CheckoutResult",
    "CheckoutService",
    "CustomerInfo",
    "EquipmentService",
    "FileService",
    "OrderService",
    "ProfileOutcome",
    "ProfileResolution",
    "ProfileService",
    "RetryPolicy",
    "SuggestionService",
    "UserService",
]
