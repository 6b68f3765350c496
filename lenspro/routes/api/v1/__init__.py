from flask import Blueprint

from lenspro.extensions import csrf
from lenspro.routes.api.v1.auth import api_auth_bp
from lenspro.routes.api.v1.cart import api_cart_bp, api_checkout_bp
from lenspro.routes.api.v1.equipment import api_equipment_bp
from lenspro.routes.api.v1.orders import api_order_bp
from lenspro.routes.api.v1.suggestions import api_suggestion_bp
from lenspro.routes.api.v1.users import api_user_bp

api_v1_bp = Blueprint("api_v1", __name__)
api_v1_bp.register_blueprint(api_auth_bp, url_prefix="/auth")
api_v1_bp.register_blueprint(api_equipment_bp, url_prefix="/equipment")
api_v1_bp.register_blueprint(api_cart_bp, url_prefix="/cart")
api_v1_bp.register_blueprint(api_checkout_bp, url_prefix="/checkout")
api_v1_bp.register_blueprint(api_order_bp, url_prefix="/orders")
api_v1_bp.register_blueprint(api_suggestion_bp, url_prefix="/suggestions")
api_v1_bp.register_blueprint(api_user_bp, url_prefix="/users")

csrf.exempt(api_v1_bp)
