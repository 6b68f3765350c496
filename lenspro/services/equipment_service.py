from decimal import Decimal

from flask import current_app

from lenspro.errors import AppError
from lenspro.extensions import cache, db
from lenspro.models import Equipment

CATALOG_CACHE_KEY = "catalog:available"


class EquipmentService:
    @staticmethod
    def _parse_rate(value, label):
        try:
            rate = Decimal(str(value).strip())
        except Exception as exc:
            raise AppError(f"{label} must be a number.", 400) from exc
        if not rate.is_finite() or rate < 0:
            raise AppError(f"{label} cannot be negative.", 400)
        return rate.quantize(Decimal("0.01"))

    @staticmethod
    def _parse_bool(value, default=True):
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}

    @staticmethod
    def list_available():
        """Catalog rows for shoppers, served from cache when possible."""
        cached = cache.get(CATALOG_CACHE_KEY)
        if cached is not None:
            return cached
        rows = [
            item.to_dict()
            for item in Equipment.query.filter_by(available=True).order_by(Equipment.name).all()
        ]
        cache.set(CATALOG_CACHE_KEY, rows)
        return rows

    @staticmethod
    def list_all():
        return Equipment.query.order_by(Equipment.name).all()

    @staticmethod
    def get(equipment_id, available_only=False):
        item = db.session.get(Equipment, equipment_id) if equipment_id is not None else None
        if not item or (available_only and not item.available):
            raise AppError("Equipment not found.", 404)
        return item

    @staticmethod
    def create(payload):
        name = (payload.get("name") or "").strip()
        if not name:
            raise AppError("Equipment name is required.", 400)
        if payload.get("rate_12hr") in (None, "") or payload.get("rate_24hr") in (None, ""):
            raise AppError("Both 12hr and 24hr rates are required.", 400)

        item = Equipment(
            name=name,
            description=(payload.get("description") or "").strip() or None,
            image_url=(payload.get("image_url") or "").strip() or None,
            rate_12hr=EquipmentService._parse_rate(payload.get("rate_12hr"), "12hr rate"),
            rate_24hr=EquipmentService._parse_rate(payload.get("rate_24hr"), "24hr rate"),
            available=EquipmentService._parse_bool(payload.get("available")),
        )
        db.session.add(item)
        db.session.commit()
        cache.delete(CATALOG_CACHE_KEY)
        current_app.logger.info("Equipment %s created: %s", item.id, item.name)
        return item

    @staticmethod
    def update(equipment_id, payload):
        item = EquipmentService.get(equipment_id)
        if "name" in payload:
            name = (payload.get("name") or "").strip()
            if not name:
                raise AppError("Equipment name is required.", 400)
            item.name = name
        if "description" in payload:
            item.description = (payload.get("description") or "").strip() or None
        if "image_url" in payload and payload.get("image_url") is not None:
            item.image_url = (payload.get("image_url") or "").strip() or None
        if payload.get("rate_12hr") not in (None, ""):
            item.rate_12hr = EquipmentService._parse_rate(payload["rate_12hr"], "12hr rate")
        if payload.get("rate_24hr") not in (None, ""):
            item.rate_24hr = EquipmentService._parse_rate(payload["rate_24hr"], "24hr rate")
        if "available" in payload:
            item.available = EquipmentService._parse_bool(payload.get("available"), default=item.available)
        db.session.commit()
        cache.delete(CATALOG_CACHE_KEY)
        return item

    @staticmethod
    def delete(equipment_id):
        item = EquipmentService.get(equipment_id)
        if item.orders.count():
            raise AppError("Equipment has orders. Mark it unavailable instead.", 409)
        db.session.delete(item)
        db.session.commit()
        cache.delete(CATALOG_CACHE_KEY)
        current_app.logger.info("Equipment %s deleted", equipment_id)
