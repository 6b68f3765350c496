from flask import Blueprint, jsonify, request

from lenspro.authz import Requirement
from lenspro.decorators import gated
from lenspro.services import EquipmentService

api_equipment_bp = Blueprint("api_equipment", __name__)


@api_equipment_bp.get("")
def list_equipment():
    return jsonify(EquipmentService.list_available())


@api_equipment_bp.get("/all")
@gated(Requirement.STAFF_OR_ADMIN)
def list_all_equipment():
    return jsonify([item.to_dict() for item in EquipmentService.list_all()])


@api_equipment_bp.get("/<int:equipment_id>")
def get_equipment(equipment_id):
    return jsonify(EquipmentService.get(equipment_id, available_only=True).to_dict())


@api_equipment_bp.post("")
@gated(Requirement.ADMIN)
def create_equipment():
    item = EquipmentService.create(request.get_json(silent=True) or {})
    return jsonify(item.to_dict()), 201


@api_equipment_bp.patch("/<int:equipment_id>")
@gated(Requirement.ADMIN)
def update_equipment(equipment_id):
    item = EquipmentService.update(equipment_id, request.get_json(silent=True) or {})
    return jsonify(item.to_dict())


@api_equipment_bp.delete("/<int:equipment_id>")
@gated(Requirement.ADMIN)
def delete_equipment(equipment_id):
    EquipmentService.delete(equipment_id)
    return jsonify({"ok": True})
