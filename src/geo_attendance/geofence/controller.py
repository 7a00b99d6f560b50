from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, login_required
from ..common.http import error_response
from ..container import Container
from ..users.model import Principal

# JSON body key -> service keyword
_FIELDS = {
    "name": "name",
    "address": "address",
    "latitude": "latitude",
    "longitude": "longitude",
    "radius": "radius",
    "isActive": "is_active",
}


def _zone_fields(data: dict) -> dict:
    return {kw: data[key] for key, kw in _FIELDS.items() if key in data}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/geofence", methods=["GET"], endpoint="geofence_active")
    @login_required
    def active_zones(principal: Principal):
        try:
            zones = container.geofence_service.list_active()
        except Exception as e:
            return error_response(e)
        return jsonify({"geofenceSettings": [z.to_dict() for z in zones]})

    @app.route("/api/admin/geofence", methods=["GET"], endpoint="admin_geofence_list")
    @admin_required
    def list_zones(principal: Principal):
        try:
            zones = container.geofence_service.list_zones(current_role=principal.role)
        except Exception as e:
            return error_response(e)
        return jsonify({"geofenceSettings": [z.to_dict() for z in zones]})

    @app.route("/api/admin/geofence", methods=["POST"], endpoint="admin_geofence_create")
    @admin_required
    def create_zone(principal: Principal):
        data = request.get_json(silent=True) or {}
        try:
            zone = container.geofence_service.upsert_zone(current_role=principal.role, **_zone_fields(data))
        except Exception as e:
            return error_response(e)
        return jsonify({"geofenceSettings": zone.to_dict()}), 201

    @app.route("/api/admin/geofence/<int:zone_id>", methods=["PUT"], endpoint="admin_geofence_update")
    @admin_required
    def update_zone(principal: Principal, zone_id: int):
        data = request.get_json(silent=True) or {}
        try:
            zone = container.geofence_service.upsert_zone(
                current_role=principal.role, zone_id=zone_id, **_zone_fields(data)
            )
        except Exception as e:
            return error_response(e)
        return jsonify({"geofenceSettings": zone.to_dict()})
