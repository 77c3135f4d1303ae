from __future__ import annotations

from flask import Flask, request

from ..common.http import as_json, json_body, login_required, session_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.driver_service

    @app.route("/api/driver/buses", methods=["GET"], endpoint="driver_buses")
    @login_required
    def driver_buses():
        return as_json(svc.get_driver_buses(session_user()))

    @app.route("/api/driver/buses", methods=["POST"], endpoint="add_bus")
    @login_required
    def add_bus():
        return as_json(svc.add_bus(session_user(), json_body())), 201

    @app.route("/api/driver/buses/<bus_id>", methods=["PATCH"], endpoint="update_bus")
    @login_required
    def update_bus(bus_id: str):
        return as_json(svc.update_bus(session_user(), bus_id, json_body()))

    @app.route("/api/driver/buses/<bus_id>", methods=["DELETE"], endpoint="delete_bus")
    @login_required
    def delete_bus(bus_id: str):
        svc.delete_bus(session_user(), bus_id)
        return "", 204

    @app.route("/api/driver/buses/<bus_id>/location", methods=["PUT"], endpoint="update_bus_location")
    @login_required
    def update_bus_location(bus_id: str):
        return as_json(svc.update_bus_location(session_user(), bus_id, json_body()))

    @app.route("/api/driver/buses/<bus_id>/location/history", methods=["GET"], endpoint="bus_location_history")
    @login_required
    def bus_location_history(bus_id: str):
        limit = request.args.get("limit", default=10, type=int)
        return as_json(svc.get_bus_location_history(session_user(), bus_id, limit=limit))

    @app.route("/api/driver/stats", methods=["GET"], endpoint="driver_stats")
    @login_required
    def driver_stats():
        return as_json(svc.get_driver_stats(session_user()))
