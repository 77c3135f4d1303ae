from __future__ import annotations

from flask import Flask, request

from ..common.http import as_json, json_body, login_required, session_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.admin_service

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @login_required
    def admin_stats():
        return as_json(svc.get_overview_stats(session_user()))

    @app.route("/api/admin/activities", methods=["GET"], endpoint="admin_activities")
    @login_required
    def admin_activities():
        limit = request.args.get("limit", default=10, type=int)
        return as_json(svc.get_recent_activities(session_user(), limit))

    @app.route("/api/admin/drivers", methods=["GET"], endpoint="admin_drivers")
    @login_required
    def admin_drivers():
        return as_json(svc.get_all_drivers(session_user()))

    @app.route("/api/admin/drivers", methods=["POST"], endpoint="create_driver")
    @login_required
    def create_driver():
        return as_json(svc.create_driver(session_user(), json_body())), 201

    @app.route("/api/admin/drivers/<driver_id>", methods=["PATCH"], endpoint="update_driver")
    @login_required
    def update_driver(driver_id: str):
        return as_json(svc.update_driver(session_user(), driver_id, json_body()))

    @app.route("/api/admin/drivers/<driver_id>", methods=["DELETE"], endpoint="delete_driver")
    @login_required
    def delete_driver(driver_id: str):
        svc.delete_driver(session_user(), driver_id)
        return "", 204

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @login_required
    def admin_users():
        return as_json(svc.get_all_users(session_user()))

    @app.route("/api/admin/buses", methods=["GET"], endpoint="admin_buses")
    @login_required
    def admin_buses():
        return as_json(svc.get_all_buses(session_user()))

    @app.route("/api/admin/analytics", methods=["GET"], endpoint="admin_analytics")
    @login_required
    def admin_analytics():
        return as_json(svc.get_system_analytics(session_user()))

    @app.route("/api/admin/report", methods=["GET"], endpoint="admin_report")
    @login_required
    def admin_report():
        return as_json(svc.generate_system_report(session_user()))
