from __future__ import annotations

from flask import Flask

from ..common.http import as_json, forget, json_body, login_required, remember, session_user
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_user():
        data = json_body()
        role_s = data.get("role")
        try:
            role = Role(role_s) if role_s else None
        except ValueError:
            raise ValidationError("Invalid account type")

        user = container.auth_service.register(
            full_name=data.get("fullName", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            phone=data.get("phone"),
            role=role,
            remember=False,
        )
        remember(user)
        return as_json(user.to_dict()), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.login(data.get("email", ""), data.get("password", ""), remember=False)
        remember(user)
        return as_json(user.to_dict())

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        forget()
        return "", 204

    @app.route("/api/profile", methods=["GET"], endpoint="profile")
    @login_required
    def profile():
        user = container.passenger_service.get_user_data(session_user().user_id)
        if user is None:
            raise NotFoundError("User profile not found")
        return as_json(user)

    @app.route("/api/profile", methods=["PATCH"], endpoint="update_profile")
    @login_required
    def update_profile():
        current = session_user()
        if current.role == Role.DRIVER:
            user = container.driver_service.update_profile(current, json_body())
        else:
            user = container.passenger_service.update_profile(current, json_body())
        return as_json(user)
