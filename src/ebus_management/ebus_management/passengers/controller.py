from __future__ import annotations

from flask import Flask, request

from ..common.http import as_json, json_body, login_required, session_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.passenger_service

    @app.route("/api/buses/search", methods=["GET"], endpoint="search_buses")
    def search_buses():
        buses = svc.search_buses(
            from_=request.args.get("from"),
            to=request.args.get("to"),
            bus_type=request.args.get("type"),
        )
        return as_json(buses)

    @app.route("/api/buses/<bus_id>/location", methods=["GET"], endpoint="bus_location")
    def bus_location(bus_id: str):
        return as_json(svc.get_bus_location(bus_id))

    @app.route("/api/bookings", methods=["GET"], endpoint="my_bookings")
    @login_required
    def my_bookings():
        return as_json(svc.get_user_bookings(session_user()))

    @app.route("/api/bookings", methods=["POST"], endpoint="book_bus")
    @login_required
    def book_bus():
        data = json_body()
        booking = svc.book_bus(
            session_user(),
            bus_id=data.get("busId", ""),
            bus_number=data.get("busNumber", ""),
            fare=data.get("fare"),
            from_=data.get("from", ""),
            to=data.get("to", ""),
        )
        return as_json(booking), 201

    @app.route("/api/bookings/<booking_id>", methods=["GET"], endpoint="booking_details")
    @login_required
    def booking_details(booking_id: str):
        return as_json(svc.get_booking_details(session_user(), booking_id))

    @app.route("/api/bookings/<booking_id>/cancel", methods=["POST"], endpoint="cancel_booking")
    @login_required
    def cancel_booking(booking_id: str):
        return as_json(svc.cancel_booking(session_user(), booking_id))
