from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..container import Container
from ..core.enums import ClockStatus
from ..core.exceptions import (
    CapabilityUnavailable,
    DomainError,
    GeofenceViolation,
    LocationError,
    StorageFailure,
    ToggleInProgress,
    Unauthenticated,
    ValidationError,
)
from ..geolocation.provider import GeolocationProvider, ReportedPosition
from .recorder import AttendanceRecorder, ToggleOutcome

logger = logging.getLogger(__name__)

ERROR_HTTP_STATUS = {
    Unauthenticated.kind: 401,
    GeofenceViolation.kind: 403,
    ToggleInProgress.kind: 409,
    LocationError.kind: 400,
    CapabilityUnavailable.kind: 400,
    ValidationError.kind: 400,
    StorageFailure.kind: 503,
    DomainError.kind: 500,
}


def _status_payload(status: Optional[ClockStatus]) -> Dict[str, Any]:
    return {
        "status": status.value if status else None,
        "button_label": status.action_label if status else None,
    }


def _device_info_from_request(client_info: Any) -> Dict[str, Any]:
    """Opaque audit payload: whatever the client sent plus what the request shows."""
    info: Dict[str, Any] = dict(client_info) if isinstance(client_info, dict) else {}
    if client_info is not None and not isinstance(client_info, dict):
        info["raw"] = str(client_info)
    info.setdefault("user_agent", request.headers.get("User-Agent", ""))
    info["remote_addr"] = request.remote_addr
    return info


def outcome_to_json(outcome: ToggleOutcome) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "success": outcome.success,
        "message": outcome.message,
        "error": outcome.error,
        "location": outcome.location.as_dict() if outcome.location else None,
        "distance_meters": outcome.distance_meters,
        **_status_payload(outcome.status),
    }
    if outcome.event is not None:
        body["event"] = {
            "id": outcome.event.attendance_id,
            "status": outcome.event.status.value,
            "timestamp": outcome.event.timestamp.isoformat(),
            "is_within_geofence": outcome.event.is_within_geofence,
        }
    if outcome.login_required:
        body["login_url"] = url_for("login")
    return body


def register(app: Flask, container: Container) -> None:
    guard = container.session_guard

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if guard.current_session() is None:
                flash("Please log in to continue!", "warning")
                return redirect(url_for("login"))
            return view(*args, **kwargs)

        return wrapper

    def api_login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if guard.current_session() is None:
                return jsonify({"success": False, "error": Unauthenticated.kind, "login_url": url_for("login")}), 401
            return view(*args, **kwargs)

        return wrapper

    def _current_recorder() -> AttendanceRecorder:
        return container.recorders.for_user(guard.require_session().user_id)

    def _load_status(recorder: AttendanceRecorder) -> ClockStatus:
        # Keep whatever an in-flight toggle is about to commit.
        if recorder.in_flight and recorder.status is not None:
            return recorder.status
        return recorder.load()

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        auth = guard.require_session()
        recorder = container.recorders.for_user(auth.user_id)
        status: Optional[ClockStatus] = None
        history = []
        try:
            status = _load_status(recorder)
            history = container.attendance_service.get_history_ui(auth.user_id)
        except StorageFailure:
            logger.exception("Dashboard load failed for user %s", auth.user_id)
            flash("Could not load your attendance status, please reload", "danger")
        return render_template(
            "dashboard.html",
            name=auth.full_name,
            status=status.value if status else None,
            button_label=status.action_label if status else None,
            data=history,
            active_page="dashboard",
        )

    @app.route("/api/attendance/status", methods=["GET"], endpoint="api_attendance_status")
    @api_login_required
    def api_attendance_status():
        recorder = _current_recorder()
        try:
            status = _load_status(recorder)
        except StorageFailure as e:
            logger.exception("Status query failed for user %s", recorder.user_id)
            return jsonify({"success": False, "error": e.kind, "message": "Could not load attendance status"}), 503
        return jsonify({"success": True, **_status_payload(status)}), 200

    @app.route("/api/attendance/toggle", methods=["POST"], endpoint="api_attendance_toggle")
    @api_login_required
    def api_attendance_toggle():
        data = request.get_json(silent=True) or {}
        recorder = _current_recorder()

        geolocation = GeolocationProvider(ReportedPosition.from_payload(data.get("position")))
        outcome = recorder.toggle(geolocation, device_info=_device_info_from_request(data.get("device_info")))

        http_status = 200 if outcome.success else ERROR_HTTP_STATUS.get(outcome.error or "", 400)
        return jsonify(outcome_to_json(outcome)), http_status

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @api_login_required
    def api_attendance_history():
        auth = guard.require_session()
        limit = request.args.get("limit", type=int)
        try:
            rows = container.attendance_service.get_history_ui(auth.user_id, limit=limit)
        except StorageFailure as e:
            logger.exception("History query failed for user %s", auth.user_id)
            return jsonify({"success": False, "error": e.kind, "message": "Could not load attendance history"}), 503
        return jsonify({"success": True, "rows": rows}), 200

    @app.route("/api/geofence", methods=["GET"], endpoint="api_geofence")
    @api_login_required
    def api_geofence():
        try:
            setting = container.geofence_repo.get_active()
        except Exception:
            logger.exception("Geofence query failed")
            return jsonify({"success": False, "error": StorageFailure.kind, "message": "Could not load geofence"}), 503

        if setting is None:
            return jsonify({"success": True, "geofence": None}), 200
        return jsonify({
            "success": True,
            "geofence": {
                "name": setting.name,
                "center": {"lat": setting.center_lat, "lng": setting.center_lng},
                "radius_meters": setting.radius_meters,
            },
        }), 200
