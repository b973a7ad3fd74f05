"""
Web application module for the Courtside rotation application.

This module contains the Flask server exposing JSON endpoints for the
session controls, roster management, admin actions and analytics.
"""
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request

from ..config import Settings
from ..errors import ValidationError
from ..models import SessionConfig
from ..services import ServiceFactory, SessionAnalyticsService
from ..services.roster_store import RosterStore
from ..utils import APP_TITLE

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Services are created once through the service factory and shared by
    every request.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[RosterStore] = None,
        auto_tick: bool = True,
    ):
        self.service_factory = ServiceFactory(settings=settings, store=store)
        services = self.service_factory.create_complete_service_suite(auto_tick=auto_tick)
        self.store = services["store"]
        self.orchestrator = services["orchestrator"]
        self.roster_service = services["roster"]

    def analytics(self) -> SessionAnalyticsService:
        # The orchestrator swaps its session on start/end, so build per request
        return self.service_factory.create_analytics_service(self.orchestrator)


def _json_body() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RosterStore] = None,
    auto_tick: bool = True,
) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        settings: Deployment settings (read from the environment if omitted)
        store: Roster store to use instead of the configured one
        auto_tick: Whether rounds count down on a background thread

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = WebAppState(settings=settings, store=store, auto_tick=auto_tick)
    app.extensions["courtside"] = app_state

    @app.route("/")
    def index():
        return jsonify({"success": True, "title": APP_TITLE})

    # ==================== Session ==================== #

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Current state, timer and round."""
        try:
            return jsonify({"success": True, "session": app_state.orchestrator.status()})
        except Exception as e:
            logger.exception("State request failed")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/session/start", methods=["POST"])
    def start_session():
        if app_state.orchestrator.start():
            return jsonify({"success": True, "session": app_state.orchestrator.status()})
        return jsonify({"success": False, "error": app_state.orchestrator.last_error}), 409

    @app.route("/api/session/pause", methods=["POST"])
    def pause_session():
        if app_state.orchestrator.pause():
            return jsonify({"success": True, "message": "Round paused"})
        return jsonify({"success": False, "error": "No running round to pause"}), 409

    @app.route("/api/session/resume", methods=["POST"])
    def resume_session():
        if app_state.orchestrator.resume():
            return jsonify({"success": True, "message": "Round resumed"})
        return jsonify({"success": False, "error": "No paused round to resume"}), 409

    @app.route("/api/session/next", methods=["POST"])
    def next_round():
        """Finish the current round now; ``round`` guards against double clicks."""
        data = _json_body()
        expected = data.get("round")
        try:
            expected = int(expected) if expected is not None else None
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "round must be a number"}), 400

        if app_state.orchestrator.manual_next(expected):
            return jsonify({"success": True, "session": app_state.orchestrator.status()})
        error = app_state.orchestrator.last_error or "Round already advanced or no session running"
        return jsonify({"success": False, "error": error}), 409

    @app.route("/api/session/end", methods=["POST"])
    def end_session():
        app_state.orchestrator.end()
        return jsonify({"success": True, "message": "Session ended"})

    @app.route("/api/settings", methods=["GET"])
    def get_settings():
        return jsonify({"success": True, "settings": app_state.orchestrator.config.to_dict()})

    @app.route("/api/settings", methods=["POST"])
    def update_settings():
        """Change round length, warning lead, courts or grouping mode."""
        try:
            config = SessionConfig.from_dict(_json_body(), base=app_state.orchestrator.config)
        except (TypeError, ValueError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        app_state.orchestrator.configure(config)
        return jsonify({"success": True, "settings": config.to_dict()})

    # ==================== Roster ==================== #

    @app.route("/api/players", methods=["GET"])
    def get_players():
        try:
            players = app_state.roster_service.list_players()
        except Exception as e:
            logger.exception("Could not load players")
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "players": [p.to_dict() for p in players]})

    @app.route("/api/players", methods=["POST"])
    def upsert_players():
        players = _json_body().get("players")
        if not isinstance(players, list) or not players:
            return jsonify({"success": False, "error": "No players provided"}), 400
        try:
            result = app_state.roster_service.save_players(players)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        if not result.ok:
            return jsonify({"success": False, "error": str(result.error)}), 500
        return jsonify({"success": True, "rows": result.rows})

    @app.route("/api/players", methods=["PATCH"])
    def patch_players():
        updates = _json_body().get("updates")
        if not isinstance(updates, list):
            return jsonify({"success": False, "error": "Missing updates array"}), 400
        try:
            report = app_state.roster_service.update_players(updates)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        status = 200 if report.ok else 207
        return jsonify({"success": report.ok, "report": report.to_dict()}), status

    @app.route("/api/players", methods=["DELETE"])
    def delete_player():
        try:
            result = app_state.roster_service.delete_player(_json_body().get("id"))
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        if not result.ok:
            return jsonify({"success": False, "error": str(result.error)}), 500
        return jsonify({"success": True, "deleted": len(result.rows)})

    @app.route("/api/players/<player_id>/presence", methods=["POST"])
    def set_presence(player_id: str):
        present = bool(_json_body().get("present", True))
        result = app_state.roster_service.set_presence(player_id, present)
        if not result.ok:
            return jsonify({"success": False, "error": str(result.error)}), 500
        if not result.rows:
            return jsonify({"success": False, "error": f"Unknown player: {player_id}"}), 404
        return jsonify({"success": True, "player": result.rows[0]})

    # ==================== Admin ==================== #

    @app.route("/api/admin/verify", methods=["POST"])
    def verify_admin():
        ok = app_state.roster_service.admin_gate.verify(_json_body().get("password"))
        return jsonify({"ok": ok}), (200 if ok else 401)

    @app.route("/api/admin/reset-stats", methods=["POST"])
    def reset_stats():
        report = app_state.roster_service.reset_all_stats(_json_body().get("password"))
        if report is None:
            return jsonify({"success": False, "error": "Invalid admin password"}), 401
        return jsonify({"success": report.ok, "report": report.to_dict()})

    # ==================== Analytics ==================== #

    @app.route("/api/analytics/report", methods=["GET"])
    def get_analytics_report():
        present = [p for p in app_state.orchestrator.known_roster() if p.is_present]
        report = app_state.analytics().generate_session_report(present)
        return jsonify({"success": True, "report": asdict(report)})

    @app.route("/api/analytics/export", methods=["GET"])
    def export_analytics_report():
        present = [p for p in app_state.orchestrator.known_roster() if p.is_present]
        csv_data = app_state.analytics().export_report_csv(present)
        return Response(
            csv_data,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=session_report.csv"},
        )

    return app


def run_web_app(settings: Optional[Settings] = None) -> None:
    """
    Run the web application.

    Args:
        settings: Deployment settings (read from the environment if omitted)
    """
    settings = settings or Settings.from_env()
    app = create_app(settings)
    # Bind only to localhost unless configured otherwise
    app.run(host=settings.host, port=settings.port, debug=False)
