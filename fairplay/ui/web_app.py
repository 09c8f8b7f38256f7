"""
Web application module for the Fairplay rotation engine.

This module contains the Flask server that hosts a single in-memory match and
exposes JSON API endpoints for squad edits, periods, substitutions and the
role point report. The host owns the clock: every action uses ``now_ts()``
unless the request body carries an explicit ``"now"`` (epoch seconds).
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional

from flask import Flask, Response, jsonify, request

from ..models import MatchState, initialize_players
from ..services import (
    ChangeGoalieCommand, EndPeriodCommand, MatchCommandManager, MatchOperationError,
    MatchService, ReportService, SubstituteCommand
)
from ..services.match_commands import MatchCommand
from ..services.squad_service import set_captain
from ..services.stint_service import stint_elapsed_seconds
from ..utils import DEFAULT_HOST, DEFAULT_PORT, INITIAL_ROSTER, now_ts

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Owns the match state and the services operating on it. A lock serializes
    request handlers so every action runs to completion before the next one.
    """

    def __init__(self, roster_names: Optional[list] = None):
        names = INITIAL_ROSTER if roster_names is None else roster_names
        self.match_state = MatchState(players=initialize_players(names))
        self.match_service = MatchService(self.match_state)
        self.report_service = ReportService(self.match_state)
        self.command_manager = MatchCommandManager()
        self.lock = threading.Lock()


def _request_data() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _request_now(data: Dict[str, Any]) -> float:
    if data.get("now") is not None:
        return float(data["now"])
    return now_ts()


def create_app(state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        state: Application state; a fresh one with the default roster if omitted

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = state or WebAppState()

    def _respond(action: Callable[[], Dict[str, Any]]):
        """Run an action under the state lock and wrap the result as JSON."""
        try:
            with app_state.lock:
                payload = action()
            return jsonify({"success": True, **payload})
        except (MatchOperationError, ValueError, KeyError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception as e:
            logger.exception("Unhandled error in %s", request.path)
            return jsonify({"success": False, "error": str(e)}), 500

    def _run_command(command: MatchCommand) -> Dict[str, Any]:
        if not app_state.command_manager.execute_command(command):
            raise MatchOperationError(command.last_error or f"{command.description} failed")
        return {"match": app_state.match_state.to_json()}

    # ==================== API Endpoints ==================== #

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Get the match state with live stint durations and role points."""
        def action():
            now = now_ts()
            return {
                "match": app_state.match_state.to_json(),
                "live_stint_seconds": {
                    p.id: stint_elapsed_seconds(p, now) for p in app_state.match_state.players
                },
                "points": {
                    pid: points.to_dict()
                    for pid, points in app_state.match_service.role_points().items()
                },
                "squad": app_state.match_service.squad_overview(),
                "rotation": app_state.match_service.rotation_recommendation(),
            }
        return _respond(action)

    @app.route("/api/match/configure", methods=["POST"])
    def configure_match():
        data = _request_data()

        def action():
            app_state.match_service.configure_match(
                period_count=data.get("period_count"),
                formation_type=data.get("formation_type"),
                period_duration_minutes=data.get("period_duration_minutes"),
            )
            return {"match": app_state.match_state.to_json()}
        return _respond(action)

    @app.route("/api/squad", methods=["POST"])
    def set_squad():
        """Replace the squad selection."""
        data = _request_data()

        def action():
            selected = data.get("selected_ids")
            if not isinstance(selected, list):
                raise ValueError("selected_ids must be a list of player ids")
            now = _request_now(data) if app_state.match_state.match_started else None
            selection = app_state.match_service.set_squad(selected, now=now)
            return {"selected_ids": selection}
        return _respond(action)

    @app.route("/api/players/temporary", methods=["POST"])
    def add_temporary():
        data = _request_data()

        def action():
            player = app_state.match_service.add_temporary_player(data.get("name", ""))
            return {"player": player.to_dict()}
        return _respond(action)

    @app.route("/api/players/inactive", methods=["POST"])
    def set_inactive():
        data = _request_data()

        def action():
            app_state.match_service.set_player_inactive(
                data["player_id"], bool(data.get("inactive", True))
            )
            return {"player_id": data["player_id"]}
        return _respond(action)

    @app.route("/api/captain", methods=["POST"])
    def set_match_captain():
        data = _request_data()

        def action():
            set_captain(app_state.match_state.players, data.get("player_id"))
            return {"captain_id": data.get("player_id")}
        return _respond(action)

    @app.route("/api/period/start", methods=["POST"])
    def start_period():
        data = _request_data()

        def action():
            formation = data.get("formation")
            if not isinstance(formation, dict):
                raise ValueError("formation must be an object")
            app_state.match_service.start_period(formation, _request_now(data))
            return {"match": app_state.match_state.to_json()}
        return _respond(action)

    @app.route("/api/substitute", methods=["POST"])
    def substitute():
        data = _request_data()

        def action():
            return _run_command(SubstituteCommand(
                app_state.match_service,
                data["player_out_id"],
                data["player_in_id"],
                _request_now(data),
            ))
        return _respond(action)

    @app.route("/api/goalie", methods=["POST"])
    def change_goalie():
        data = _request_data()

        def action():
            return _run_command(ChangeGoalieCommand(
                app_state.match_service, data["player_id"], _request_now(data)
            ))
        return _respond(action)

    @app.route("/api/pair/swap", methods=["POST"])
    def swap_pair():
        data = _request_data()

        def action():
            app_state.match_service.swap_pair_roles(data["pair_key"], _request_now(data))
            return {"match": app_state.match_state.to_json()}
        return _respond(action)

    @app.route("/api/pause", methods=["POST"])
    def pause():
        data = _request_data()

        def action():
            app_state.match_service.pause(_request_now(data))
            return {"paused": True}
        return _respond(action)

    @app.route("/api/resume", methods=["POST"])
    def resume():
        data = _request_data()

        def action():
            app_state.match_service.resume(_request_now(data))
            return {"paused": False}
        return _respond(action)

    @app.route("/api/period/end", methods=["POST"])
    def end_period():
        data = _request_data()

        def action():
            return _run_command(EndPeriodCommand(app_state.match_service, _request_now(data)))
        return _respond(action)

    @app.route("/api/match/end", methods=["POST"])
    def end_match():
        data = _request_data()

        def action():
            app_state.match_service.end_match(_request_now(data))
            app_state.command_manager.clear_history()
            return {"match": app_state.match_state.to_json()}
        return _respond(action)

    @app.route("/api/points", methods=["GET"])
    def get_points():
        def action():
            return {
                "points": {
                    pid: points.to_dict()
                    for pid, points in app_state.match_service.role_points().items()
                }
            }
        return _respond(action)

    @app.route("/api/report", methods=["GET"])
    def get_report():
        """Export the end-of-match report as text or CSV."""
        fmt = request.args.get("format", "text")
        if fmt not in ("text", "csv"):
            return jsonify({"success": False, "error": f"Unsupported format '{fmt}'"}), 400

        with app_state.lock:
            if fmt == "csv":
                body = app_state.report_service.export_csv()
                mimetype = "text/csv"
            else:
                body = app_state.report_service.export_text()
                mimetype = "text/plain"
        return Response(body, mimetype=mimetype)

    @app.route("/api/undo", methods=["POST"])
    def undo():
        def action():
            if not app_state.command_manager.can_undo():
                raise MatchOperationError("Nothing to undo")
            if not app_state.command_manager.undo():
                raise MatchOperationError("The match changed since the last action; history cleared")
            return {"match": app_state.match_state.to_json()}
        return _respond(action)

    @app.route("/api/redo", methods=["POST"])
    def redo():
        def action():
            if not app_state.command_manager.can_redo():
                raise MatchOperationError("Nothing to redo")
            if not app_state.command_manager.redo():
                raise MatchOperationError("The match changed since the last undo; history cleared")
            return {"match": app_state.match_state.to_json()}
        return _respond(action)

    @app.route("/api/command-history", methods=["GET"])
    def command_history():
        def action():
            return {
                "history": app_state.command_manager.get_command_history(),
                "can_undo": app_state.command_manager.can_undo(),
                "can_redo": app_state.command_manager.can_redo(),
            }
        return _respond(action)

    return app


def run_web_app(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
    """
    app = create_app()
    app.run(host=host, port=port, debug=False)
