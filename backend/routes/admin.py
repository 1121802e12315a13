from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..config import load_settings
from ..schemas import CommandResponse, PrizeTypeRequest, SessionStateResponse
from ..services.runtime import get_runtime

bp = Blueprint("admin", __name__)


def _require_admin() -> bool:
    settings = load_settings()
    api_key = settings.admin_api_key
    if api_key:
        provided = request.headers.get("X-Admin-Token")
        if provided != api_key:
            return False
    return True


@bp.before_request
def verify_admin():
    if not _require_admin():
        return jsonify({"error": "unauthorized"}), 401
    return None


def _command_response(accepted: bool, snapshot):
    if not accepted:
        current_app.logger.info("Draw command %s ignored in state %s", request.path, snapshot.status.value)
    payload = CommandResponse(accepted=accepted, state=SessionStateResponse.from_snapshot(snapshot))
    return jsonify(payload.model_dump(mode="json"))


@bp.get("/draw/state")
def draw_state():
    snapshot = get_runtime().snapshot()
    return jsonify(SessionStateResponse.from_snapshot(snapshot).model_dump(mode="json"))


@bp.post("/draw/start")
def start_draw():
    return _command_response(*get_runtime().start())


@bp.post("/draw/stop")
def stop_draw():
    return _command_response(*get_runtime().stop())


@bp.post("/draw/reset")
def reset_draw():
    return _command_response(*get_runtime().reset())


@bp.put("/draw/prize-type")
def set_prize_type():
    payload = request.get_json(force=True, silent=True) or {}
    data = PrizeTypeRequest(**payload)
    return _command_response(*get_runtime().set_prize_type(data.prize_type))
