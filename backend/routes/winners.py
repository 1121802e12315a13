from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..config import load_settings
from ..schemas import WinnerResponse, WinnersQuery
from ..services.winners import WinnerRepository

bp = Blueprint("winners", __name__)
winner_repo = WinnerRepository()


@bp.get("")
def list_winners():
    query = WinnersQuery(**request.args.to_dict())
    limit = query.limit or load_settings().engine.leaderboard_size
    records = winner_repo.list_winners(limit=limit, prize_type=query.prize_type)
    return jsonify([WinnerResponse.from_record(record).model_dump(mode="json") for record in records])
