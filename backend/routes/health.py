from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..db import engine

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return jsonify({"status": "degraded", "database": str(exc)}), 503
    return jsonify({"status": "ok"})
