# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from authgate.infrastructure.health import check_database
from authgate.shared.logging import logger


class MiscController:
    def __init__(self, *, engine: Engine) -> None:
        self._engine = engine

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            check_database(self._engine)
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"health: database check failed {type(exc).__name__}")
            status["ok"] = False
            status["database"] = "error"
        return jsonify(status), 200 if status["ok"] else 503
