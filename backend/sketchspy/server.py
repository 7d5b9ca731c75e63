from __future__ import annotations

import logging
import sys
from pathlib import Path

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.service import RoomRegistry
from .realtime.connections import ConnectionTable
from .realtime.handlers import register_socketio_handlers
from .realtime.timers import SocketIOScheduler
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .routes.words import bp as words_bp


logger = logging.getLogger(__name__)

FRONTEND_DIST = Path(__file__).resolve().parents[2] / "frontend" / "dist"


def _pick_async_mode(configured: str) -> str:
    if configured:
        return configured
    # eventlet is unreliable on Windows and on Python >= 3.13
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def _serve_frontend(app: Flask, dist_dir: Path) -> None:
    """Single-page app fallback: unknown paths get index.html."""

    @app.get("/")
    def index():
        return send_from_directory(dist_dir, "index.html")

    @app.get("/<path:path>")
    def static_proxy(path: str):
        if (dist_dir / path).is_file():
            return send_from_directory(dist_dir, path)
        return send_from_directory(dist_dir, "index.html")


def create_app(config_class=Config, scheduler=None) -> tuple[Flask, SocketIO]:
    has_frontend = FRONTEND_DIST.exists()
    app = Flask(
        __name__,
        static_folder=str(FRONTEND_DIST) if has_frontend else None,
        static_url_path="/" if has_frontend else None,
    )
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_pick_async_mode(app.config.get("SOCKETIO_ASYNC_MODE") or ""),
    )

    registry = RoomRegistry.from_config(app.config)
    connections = ConnectionTable()
    app.extensions["sketchspy"] = {"registry": registry, "connections": connections}

    for bp in (health_bp, rooms_bp, words_bp):
        app.register_blueprint(bp, url_prefix="/api")

    register_socketio_handlers(
        socketio,
        registry=registry,
        connections=connections,
        scheduler=scheduler or SocketIOScheduler(socketio),
        config=app.config,
    )

    if has_frontend:
        _serve_frontend(app, FRONTEND_DIST)

    logger.debug(f"[app-created] seeded={bool(app.config.get('RANDOM_SEED'))} frontend={has_frontend}")
    return app, socketio
