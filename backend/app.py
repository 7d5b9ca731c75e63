import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv


logger = logging.getLogger("sketchspy")


def _wants_eventlet() -> bool:
    mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if mode not in ("", "eventlet"):
        return False
    return not sys.platform.startswith("win") and sys.version_info < (3, 13)


def main() -> None:
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # must run before anything imports socket/threading
    if _wants_eventlet():
        import eventlet

        eventlet.monkey_patch()

    try:
        from backend.sketchspy.server import create_app
    except ImportError:  # pragma: no cover
        from sketchspy.server import create_app

    app, socketio = create_app()

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3001"))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"

    logger.info(f"[startup] listening on {host}:{port} async_mode={socketio.async_mode} debug={debug}")
    socketio.run(
        app,
        host=host,
        port=port,
        debug=debug,
        allow_unsafe_werkzeug=os.environ.get("ALLOW_UNSAFE_WERKZEUG", "1") == "1",
        use_reloader=os.environ.get("FLASK_USE_RELOADER", "0") == "1",
    )


if __name__ == "__main__":
    main()
