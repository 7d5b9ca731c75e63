"""Entry point for process managers, e.g. ``gunicorn -k eventlet -w 1 wsgi:app``.

Rooms live in process memory, so run a single worker.
"""
import logging
import os

from dotenv import load_dotenv

load_dotenv()
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

try:
    from backend.sketchspy.server import create_app
except ImportError:  # pragma: no cover
    from sketchspy.server import create_app

app, socketio = create_app()
