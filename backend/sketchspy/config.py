import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO (empty = pick per platform, see server.create_app)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Seed for room codes, turn order and imposter picks (empty = system entropy)
    RANDOM_SEED = os.environ.get("RANDOM_SEED", "")

    # Roster
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "3"))
    MAX_PLAYERS = int(os.environ.get("MAX_PLAYERS", "8"))

    # Phase timers
    ROLE_REVEAL_DURATION_SEC = int(os.environ.get("ROLE_REVEAL_DURATION_SEC", "5"))
    VOTING_DURATION_SEC = int(os.environ.get("VOTING_DURATION_SEC", "30"))
    IMPOSTER_GUESS_DURATION_SEC = int(os.environ.get("IMPOSTER_GUESS_DURATION_SEC", "20"))
    # 0 keeps voting / guess countdowns client-side only
    ENFORCE_PHASE_TIMERS = os.environ.get("ENFORCE_PHASE_TIMERS", "1") == "1"
