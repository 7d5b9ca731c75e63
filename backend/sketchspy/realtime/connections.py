from __future__ import annotations

from dataclasses import dataclass
from threading import RLock

from ..game.errors import AlreadyInRoom


@dataclass
class Connection:
    sid: str
    player_id: str | None = None
    room_code: str | None = None


class ConnectionTable:
    """Socket.IO sid <-> player id <-> room code, owned by the transport."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._by_sid: dict[str, Connection] = {}
        self._sid_by_player: dict[str, str] = {}

    def connect(self, sid: str) -> Connection:
        with self._lock:
            conn = self._by_sid.get(sid)
            if conn is None:
                conn = Connection(sid=sid)
                self._by_sid[sid] = conn
            return conn

    def get(self, sid: str) -> Connection | None:
        with self._lock:
            return self._by_sid.get(sid)

    def ensure_free(self, sid: str) -> None:
        conn = self.get(sid)
        if conn is not None and conn.player_id is not None:
            raise AlreadyInRoom()

    def bind(self, sid: str, player_id: str, room_code: str) -> Connection:
        with self._lock:
            conn = self.connect(sid)
            conn.player_id = player_id
            conn.room_code = room_code
            self._sid_by_player[player_id] = sid
            return conn

    def unbind(self, sid: str) -> Connection | None:
        """Detach the player but keep the socket registered."""
        with self._lock:
            conn = self._by_sid.get(sid)
            if conn is None or conn.player_id is None:
                return None
            detached = Connection(sid=sid, player_id=conn.player_id, room_code=conn.room_code)
            self._sid_by_player.pop(conn.player_id, None)
            conn.player_id = None
            conn.room_code = None
            return detached

    def disconnect(self, sid: str) -> Connection | None:
        with self._lock:
            conn = self._by_sid.pop(sid, None)
            if conn is not None and conn.player_id is not None:
                self._sid_by_player.pop(conn.player_id, None)
            return conn

    def sid_for(self, player_id: str) -> str | None:
        with self._lock:
            return self._sid_by_player.get(player_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_sid)
