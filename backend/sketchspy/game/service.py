from __future__ import annotations

import logging
import random
import string
from threading import RLock

from .errors import RoomNotFound
from .models import MAX_PLAYERS, MIN_PLAYERS
from .room import GameRoom
from .words import WordBank


logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase
ROOM_CODE_LENGTH = 4


def generate_room_code(rng: random.Random) -> str:
    return "".join(rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def normalize_room_code(code: str) -> str:
    return (code or "").strip().upper()


class RoomRegistry:
    """Table of live rooms.

    The registry lock only guards the table itself; each room's state is
    guarded by that room's own lock, so rooms never block one another.
    """

    def __init__(
        self,
        word_bank: WordBank | None = None,
        rng: random.Random | None = None,
        min_players: int = MIN_PLAYERS,
        max_players: int = MAX_PLAYERS,
    ) -> None:
        self.word_bank = word_bank or WordBank()
        self._rng = rng or random.Random()
        self._min_players = min_players
        self._max_players = max_players
        self._lock = RLock()
        self._rooms: dict[str, GameRoom] = {}

    @classmethod
    def from_config(cls, config) -> "RoomRegistry":
        seed = str(config.get("RANDOM_SEED", "") or "").strip()
        return cls(
            rng=random.Random(seed) if seed else random.Random(),
            min_players=int(config.get("MIN_PLAYERS", MIN_PLAYERS)),
            max_players=int(config.get("MAX_PLAYERS", MAX_PLAYERS)),
        )

    def create_room(self) -> GameRoom:
        with self._lock:
            code = generate_room_code(self._rng)
            while code in self._rooms:
                code = generate_room_code(self._rng)

            room = GameRoom(
                code=code,
                word_bank=self.word_bank,
                rng=random.Random(self._rng.getrandbits(64)),
                min_players=self._min_players,
                max_players=self._max_players,
            )
            self._rooms[code] = room

        logger.info(f"[room-created] room={code}")
        return room

    def get_room(self, code: str) -> GameRoom | None:
        with self._lock:
            return self._rooms.get(normalize_room_code(code))

    def require_room(self, code: str) -> GameRoom:
        room = self.get_room(code)
        if room is None:
            raise RoomNotFound()
        return room

    def delete_room(self, code: str) -> bool:
        with self._lock:
            room = self._rooms.pop(normalize_room_code(code), None)
        if room is None:
            return False

        room.cancel_timer()
        logger.info(f"[room-deleted] room={room.code}")
        return True

    def list_rooms(self) -> list[GameRoom]:
        with self._lock:
            return list(self._rooms.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return self.get_room(code) is not None
