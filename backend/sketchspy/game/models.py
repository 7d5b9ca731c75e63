from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

from .errors import InvalidPayload, InvalidSettings


GamePhase = Literal["LOBBY", "ROLE_REVEAL", "DRAWING", "VOTING", "IMPOSTER_GUESS", "SCOREBOARD"]
Role = Literal["artist", "imposter"]
CanvasMode = Literal["shared", "individual"]

MIN_PLAYERS = 3
MAX_PLAYERS = 8

PLAYER_COLORS = [
    "#E74C3C",  # red
    "#3498DB",  # blue
    "#2ECC71",  # green
    "#F39C12",  # orange
    "#9B59B6",  # purple
    "#1ABC9C",  # teal
    "#E67E22",  # dark orange
    "#34495E",  # dark blue
]


def now_ms() -> int:
    return int(time.time() * 1000)


def color_for_index(index: int) -> str:
    return PLAYER_COLORS[index % len(PLAYER_COLORS)]


@dataclass
class Player:
    name: str
    color: str
    is_host: bool = False
    is_ready: bool = False
    score: int = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def toggle_ready(self) -> None:
        self.is_ready = not self.is_ready

    def add_points(self, points: int) -> None:
        self.score += points

    def to_data(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "isHost": self.is_host,
            "isReady": self.is_ready,
            "score": self.score,
        }


@dataclass
class GameSettings:
    category: str = "random"
    custom_word: str | None = None
    draw_time_limit: int = 20
    rounds: int = 2
    canvas_mode: CanvasMode = "shared"
    win_score: int = 10

    @classmethod
    def from_payload(cls, data: Any) -> "GameSettings":
        """Build settings from a client payload, filling gaps with defaults."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise InvalidSettings("Settings must be an object")

        defaults = cls()

        category = data.get("category", defaults.category)
        if not isinstance(category, str) or not category.strip():
            raise InvalidSettings("Invalid category")

        custom_word = data.get("customWord")
        if custom_word is not None and not isinstance(custom_word, str):
            raise InvalidSettings("Invalid custom word")
        custom_word = (custom_word or "").strip() or None

        canvas_mode = data.get("canvasMode", defaults.canvas_mode)
        if canvas_mode not in ("shared", "individual"):
            raise InvalidSettings("Invalid canvas mode")

        return cls(
            category=category.strip(),
            custom_word=custom_word,
            draw_time_limit=_int_in_range(data, "drawTimeLimit", defaults.draw_time_limit, 5, 120),
            rounds=_int_in_range(data, "rounds", defaults.rounds, 1, 5),
            canvas_mode=canvas_mode,
            win_score=_int_in_range(data, "winScore", defaults.win_score, 1, 100),
        )

    def to_data(self, include_custom_word: bool = False) -> dict:
        # the custom word is the secret word; imposters must not see it
        return {
            "category": self.category,
            "customWord": self.custom_word if include_custom_word else None,
            "hasCustomWord": self.custom_word is not None,
            "drawTimeLimit": self.draw_time_limit,
            "rounds": self.rounds,
            "canvasMode": self.canvas_mode,
            "winScore": self.win_score,
        }


def _int_in_range(data: dict, key: str, default: int, low: int, high: int) -> int:
    raw = data.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidSettings(f"{key} must be an integer")
    if raw < low or raw > high:
        raise InvalidSettings(f"{key} must be between {low} and {high}")
    return raw


@dataclass
class RoleAssignment:
    player_id: str
    role: Role
    word: str | None

    def to_data(self) -> dict:
        return {"playerId": self.player_id, "role": self.role, "word": self.word}


@dataclass
class Stroke:
    player_id: str
    color: str
    points: list[tuple[float, float]]
    brush_size: float
    timestamp: int

    @classmethod
    def from_payload(cls, data: Any, player_id: str) -> "Stroke":
        """Parse a client stroke; the client-supplied player id is ignored."""
        if not isinstance(data, dict):
            raise InvalidPayload("Stroke must be an object")

        color = data.get("color")
        if not isinstance(color, str) or not color:
            raise InvalidPayload("Stroke color is required")

        raw_points = data.get("points")
        if not isinstance(raw_points, list):
            raise InvalidPayload("Stroke points must be a list")
        points: list[tuple[float, float]] = []
        for p in raw_points:
            if not isinstance(p, dict):
                raise InvalidPayload("Invalid stroke point")
            x, y = p.get("x"), p.get("y")
            if not _is_number(x) or not _is_number(y):
                raise InvalidPayload("Invalid stroke point")
            points.append((float(x), float(y)))

        brush_size = data.get("brushSize", 4)
        if not _is_number(brush_size) or brush_size <= 0:
            raise InvalidPayload("Invalid brush size")

        timestamp = data.get("timestamp")
        if not _is_number(timestamp):
            timestamp = now_ms()

        return cls(
            player_id=player_id,
            color=color,
            points=points,
            brush_size=float(brush_size),
            timestamp=int(timestamp),
        )

    def to_data(self) -> dict:
        return {
            "playerId": self.player_id,
            "color": self.color,
            "points": [{"x": x, "y": y} for x, y in self.points],
            "brushSize": self.brush_size,
            "timestamp": self.timestamp,
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class VoteResult:
    votes: dict[str, str]
    caught_player_id: str | None
    is_tie: bool

    def to_data(self) -> dict:
        return {
            "votes": dict(self.votes),
            "caughtPlayerId": self.caught_player_id,
            "isTie": self.is_tie,
        }


@dataclass
class RoundResult:
    scores: dict[str, int]
    total_scores: dict[str, int]
    imposter_id: str
    imposter_caught: bool
    imposter_guess_correct: bool | None
    secret_word: str

    def to_data(self) -> dict:
        return {
            "scores": dict(self.scores),
            "totalScores": dict(self.total_scores),
            "imposterId": self.imposter_id,
            "imposterCaught": self.imposter_caught,
            "imposterGuessCorrect": self.imposter_guess_correct,
            "secretWord": self.secret_word,
        }
