from __future__ import annotations

from ..game.models import Player, RoundResult, Stroke, VoteResult
from ..game.room import GameRoom


# Client -> server
ROOM_CREATE = "room:create"
ROOM_JOIN = "room:join"
ROOM_LEAVE = "room:leave"
PLAYER_READY = "player:ready"
GAME_START = "game:start"
DRAW_STROKE = "draw:stroke"
VOTE_SUBMIT = "vote:submit"
GUESS_SUBMIT = "guess:submit"
BREAK_REQUEST = "break:request"
BREAK_CANCEL = "break:cancel"
ROUND_NEXT = "round:next"
GAME_PLAY_AGAIN = "game:play_again"

# Server -> client
ROOM_CREATED = "room:created"
PLAYER_JOINED = "room:player_joined"
PLAYER_LEFT = "room:player_left"
READY_UPDATE = "room:ready"
GAME_STARTING = "game:starting"
TURN_START = "turn:start"
STROKE_BROADCAST = "draw:stroke"
VOTING_START = "vote:start"
VOTE_CAST = "vote:cast"
VOTE_RESULT = "vote:result"
GUESS_PHASE = "guess:phase"
ROUND_RESULT = "round:result"
RETURN_TO_LOBBY = "room:lobby"
BREAK_UPDATE = "break:update"
GAME_ERROR = "game:error"


def room_created(room: GameRoom, player: Player) -> dict:
    return {"roomCode": room.code, "player": player.to_data()}


def player_joined(room: GameRoom, player: Player) -> dict:
    return {"player": player.to_data(), "players": room.player_list()}


def player_left(room: GameRoom, player_id: str) -> dict:
    return {"playerId": player_id, "players": room.player_list()}


def ready_update(room: GameRoom, player: Player) -> dict:
    return {"playerId": player.id, "isReady": player.is_ready, "players": room.player_list()}


def game_starting(room: GameRoom, player_id: str) -> dict:
    """Per-player deal: only artists see the word."""
    assignment = room.role_for(player_id)
    return {
        "role": assignment.role,
        "word": assignment.word,
        "turnOrder": room.turns.turn_order if room.turns else [],
        "players": room.player_list(),
        "settings": room.settings.to_data(),
    }


def turn_start(room: GameRoom) -> dict:
    return {
        "activePlayerId": room.active_player_id,
        "round": room.turns.round if room.turns else 0,
        "timeLimit": room.settings.draw_time_limit,
    }


def stroke_broadcast(stroke: Stroke) -> dict:
    return {"stroke": stroke.to_data()}


def voting_start(room: GameRoom, duration_sec: int | None) -> dict:
    return {"players": room.player_list(), "durationSec": duration_sec}


def vote_cast(voter_id: str) -> dict:
    # the target stays secret until the result
    return {"voterId": voter_id}


def vote_result(result: VoteResult) -> dict:
    return result.to_data()


def guess_phase(imposter_id: str, duration_sec: int | None) -> dict:
    return {"imposterId": imposter_id, "durationSec": duration_sec}


def round_result(room: GameRoom, result: RoundResult) -> dict:
    return {"result": result.to_data(), "winnerIds": room.winner_ids()}


def return_to_lobby(room: GameRoom) -> dict:
    return {"players": room.player_list()}


def break_update(room: GameRoom) -> dict:
    return {"playerIds": room.break_player_ids()}


def game_error(code: str, message: str) -> dict:
    return {"error": code, "message": message}
