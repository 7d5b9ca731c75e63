from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from . import events
from .connections import ConnectionTable
from ..game.errors import GameError, InvalidPayload, NotInRoom, RoomNotFound
from ..game.models import GameSettings, Player, Stroke
from ..game.room import GameRoom
from ..game.service import RoomRegistry


logger = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _require_name(payload: dict) -> str:
    name = payload.get("name")
    if not isinstance(name, str) or not _validate_name(name):
        raise InvalidPayload("Invalid player name")
    return name.strip()


def _require_str(payload: dict, key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidPayload(f"'{key}' is required")
    return value.strip()


def register_socketio_handlers(
    socketio: SocketIO,
    registry: RoomRegistry,
    connections: ConnectionTable,
    scheduler,
    config,
) -> None:
    enforce_timers = bool(config.get("ENFORCE_PHASE_TIMERS", True))
    reveal_sec = int(config.get("ROLE_REVEAL_DURATION_SEC", 5))
    voting_sec = int(config.get("VOTING_DURATION_SEC", 30))
    guess_sec = int(config.get("IMPOSTER_GUESS_DURATION_SEC", 20))

    # Fan-out

    def _send(player_id: str, event: str, payload: dict) -> None:
        sid = connections.sid_for(player_id)
        if sid:
            socketio.emit(event, payload, to=sid)

    def _broadcast(room: GameRoom, event: str, payload: dict) -> None:
        socketio.emit(event, payload, to=room.code)

    # Per-room serialization

    @contextmanager
    def _seat() -> Iterator[tuple[GameRoom, Player]]:
        """Lock the caller's room and yield it with the caller's player."""
        conn = connections.get(request.sid)
        if conn is None or conn.player_id is None or conn.room_code is None:
            raise NotInRoom()

        room = registry.get_room(conn.room_code)
        if room is None:
            raise RoomNotFound()

        with room.lock:
            # the room may have been torn down while we waited
            if registry.get_room(room.code) is not room:
                raise RoomNotFound()
            player = room.players.get(conn.player_id)
            if player is None:
                raise NotInRoom()
            yield room, player

    # Timers

    def _schedule(room: GameRoom, name: str, delay_sec: int, expected_phase: str, on_fire: Callable[[GameRoom], None]) -> None:
        code = room.code

        def _fire(task) -> None:
            current = registry.get_room(code)
            if current is None:
                logger.info(f"[timer-abort] room={code} timer={name} room gone")
                return
            with current.lock:
                if current.timer is not task or task.cancelled or current.phase != expected_phase:
                    logger.info(f"[timer-abort] room={code} timer={name} phase={current.phase}")
                    return
                current.timer = None
                logger.info(f"[timer-fire] room={code} timer={name}")
                on_fire(current)

        task = scheduler.schedule(f"{code}:{name}", delay_sec, _fire)
        room.set_timer(task)
        logger.info(f"[timer-set] room={code} timer={name} duration={delay_sec}s")

    # Phase announcements (caller holds the room lock)

    def _deal_round(room: GameRoom) -> None:
        for pid in room.players:
            _send(pid, events.GAME_STARTING, events.game_starting(room, pid))
        _schedule(room, "role_reveal", reveal_sec, "ROLE_REVEAL", _start_drawing)

    def _start_drawing(room: GameRoom) -> None:
        room.start_drawing()
        _broadcast(room, events.TURN_START, events.turn_start(room))

    def _open_voting(room: GameRoom) -> None:
        _broadcast(room, events.VOTING_START, events.voting_start(room, voting_sec if enforce_timers else None))
        if enforce_timers:
            _schedule(room, "voting", voting_sec, "VOTING", _close_voting)

    def _close_voting(room: GameRoom) -> None:
        vote_result, round_result = room.conclude_voting()
        _broadcast(room, events.VOTE_RESULT, events.vote_result(vote_result))

        if round_result is not None:
            _broadcast(room, events.ROUND_RESULT, events.round_result(room, round_result))
            return

        imposter_id = room.tracked_imposter_id
        _broadcast(room, events.GUESS_PHASE, events.guess_phase(imposter_id, guess_sec if enforce_timers else None))
        if enforce_timers:
            _schedule(room, "imposter_guess", guess_sec, "IMPOSTER_GUESS", _guess_timed_out)

    def _guess_timed_out(room: GameRoom) -> None:
        result = room.conclude_guess_timeout()
        _broadcast(room, events.ROUND_RESULT, events.round_result(room, result))

    def _depart(room_code: str, player_id: str) -> None:
        room = registry.get_room(room_code)
        if room is None:
            return

        with room.lock:
            phase_before = room.phase
            was_drawing = room.active_player_id == player_id
            had_break = player_id in room.break_requests

            if room.remove_player(player_id) is None:
                return
            logger.info(f"[player-left] room={room.code} player={player_id} phase={phase_before}")

            if not room.players:
                registry.delete_room(room.code)
                return

            _broadcast(room, events.PLAYER_LEFT, events.player_left(room, player_id))
            if had_break:
                _broadcast(room, events.BREAK_UPDATE, events.break_update(room))

            if phase_before != "LOBBY" and room.phase == "LOBBY":
                _broadcast(room, events.RETURN_TO_LOBBY, events.return_to_lobby(room))
            elif phase_before == "IMPOSTER_GUESS" and room.phase == "SCOREBOARD":
                # the imposter left without guessing
                _broadcast(room, events.ROUND_RESULT, events.round_result(room, room.last_result))
            elif phase_before == "DRAWING" and room.phase == "VOTING":
                _open_voting(room)
            elif room.phase == "DRAWING" and was_drawing:
                _broadcast(room, events.TURN_START, events.turn_start(room))
            elif room.phase == "VOTING" and room.all_votes_in():
                _close_voting(room)

    # Handler plumbing

    def _reject(exc: GameError) -> dict:
        logger.info(f"[rejected] sid={request.sid} error={exc.code} message={exc.message}")
        emit(events.GAME_ERROR, events.game_error(exc.code, exc.message))
        return {"ok": False, "error": exc.code}

    def action(event: str):
        """Register ``fn`` for ``event``; a GameError goes back to the sender only."""

        def decorator(fn: Callable[[dict], dict | None]):
            @functools.wraps(fn)
            def handler(data: Any = None):
                try:
                    if data is None:
                        data = {}
                    if not isinstance(data, dict):
                        raise InvalidPayload("Payload must be an object")
                    result = fn(data)
                except GameError as exc:
                    return _reject(exc)
                return {"ok": True, **(result or {})}

            socketio.on_event(event, handler)
            return handler

        return decorator

    # Connection lifecycle

    @socketio.on("connect")
    def on_connect(auth=None):
        connections.connect(request.sid)
        logger.debug(f"[connect] sid={request.sid}")

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        conn = connections.disconnect(request.sid)
        logger.debug(f"[disconnect] sid={request.sid} reason={reason}")
        if conn is not None and conn.player_id and conn.room_code:
            _depart(conn.room_code, conn.player_id)

    # Lobby

    @action(events.ROOM_CREATE)
    def room_create(payload: dict) -> dict:
        name = _require_name(payload)
        connections.ensure_free(request.sid)

        room = registry.create_room()
        with room.lock:
            player = room.add_player(name, is_host=True)
            connections.bind(request.sid, player.id, room.code)
            join_room(room.code)
            emit(events.ROOM_CREATED, events.room_created(room, player))
        return {"roomCode": room.code, "playerId": player.id}

    @action(events.ROOM_JOIN)
    def room_join(payload: dict) -> dict:
        room_code = _require_str(payload, "roomCode")
        name = _require_name(payload)
        connections.ensure_free(request.sid)

        room = registry.require_room(room_code)
        with room.lock:
            if registry.get_room(room.code) is not room:
                raise RoomNotFound()
            player = room.add_player(name)
            connections.bind(request.sid, player.id, room.code)
            join_room(room.code)
            _broadcast(room, events.PLAYER_JOINED, events.player_joined(room, player))
        return {"roomCode": room.code, "playerId": player.id}

    @action(events.ROOM_LEAVE)
    def room_leave(payload: dict) -> None:
        conn = connections.unbind(request.sid)
        if conn is None:
            raise NotInRoom()
        leave_room(conn.room_code)
        _depart(conn.room_code, conn.player_id)

    @action(events.PLAYER_READY)
    def player_ready(payload: dict) -> dict:
        with _seat() as (room, player):
            room.toggle_ready(player.id)
            _broadcast(room, events.READY_UPDATE, events.ready_update(room, player))
            return {"isReady": player.is_ready}

    @action(events.GAME_START)
    def game_start(payload: dict) -> None:
        settings = GameSettings.from_payload(payload["settings"]) if payload.get("settings") is not None else None
        with _seat() as (room, player):
            room.require_host(player.id)
            room.start_game(settings)
            _deal_round(room)

    # Round

    @action(events.DRAW_STROKE)
    def draw_stroke(payload: dict) -> None:
        with _seat() as (room, player):
            # authoritative player id, whatever the client sent
            stroke = Stroke.from_payload(payload.get("stroke"), player.id)
            room.submit_stroke(player.id, stroke)
            _broadcast(room, events.STROKE_BROADCAST, events.stroke_broadcast(stroke))

            if room.phase == "VOTING":
                _open_voting(room)
            else:
                _broadcast(room, events.TURN_START, events.turn_start(room))

    @action(events.VOTE_SUBMIT)
    def vote_submit(payload: dict) -> None:
        target_id = _require_str(payload, "targetId")
        with _seat() as (room, player):
            room.submit_vote(player.id, target_id)
            _broadcast(room, events.VOTE_CAST, events.vote_cast(player.id))
            if room.all_votes_in():
                _close_voting(room)

    @action(events.GUESS_SUBMIT)
    def guess_submit(payload: dict) -> dict:
        word = _require_str(payload, "word")
        with _seat() as (room, player):
            result = room.conclude_guess(player.id, word)
            _broadcast(room, events.ROUND_RESULT, events.round_result(room, result))
            return {"correct": bool(result.imposter_guess_correct)}

    @action(events.BREAK_REQUEST)
    def break_request(payload: dict) -> None:
        with _seat() as (room, player):
            room.request_break(player.id)
            _broadcast(room, events.BREAK_UPDATE, events.break_update(room))

    @action(events.BREAK_CANCEL)
    def break_cancel(payload: dict) -> None:
        with _seat() as (room, player):
            room.cancel_break(player.id)
            _broadcast(room, events.BREAK_UPDATE, events.break_update(room))

    @action(events.ROUND_NEXT)
    def round_next(payload: dict) -> None:
        with _seat() as (room, player):
            room.require_host(player.id)
            room.ensure_no_winner()
            room.next_round()
            _deal_round(room)

    @action(events.GAME_PLAY_AGAIN)
    def game_play_again(payload: dict) -> None:
        with _seat() as (room, player):
            room.require_host(player.id)
            room.play_again()
            _broadcast(room, events.RETURN_TO_LOBBY, events.return_to_lobby(room))

    # Anything else

    @socketio.on("*")
    def unknown_event(event, data=None):
        return _reject(InvalidPayload(f"Unknown event '{event}'"))

    @socketio.on_error_default
    def on_unexpected_error(exc):
        logger.exception(f"[handler-error] sid={request.sid}")
        emit(events.GAME_ERROR, events.game_error("internal_error", "Something went wrong"))
        return {"ok": False, "error": "internal_error"}
