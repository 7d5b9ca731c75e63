from __future__ import annotations

import logging
import random
from threading import RLock
from typing import Any

from .errors import (
    GameOver,
    InvalidPhase,
    NoRoleAssignment,
    NoSecretWord,
    NotAllReady,
    NotEnoughPlayers,
    NotHost,
    NotImposter,
    NotInLobby,
    NotInRoom,
    NotYourTurn,
    RoomFull,
    VotingNotStarted,
)
from .models import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    GamePhase,
    GameSettings,
    Player,
    RoleAssignment,
    RoundResult,
    Stroke,
    VoteResult,
    color_for_index,
)
from .scoring import calculate_round_scores
from .turns import TurnSequencer
from .voting import VoteCollector
from .words import WordBank


logger = logging.getLogger(__name__)

# Rosters at or above this size get two imposters.
TWO_IMPOSTER_ROSTER = 6


class GameRoom:
    """State machine for one room.

    LOBBY -> ROLE_REVEAL -> DRAWING -> VOTING -> (IMPOSTER_GUESS ->) SCOREBOARD,
    then ROLE_REVEAL again for the next round or LOBBY to play again.

    Every method validates before it mutates. Callers serialize access
    through ``lock``; the room never takes it itself.
    """

    def __init__(
        self,
        code: str,
        word_bank: WordBank | None = None,
        rng: random.Random | None = None,
        min_players: int = MIN_PLAYERS,
        max_players: int = MAX_PLAYERS,
    ) -> None:
        self.code = code
        self.phase: GamePhase = "LOBBY"
        self.players: dict[str, Player] = {}
        self.settings = GameSettings()
        self.strokes: list[Stroke] = []
        self.turns: TurnSequencer | None = None
        self.votes: VoteCollector | None = None
        self.role_assignments: list[RoleAssignment] = []
        self.secret_word: str | None = None
        self.imposter_guess_correct: bool | None = None
        self.last_result: RoundResult | None = None
        self.break_requests: set[str] = set()
        # pending phase timer; anything with a cancel() method
        self.timer: Any = None
        self.lock = RLock()

        self.min_players = min_players
        self.max_players = max_players
        self._word_bank = word_bank or WordBank()
        self._rng = rng or random.Random()
        self._color_index = 0

    # Roster

    def add_player(self, name: str, is_host: bool = False) -> Player:
        if self.phase != "LOBBY":
            raise NotInLobby()
        if len(self.players) >= self.max_players:
            raise RoomFull()

        player = Player(name=name, color=color_for_index(self._color_index), is_host=is_host)
        self._color_index += 1
        self.players[player.id] = player
        return player

    def remove_player(self, player_id: str) -> Player | None:
        """Remove a player in any phase; unknown ids are ignored.

        Host passes to the earliest-joined remaining player and scores are
        never touched. A live round that is left with too few players, or
        without one of its imposters, is aborted. A tracked imposter leaving
        during the guess forfeits it.
        """
        player = self.players.pop(player_id, None)
        if player is None:
            return None

        self.break_requests.discard(player_id)

        if player.is_host and self.players:
            successor = next(iter(self.players.values()))
            successor.is_host = True
            logger.info(f"[host-transfer] room={self.code} from={player_id} to={successor.id}")

        if self.phase in ("LOBBY", "SCOREBOARD") or not self.players:
            self._forget(player_id)
            return player

        if self.phase == "IMPOSTER_GUESS":
            if player_id == self.tracked_imposter_id:
                logger.info(f"[guess-forfeit] room={self.code} imposter={player_id}")
                self.conclude_guess_timeout()
            self._forget(player_id)
            return player

        if len(self.players) < self.min_players or player_id in self.imposter_ids:
            logger.info(f"[round-abort] room={self.code} departed={player_id} players={len(self.players)}")
            self.abort_round()
            return player

        self._forget(player_id)
        if self.phase == "DRAWING" and self.turns is not None and self.turns.is_complete():
            self.start_voting()
        return player

    def _forget(self, player_id: str) -> None:
        self.role_assignments = [r for r in self.role_assignments if r.player_id != player_id]
        if self.turns is not None:
            self.turns.remove_player(player_id)
        if self.votes is not None:
            self.votes.remove_player(player_id)

    def toggle_ready(self, player_id: str) -> Player | None:
        player = self.players.get(player_id)
        if player is not None:
            player.toggle_ready()
        return player

    def all_players_ready(self) -> bool:
        if len(self.players) < self.min_players:
            return False
        return all(p.is_ready for p in self.players.values())

    def require_host(self, player_id: str) -> Player:
        player = self.players.get(player_id)
        if player is None:
            raise NotInRoom()
        if not player.is_host:
            raise NotHost()
        return player

    # Game lifecycle

    def start_game(self, settings: GameSettings | None = None) -> None:
        if self.phase != "LOBBY":
            raise InvalidPhase("Can only start a game from the lobby")
        if len(self.players) < self.min_players:
            raise NotEnoughPlayers(f"Need at least {self.min_players} players to start")
        if not all(p.is_ready for p in self.players.values()):
            raise NotAllReady()

        chosen = settings or self.settings
        word = self._draw_word(chosen)

        self.settings = chosen
        self._begin_round(word)
        logger.info(f"[game-start] room={self.code} players={len(self.players)} rounds={self.settings.rounds}")

    def next_round(self) -> None:
        """Deal a fresh round, keeping cumulative scores."""
        if self.phase != "SCOREBOARD":
            raise InvalidPhase("Can only start the next round from the scoreboard")
        word = self._draw_word(self.settings)
        self._begin_round(word)
        logger.info(f"[round-start] room={self.code}")

    def play_again(self) -> None:
        """Back to the lobby with scores and ready flags cleared."""
        self.abort_round()
        for p in self.players.values():
            p.score = 0

    def abort_round(self) -> None:
        """Back to the lobby mid-game; cumulative scores are kept."""
        self._set_phase("LOBBY")
        self.strokes = []
        self.turns = None
        self.votes = None
        self.role_assignments = []
        self.secret_word = None
        self.imposter_guess_correct = None
        self.last_result = None
        self.break_requests.clear()
        for p in self.players.values():
            p.is_ready = False

    def _draw_word(self, settings: GameSettings) -> str:
        if settings.custom_word:
            return settings.custom_word
        return self._word_bank.random_word(settings.category, self._rng)

    def _begin_round(self, word: str) -> None:
        self.secret_word = word
        self.turns = TurnSequencer(self.players.keys(), self.settings.rounds, self._rng)
        self.assign_roles()
        self.strokes = []
        self.votes = None
        self.imposter_guess_correct = None
        self.last_result = None
        self.break_requests.clear()
        self._set_phase("ROLE_REVEAL")

    def assign_roles(self) -> list[RoleAssignment]:
        if self.secret_word is None:
            raise NoSecretWord()

        player_ids = list(self.players.keys())
        num_imposters = 2 if len(player_ids) >= TWO_IMPOSTER_ROSTER else 1
        imposters = set(self._rng.sample(player_ids, num_imposters))

        self.role_assignments = [
            RoleAssignment(pid, "imposter", None) if pid in imposters else RoleAssignment(pid, "artist", self.secret_word)
            for pid in player_ids
        ]
        return self.role_assignments

    @property
    def imposter_ids(self) -> list[str]:
        return [r.player_id for r in self.role_assignments if r.role == "imposter"]

    @property
    def artist_ids(self) -> list[str]:
        return [r.player_id for r in self.role_assignments if r.role == "artist"]

    @property
    def tracked_imposter_id(self) -> str | None:
        """The imposter voting and scoring are wired to (first in join order)."""
        ids = self.imposter_ids
        return ids[0] if ids else None

    def role_for(self, player_id: str) -> RoleAssignment:
        for r in self.role_assignments:
            if r.player_id == player_id:
                return r
        raise NoRoleAssignment(player_id)

    # Drawing

    def start_drawing(self) -> None:
        if self.phase != "ROLE_REVEAL":
            raise InvalidPhase("Can only start drawing from ROLE_REVEAL phase")
        self._set_phase("DRAWING")

    @property
    def active_player_id(self) -> str | None:
        if self.phase != "DRAWING" or self.turns is None:
            return None
        return self.turns.current_player_id()

    def submit_stroke(self, player_id: str, stroke: Stroke) -> None:
        """Record the active drawer's stroke; the last one opens voting."""
        if self.phase != "DRAWING":
            raise InvalidPhase("Can only submit strokes during DRAWING phase")
        if self.turns is None or player_id != self.turns.current_player_id():
            raise NotYourTurn()

        self.strokes.append(stroke)
        self.turns.advance_turn()

        if self.turns.is_complete():
            self.start_voting()

    # Voting

    def start_voting(self) -> None:
        imposter_id = self.tracked_imposter_id
        if imposter_id is None:
            raise NoRoleAssignment("imposter")
        self.votes = VoteCollector(self.players.keys(), imposter_id)
        self._set_phase("VOTING")

    def submit_vote(self, voter_id: str, target_id: str) -> None:
        if self.votes is None:
            raise VotingNotStarted()
        self.votes.cast_vote(voter_id, target_id)

    def all_votes_in(self) -> bool:
        return self.votes is not None and self.votes.is_complete()

    def resolve_votes(self) -> VoteResult:
        if self.votes is None:
            raise VotingNotStarted()
        return self.votes.result()

    def conclude_voting(self) -> tuple[VoteResult, RoundResult | None]:
        """Close the ballot; catching the imposter opens the guess phase."""
        if self.phase != "VOTING" or self.votes is None:
            raise InvalidPhase("Voting is not in progress")

        self.votes.close()
        vote_result = self.votes.result()
        if self.votes.is_caught_player_imposter():
            self._set_phase("IMPOSTER_GUESS")
            return vote_result, None

        round_result = self.calculate_scores()
        self._set_phase("SCOREBOARD")
        return vote_result, round_result

    # Imposter guess

    def submit_imposter_guess(self, word: str) -> bool:
        if not self.secret_word:
            raise NoSecretWord()
        correct = word.lower() == self.secret_word.lower()
        self.imposter_guess_correct = correct
        return correct

    def conclude_guess(self, player_id: str, word: str) -> RoundResult:
        if self.phase != "IMPOSTER_GUESS":
            raise InvalidPhase("Not accepting guesses right now")
        if player_id != self.tracked_imposter_id:
            raise NotImposter()

        self.submit_imposter_guess(word)
        result = self.calculate_scores()
        self._set_phase("SCOREBOARD")
        return result

    def conclude_guess_timeout(self) -> RoundResult:
        if self.phase != "IMPOSTER_GUESS":
            raise InvalidPhase("Not accepting guesses right now")
        self.imposter_guess_correct = None
        result = self.calculate_scores()
        self._set_phase("SCOREBOARD")
        return result

    # Scoring

    def calculate_scores(self) -> RoundResult:
        if self.votes is None:
            raise VotingNotStarted()
        if self.secret_word is None:
            raise NoSecretWord()

        vote_result = self.votes.result()
        imposter_caught = self.votes.is_caught_player_imposter()
        imposter_id = self.votes.imposter_id
        guess_correct = self.imposter_guess_correct if imposter_caught else None

        earned = calculate_round_scores(
            votes=vote_result.votes,
            imposter_id=imposter_id,
            artist_ids=self.artist_ids,
            imposter_caught=imposter_caught,
            imposter_guess_correct=guess_correct,
        )
        # untracked imposters still show up, with nothing earned
        scores = {pid: earned.get(pid, 0) for pid in self.players}

        for pid, points in scores.items():
            self.players[pid].add_points(points)

        logger.info(f"[round-scored] room={self.code} imposter={imposter_id} caught={imposter_caught} guess={guess_correct}")
        self.last_result = RoundResult(
            scores=scores,
            total_scores={pid: p.score for pid, p in self.players.items()},
            imposter_id=imposter_id,
            imposter_caught=imposter_caught,
            imposter_guess_correct=guess_correct,
            secret_word=self.secret_word,
        )
        return self.last_result

    def winner_ids(self) -> list[str]:
        return [pid for pid, p in self.players.items() if p.score >= self.settings.win_score]

    def ensure_no_winner(self) -> None:
        if self.winner_ids():
            raise GameOver()

    # Breaks

    def request_break(self, player_id: str) -> list[str]:
        if player_id in self.players:
            self.break_requests.add(player_id)
        return self.break_player_ids()

    def cancel_break(self, player_id: str) -> list[str]:
        self.break_requests.discard(player_id)
        return self.break_player_ids()

    def break_player_ids(self) -> list[str]:
        return [pid for pid in self.players if pid in self.break_requests]

    # Timers

    def set_timer(self, task: Any) -> None:
        self.cancel_timer()
        self.timer = task

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def _set_phase(self, phase: GamePhase) -> None:
        # any pending timer belonged to the phase being left
        self.cancel_timer()
        self.phase = phase

    # Serialization

    def player_list(self) -> list[dict]:
        return [p.to_data() for p in self.players.values()]

    def public_state(self) -> dict:
        """Snapshot safe for every client: no secret word, no roles."""
        return {
            "roomCode": self.code,
            "phase": self.phase,
            "players": self.player_list(),
            "settings": self.settings.to_data(),
            "currentRound": self.turns.round if self.turns else 0,
            "currentTurnIndex": self.turns.index if self.turns else 0,
            "turnOrder": self.turns.turn_order if self.turns else [],
            "activePlayerId": self.active_player_id,
            "strokes": [s.to_data() for s in self.strokes],
            "breakRequests": self.break_player_ids(),
        }
