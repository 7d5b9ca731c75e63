from __future__ import annotations


class GameError(Exception):
    """Base for every rejected player action.

    ``code`` is the stable snake_case identifier sent to clients; the
    message is human readable. Raising one never leaves a room half-mutated.
    """

    code = "game_error"
    default_message = "Action not allowed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# Preconditions


class NotInLobby(GameError):
    code = "not_in_lobby"
    default_message = "Can only join during LOBBY phase"


class RoomFull(GameError):
    code = "room_full"
    default_message = "Room is full"


class NotEnoughPlayers(GameError):
    code = "not_enough_players"
    default_message = "Not enough players to start"


class NotAllReady(GameError):
    code = "not_all_ready"
    default_message = "All players must be ready to start"


class InvalidPhase(GameError):
    code = "invalid_phase"
    default_message = "Action not allowed in the current phase"


class NotHost(GameError):
    code = "only_host"
    default_message = "Only the host can do that"


class NotImposter(GameError):
    code = "only_imposter"
    default_message = "Only the imposter can guess the word"


class GameOver(GameError):
    code = "game_over"
    default_message = "Game is over! Use Play Again to return to lobby."


class InvalidSettings(GameError):
    code = "invalid_settings"
    default_message = "Invalid game settings"


class InvalidPayload(GameError):
    code = "invalid_payload"
    default_message = "Malformed message"


# Turn order


class NotYourTurn(GameError):
    code = "not_your_turn"
    default_message = "Not your turn"


# Voting


class UnknownVoter(GameError):
    code = "unknown_voter"
    default_message = "Voter is not a valid player"


class UnknownTarget(GameError):
    code = "unknown_target"
    default_message = "Voted-for player is not valid"


class SelfVote(GameError):
    code = "self_vote"
    default_message = "Cannot vote for self"


class DuplicateVote(GameError):
    code = "duplicate_vote"
    default_message = "Player has already voted"


class VotingNotStarted(GameError):
    code = "voting_not_started"
    default_message = "Voting has not started"


class VotingClosed(GameError):
    code = "voting_closed"
    default_message = "Voting is closed"


# Lookups


class RoomNotFound(GameError):
    code = "room_not_found"
    default_message = "Room not found"


class NotInRoom(GameError):
    code = "not_in_room"
    default_message = "You are not in a room"


class AlreadyInRoom(GameError):
    code = "already_in_room"
    default_message = "You are already in a room"


class CategoryNotFound(GameError):
    code = "category_not_found"

    def __init__(self, category: str) -> None:
        super().__init__(f"Category '{category}' not found")
        self.category = category


class NoRoleAssignment(GameError):
    code = "no_role_assignment"

    def __init__(self, player_id: str) -> None:
        super().__init__(f"No role assignment found for player {player_id}")
        self.player_id = player_id


class NoSecretWord(GameError):
    code = "no_secret_word"
    default_message = "No secret word set"
