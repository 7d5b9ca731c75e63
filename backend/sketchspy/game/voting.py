from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from .errors import DuplicateVote, SelfVote, UnknownTarget, UnknownVoter, VotingClosed
from .models import VoteResult


class VoteCollector:
    """One secret ballot among a fixed roster.

    Each player votes once, never for themselves. The plurality target is
    "caught"; a shared maximum is a tie and catches no one.
    """

    def __init__(self, player_ids: Iterable[str], imposter_id: str) -> None:
        self._player_ids = set(player_ids)
        self.imposter_id = imposter_id
        self._votes: dict[str, str] = {}
        # departed targets: ballots for them stay cast but are not tallied
        self._departed: set[str] = set()
        self.closed = False

    def cast_vote(self, voter_id: str, target_id: str) -> None:
        if self.closed:
            raise VotingClosed()
        if voter_id not in self._player_ids:
            raise UnknownVoter()
        if target_id not in self._player_ids:
            raise UnknownTarget()
        if voter_id == target_id:
            raise SelfVote()
        if voter_id in self._votes:
            raise DuplicateVote()

        self._votes[voter_id] = target_id

    @property
    def vote_count(self) -> int:
        return len(self._votes)

    def has_voted(self, player_id: str) -> bool:
        return player_id in self._votes

    def is_complete(self) -> bool:
        return len(self._votes) == len(self._player_ids)

    def close(self) -> None:
        self.closed = True

    def result(self) -> VoteResult:
        tally = Counter(t for t in self._votes.values() if t not in self._departed)
        if not tally:
            return VoteResult(votes=dict(self._votes), caught_player_id=None, is_tie=False)

        top = max(tally.values())
        leaders = [pid for pid, count in tally.items() if count == top]
        is_tie = len(leaders) > 1
        return VoteResult(
            votes=dict(self._votes),
            caught_player_id=None if is_tie else leaders[0],
            is_tie=is_tie,
        )

    def is_caught_player_imposter(self) -> bool:
        res = self.result()
        if res.is_tie or res.caught_player_id is None:
            return False
        return res.caught_player_id == self.imposter_id

    def remove_player(self, player_id: str) -> None:
        """Forget a departed player's own ballot.

        Ballots already cast for them stay cast, so those voters are not
        asked again, but no longer count toward anyone being caught.
        """
        self._player_ids.discard(player_id)
        self._votes.pop(player_id, None)
        self._departed.add(player_id)
