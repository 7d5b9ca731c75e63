from __future__ import annotations

import random
from collections.abc import Iterable


DEFAULT_ROUNDS = 2


class TurnSequencer:
    """Drawing order for one round of play.

    The roster is shuffled once on construction and the same order is
    replayed for every pass; ``round`` is 1-based and passes ``total_rounds``
    once every player has drawn ``total_rounds`` times.
    """

    def __init__(
        self,
        player_ids: Iterable[str],
        total_rounds: int = DEFAULT_ROUNDS,
        rng: random.Random | None = None,
    ) -> None:
        order = list(player_ids)
        if not order:
            raise ValueError("Cannot build a turn order without players")
        if total_rounds < 1:
            raise ValueError("total_rounds must be at least 1")

        (rng or random.Random()).shuffle(order)
        self._order = order
        self.total_rounds = total_rounds
        self.round = 1
        self.index = 0

    @property
    def turn_order(self) -> list[str]:
        return list(self._order)

    def current_player_id(self) -> str | None:
        if self.is_complete() or not self._order:
            return None
        return self._order[self.index]

    def advance_turn(self) -> None:
        self.index += 1
        if self.index >= len(self._order):
            self.index = 0
            self.round += 1

    def is_complete(self) -> bool:
        return self.round > self.total_rounds

    def remove_player(self, player_id: str) -> bool:
        """Drop a departed player, keeping the turn pointer on the same drawer."""
        if player_id not in self._order:
            return False

        removed_at = self._order.index(player_id)
        del self._order[removed_at]

        if removed_at < self.index:
            self.index -= 1
        if self.index >= len(self._order):
            # the departed player closed out the pass
            self.index = 0
            self.round += 1
        return True
