import random

import pytest

from sketchspy.game.turns import TurnSequencer


def _ids(n):
    return [f"p{i}" for i in range(n)]


@pytest.mark.parametrize("n", range(3, 9))
def test_turn_order_is_a_permutation_of_the_roster(n):
    roster = _ids(n)
    for seed in range(10):
        seq = TurnSequencer(roster, rng=random.Random(seed))
        assert sorted(seq.turn_order) == sorted(roster)


@pytest.mark.parametrize("n", range(3, 9))
@pytest.mark.parametrize("rounds", [1, 2, 3])
def test_completes_exactly_after_n_times_rounds_advances(n, rounds):
    seq = TurnSequencer(_ids(n), rounds, rng=random.Random(0))
    for _ in range(n * rounds - 1):
        seq.advance_turn()
        assert not seq.is_complete()
    seq.advance_turn()
    assert seq.is_complete()


def test_same_order_is_replayed_every_round():
    seq = TurnSequencer(_ids(4), 2, rng=random.Random(3))
    order = seq.turn_order

    drawn = []
    while not seq.is_complete():
        drawn.append(seq.current_player_id())
        seq.advance_turn()

    assert drawn == order + order
    assert seq.current_player_id() is None


def test_round_counter_is_one_based_and_increments_on_wrap():
    seq = TurnSequencer(_ids(3), 2, rng=random.Random(0))
    assert (seq.round, seq.index) == (1, 0)
    for _ in range(3):
        seq.advance_turn()
    assert (seq.round, seq.index) == (2, 0)


def test_default_rounds_is_two():
    seq = TurnSequencer(_ids(3))
    assert seq.total_rounds == 2


def test_seeded_shuffle_is_reproducible():
    a = TurnSequencer(_ids(8), rng=random.Random(42))
    b = TurnSequencer(_ids(8), rng=random.Random(42))
    assert a.turn_order == b.turn_order


def test_empty_roster_is_rejected():
    with pytest.raises(ValueError):
        TurnSequencer([])


def test_removing_a_later_player_keeps_the_current_drawer():
    seq = TurnSequencer(_ids(4), 1, rng=random.Random(0))
    order = seq.turn_order
    seq.advance_turn()
    current = seq.current_player_id()

    assert seq.remove_player(order[3])
    assert seq.current_player_id() == current
    assert order[3] not in seq.turn_order


def test_removing_an_earlier_player_keeps_the_current_drawer():
    seq = TurnSequencer(_ids(4), 1, rng=random.Random(0))
    order = seq.turn_order
    seq.advance_turn()
    seq.advance_turn()

    seq.remove_player(order[0])
    assert seq.current_player_id() == order[2]


def test_removing_the_current_drawer_passes_the_turn_on():
    seq = TurnSequencer(_ids(4), 1, rng=random.Random(0))
    order = seq.turn_order
    seq.advance_turn()

    seq.remove_player(order[1])
    assert seq.current_player_id() == order[2]


def test_removing_the_last_pending_drawer_completes_the_pass():
    seq = TurnSequencer(_ids(3), 1, rng=random.Random(0))
    order = seq.turn_order
    seq.advance_turn()
    seq.advance_turn()

    seq.remove_player(order[2])
    assert seq.is_complete()


def test_removing_an_unknown_player_is_a_no_op():
    seq = TurnSequencer(_ids(3), rng=random.Random(0))
    assert not seq.remove_player("ghost")
    assert len(seq.turn_order) == 3
