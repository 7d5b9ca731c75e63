import pytest

from sketchspy.game.errors import DuplicateVote, SelfVote, UnknownTarget, UnknownVoter, VotingClosed
from sketchspy.game.voting import VoteCollector


ROSTER = ["p1", "p2", "p3", "p4"]


@pytest.fixture()
def collector():
    return VoteCollector(ROSTER, imposter_id="p2")


def test_complete_after_every_player_votes(collector):
    for voter, target in [("p1", "p2"), ("p2", "p1"), ("p3", "p2")]:
        collector.cast_vote(voter, target)
        assert not collector.is_complete()
    collector.cast_vote("p4", "p2")
    assert collector.is_complete()
    assert collector.vote_count == 4


def test_self_vote_is_rejected_and_not_recorded(collector):
    with pytest.raises(SelfVote):
        collector.cast_vote("p1", "p1")
    assert collector.vote_count == 0


def test_duplicate_vote_is_rejected_and_first_vote_kept(collector):
    collector.cast_vote("p1", "p2")
    with pytest.raises(DuplicateVote):
        collector.cast_vote("p1", "p3")
    assert collector.vote_count == 1
    assert collector.result().votes == {"p1": "p2"}


def test_unknown_voter_and_target(collector):
    with pytest.raises(UnknownVoter):
        collector.cast_vote("ghost", "p1")
    with pytest.raises(UnknownTarget):
        collector.cast_vote("p1", "ghost")
    assert collector.vote_count == 0


def test_plurality_catches_the_top_target(collector):
    collector.cast_vote("p1", "p2")
    collector.cast_vote("p3", "p2")
    collector.cast_vote("p4", "p1")
    collector.cast_vote("p2", "p3")

    res = collector.result()
    assert res.caught_player_id == "p2"
    assert res.is_tie is False
    assert collector.is_caught_player_imposter()


def test_even_split_is_a_tie(collector):
    collector.cast_vote("p1", "p2")
    collector.cast_vote("p2", "p1")
    collector.cast_vote("p3", "p2")
    collector.cast_vote("p4", "p1")

    res = collector.result()
    assert res.caught_player_id is None
    assert res.is_tie is True
    assert not collector.is_caught_player_imposter()


def test_catching_an_artist_is_not_catching_the_imposter(collector):
    collector.cast_vote("p1", "p3")
    collector.cast_vote("p2", "p3")
    res = collector.result()
    assert res.caught_player_id == "p3"
    assert not collector.is_caught_player_imposter()


def test_no_votes_catches_no_one(collector):
    res = collector.result()
    assert res.votes == {}
    assert res.caught_player_id is None
    assert res.is_tie is False


def test_closed_ballot_rejects_votes(collector):
    collector.close()
    with pytest.raises(VotingClosed):
        collector.cast_vote("p1", "p2")


def test_departed_voter_loses_their_ballot(collector):
    collector.cast_vote("p3", "p2")
    collector.remove_player("p3")

    assert collector.vote_count == 0
    assert not collector.has_voted("p3")
    for voter, target in [("p1", "p2"), ("p2", "p1"), ("p4", "p2")]:
        collector.cast_vote(voter, target)
    assert collector.is_complete()


def test_ballots_for_a_departed_player_stay_cast_but_are_not_tallied(collector):
    collector.cast_vote("p1", "p3")
    collector.cast_vote("p4", "p3")
    collector.cast_vote("p3", "p2")

    collector.remove_player("p3")

    assert collector.has_voted("p1") and collector.has_voted("p4")
    collector.cast_vote("p2", "p1")
    assert collector.is_complete()

    res = collector.result()
    assert res.votes == {"p1": "p3", "p4": "p3", "p2": "p1"}
    assert res.caught_player_id == "p1"
    assert not res.is_tie


def test_only_departed_targets_means_no_one_is_caught(collector):
    collector.cast_vote("p1", "p3")
    collector.remove_player("p3")

    res = collector.result()
    assert res.votes == {"p1": "p3"}
    assert res.caught_player_id is None
    assert res.is_tie is False
