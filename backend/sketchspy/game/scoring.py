from __future__ import annotations

from collections.abc import Iterable, Mapping


IMPOSTER_ESCAPE_POINTS = 2
IMPOSTER_GUESS_POINTS = 1
CORRECT_VOTE_POINTS = 1


def calculate_round_scores(
    votes: Mapping[str, str],
    imposter_id: str,
    artist_ids: Iterable[str],
    imposter_caught: bool,
    imposter_guess_correct: bool | None = None,
) -> dict[str, int]:
    """Points earned this round, keyed by player id.

    - imposter not caught: imposter +2
    - caught but guessed the word: imposter +1
    - caught and guessed wrong (or never guessed): +1 for every artist
      whose vote went to the imposter

    Every id passed in appears in the result, defaulting to 0.
    """
    artist_ids = list(artist_ids)
    scores = {pid: 0 for pid in artist_ids}
    scores[imposter_id] = 0

    if not imposter_caught:
        scores[imposter_id] += IMPOSTER_ESCAPE_POINTS
    elif imposter_guess_correct is True:
        scores[imposter_id] += IMPOSTER_GUESS_POINTS
    else:
        for pid in artist_ids:
            if votes.get(pid) == imposter_id:
                scores[pid] += CORRECT_VOTE_POINTS

    return scores
