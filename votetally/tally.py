'''Vote tallies and pure operations on them.

A tally is a dictionary mapping candidate identifiers to the number of votes
they have received so far. The functions here never modify the tally they
are given; the election session relies on this to replace its tally
wholesale on every vote.
'''

import collections.abc
from typing import Any, Dict, Optional


TallyType = Dict[str, int]


def tally_pure(current_tally: Optional[TallyType],
               candidate_id: str,
               ) -> TallyType:
    '''Return a new tally with one more vote for the given candidate.

    :param current_tally: The tally to add to. Anything that is not
        a mapping is treated as an empty tally. It is never modified.
    :param candidate_id: Identifier of the candidate receiving the vote.
        If it is not in the tally yet, it is added with a single vote.
    :returns: A new dictionary with all the entries of the current tally
        and the count for the candidate incremented by one.
    '''
    if isinstance(current_tally, collections.abc.Mapping):
        new_tally = dict(current_tally)
    else:
        new_tally = {}
    new_tally[candidate_id] = (new_tally.get(candidate_id) or 0) + 1
    return new_tally


def total_votes(tally: Dict[Any, int]) -> int:
    return sum(tally.values())
