'''Election sessions: voter registration, voting and results.

An :class:`Election` holds the entire state of a single election - the fixed
list of candidates, the registered voters, the voters who already voted and
the current tally. The state is private to the session object; it is only
exposed through copies.

Voting failures are not signalled by exceptions but by calling the error
callback passed to :meth:`Election.cast_vote` with one of the reason strings
defined in this module. Registration failures simply return False.
'''

from __future__ import annotations

import functools
import logging
import operator
import collections.abc
from numbers import Real
from typing import Any, Callable, Dict, List, Optional, Sequence

from votetally.tally import TallyType, tally_pure
from votetally.util import MIN_VOTER_AGE, is_number


logger = logging.getLogger(__name__)

VOTER_NOT_REGISTERED = 'Voter not registered'
ALREADY_VOTED = 'Already voted'
CANDIDATE_NOT_FOUND = 'Candidate not found'

ResultRow = Dict[str, Any]
Comparator = Callable[[ResultRow, ResultRow], Real]


def _by_votes_descending(results: List[ResultRow]) -> List[ResultRow]:
    # reverse sorting in Python keeps equal items in their original order
    return sorted(results, key=operator.itemgetter('votes'), reverse=True)


class Election:
    '''A single election with a fixed list of candidates.

    :param candidates: Candidate records, mappings with ``id``, ``name`` and
        ``party`` keys. The list and the records are copied, so later changes
        to them do not affect the election. Duplicate identifiers are not
        checked. Anything that is not a sequence counts as no candidates.
    '''
    def __init__(self, candidates: Sequence[Dict[str, Any]]):
        if (isinstance(candidates, collections.abc.Sequence)
                and not isinstance(candidates, str)):
            self._candidates = [dict(cand) for cand in candidates]
        else:
            self._candidates = []
        self._tally: TallyType = {
            cand.get('id'): 0 for cand in self._candidates
        }
        self._registered = set()
        self._voted = set()
        logger.debug('created election with %d candidates',
                     len(self._candidates))

    @property
    def candidates(self) -> List[Dict[str, Any]]:
        return [dict(cand) for cand in self._candidates]

    @property
    def tally(self) -> TallyType:
        '''A copy of the current vote tally.'''
        return dict(self._tally)

    @property
    def n_registered(self) -> int:
        return len(self._registered)

    @property
    def n_voted(self) -> int:
        return len(self._voted)

    def is_registered(self, voter_id: str) -> bool:
        return isinstance(voter_id, str) and voter_id in self._registered

    def has_voted(self, voter_id: str) -> bool:
        return isinstance(voter_id, str) and voter_id in self._voted

    def register_voter(self, voter: Dict[str, Any]) -> bool:
        '''Register a voter for the election.

        The voter must be a mapping with a string ``id`` and a numeric
        ``age`` of at least 18, and must not be registered already.

        :param voter: Voter record.
        :returns: True if the voter was registered, False otherwise (in which
            case nothing changes).
        '''
        if not isinstance(voter, collections.abc.Mapping):
            logger.info('rejecting registration of non-record %r', voter)
            return False
        voter_id = voter.get('id')
        age = voter.get('age')
        if not isinstance(voter_id, str) or not is_number(age):
            logger.info('rejecting registration of malformed voter %r', voter)
            return False
        if age < MIN_VOTER_AGE:
            logger.info('rejecting registration of %s: under age', voter_id)
            return False
        if voter_id in self._registered:
            logger.info('rejecting registration of %s: already registered',
                        voter_id)
            return False
        self._registered.add(voter_id)
        logger.debug('registered voter %s', voter_id)
        return True

    def cast_vote(self,
                  voter_id: str,
                  candidate_id: str,
                  on_success: Optional[Callable[[Dict[str, str]], Any]] = None,
                  on_error: Optional[Callable[[str], Any]] = None,
                  ) -> Any:
        '''Cast a vote of a registered voter for a candidate.

        The checks are made in a fixed order: the voter must be registered,
        must not have voted yet, and the candidate must exist. The first
        failing check calls ``on_error`` with its reason string.
        If all pass, the vote is recorded and ``on_success`` is called with
        a ``{'voterId': ..., 'candidateId': ...}`` dictionary.

        :param voter_id: Identifier of a registered voter.
        :param candidate_id: Identifier of the candidate voted for.
        :param on_success: Called after the vote is recorded.
        :param on_error: Called with the reason if the vote is rejected.
        :returns: The return value of the callback called, or None if that
            callback was not given.
        '''
        if not isinstance(voter_id, str) or voter_id not in self._registered:
            return self._reject(voter_id, VOTER_NOT_REGISTERED, on_error)
        if voter_id in self._voted:
            return self._reject(voter_id, ALREADY_VOTED, on_error)
        if self._find_candidate(candidate_id) is None:
            return self._reject(voter_id, CANDIDATE_NOT_FOUND, on_error)
        self._tally = tally_pure(self._tally, candidate_id)
        self._voted.add(voter_id)
        logger.info('vote of %s for %s recorded', voter_id, candidate_id)
        if on_success is None:
            return None
        return on_success({'voterId': voter_id, 'candidateId': candidate_id})

    def get_results(self,
                    comparator: Optional[Comparator] = None,
                    ) -> List[ResultRow]:
        '''Return the current results, one row per candidate.

        :param comparator: A function of two result rows returning a negative
            number, zero or a positive number if the first row should go
            before, together with or after the second one. If not given,
            the rows are ordered by votes, descending. Ties keep the order
            of the candidate list.
        :returns: A fresh list of ``{'id', 'name', 'party', 'votes'}``
            dictionaries.
        '''
        results = [
            {
                'id': cand.get('id'),
                'name': cand.get('name'),
                'party': cand.get('party'),
                'votes': self._tally.get(cand.get('id')) or 0,
            }
            for cand in self._candidates
        ]
        if callable(comparator):
            return sorted(results, key=functools.cmp_to_key(comparator))
        else:
            return _by_votes_descending(results)

    def get_winner(self) -> Optional[ResultRow]:
        '''Return the result row of the candidate with the most votes.

        Any ties are resolved in favor of the candidate listed first.

        :returns: None if there are no candidates or no votes were cast.
        '''
        results = self.get_results()
        if not results or results[0]['votes'] == 0:
            return None
        return results[0]

    def _find_candidate(self, candidate_id: str) -> Optional[Dict[str, Any]]:
        for cand in self._candidates:
            if cand.get('id') == candidate_id:
                return cand
        return None

    @staticmethod
    def _reject(voter_id: str,
                reason: str,
                on_error: Optional[Callable[[str], Any]],
                ) -> Any:
        logger.info('vote of %s rejected: %s', voter_id, reason)
        if on_error is None:
            return None
        return on_error(reason)

    def __repr__(self) -> str:
        return (
            f'<Election({len(self._candidates)} candidates,'
            f'{len(self._voted)}/{len(self._registered)} voted)>'
        )


def create_election(candidates: Sequence[Dict[str, Any]]) -> Election:
    '''Create a new election session for the given candidates.'''
    return Election(candidates)
