
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votetally.session
from votetally.session import Election, create_election

CANDIDATES = [
    {'id': 'C1', 'name': 'Sarpanch Ram', 'party': 'Janata'},
    {'id': 'C2', 'name': 'Pradhan Sita', 'party': 'Lok'},
    {'id': 'C3', 'name': 'Mukhiya Gopal', 'party': 'Kisan'},
]


def identity(value):
    return value


def make_election(n_voters=0):
    election = create_election(CANDIDATES)
    for i in range(n_voters):
        assert election.register_voter({'id': f'V{i}', 'name': 'X', 'age': 30})
    return election


@pytest.mark.parametrize(('voter', 'expected'), [
    ({'id': 'V1', 'name': 'A', 'age': 18}, True),
    ({'id': 'V1', 'name': 'A', 'age': 45.5}, True),
    ({'id': 'V1', 'name': 'A', 'age': 17}, False),
    ({'id': 'V1', 'name': 'A', 'age': '25'}, False),
    ({'id': 'V1', 'name': 'A', 'age': True}, False),
    ({'id': 1, 'name': 'A', 'age': 25}, False),
    ({'name': 'A', 'age': 25}, False),
    ({'id': 'V1', 'name': 'A'}, False),
    (None, False),
    ('V1', False),
])
def test_register_voter(voter, expected):
    election = make_election()
    assert election.register_voter(voter) is expected
    assert election.n_registered == (1 if expected else 0)


def test_register_twice():
    election = make_election()
    assert election.register_voter({'id': 'V1', 'name': 'A', 'age': 25})
    assert not election.register_voter({'id': 'V1', 'name': 'B', 'age': 40})
    assert election.n_registered == 1


def test_vote_success():
    election = make_election()
    election.register_voter({'id': 'V1', 'name': 'Mohan', 'age': 25})
    result = election.cast_vote('V1', 'C1', lambda r: 'voted!', lambda e: 'error: ' + e)
    assert result == 'voted!'
    assert {'id': 'C1', 'name': 'Sarpanch Ram', 'party': 'Janata', 'votes': 1} in election.get_results()
    assert election.has_voted('V1')


def test_vote_success_payload():
    election = make_election(1)
    assert election.cast_vote('V0', 'C2', identity, identity) == {
        'voterId': 'V0', 'candidateId': 'C2'
    }


def test_already_voted():
    election = make_election()
    election.register_voter({'id': 'V1', 'age': 25})
    election.cast_vote('V1', 'C1', identity, identity)
    before = election.tally
    assert election.cast_vote('V1', 'C2', identity, identity) == 'Already voted'
    assert election.tally == before


def test_unregistered_voter():
    election = make_election()
    errors = []
    election.cast_vote('V9', 'C1', identity, errors.append)
    assert errors == [votetally.session.VOTER_NOT_REGISTERED]
    assert election.tally == {'C1': 0, 'C2': 0, 'C3': 0}
    assert not election.has_voted('V9')


def test_candidate_not_found():
    election = make_election(1)
    assert election.cast_vote('V0', 'C9', identity, identity) == 'Candidate not found'
    assert not election.has_voted('V0')
    # the voter can still vote for an existing candidate
    assert election.cast_vote('V0', 'C3', identity, identity)['candidateId'] == 'C3'


def test_check_order():
    election = make_election(1)
    election.cast_vote('V0', 'C1')
    assert election.cast_vote('V0', 'C9', None, identity) == 'Already voted'
    assert election.cast_vote('V5', 'C9', None, identity) == 'Voter not registered'


def test_missing_callbacks():
    election = make_election(1)
    assert election.cast_vote('V0', 'C9') is None
    assert election.cast_vote('V0', 'C1') is None
    assert election.tally['C1'] == 1


def test_non_callable_callback():
    election = make_election(1)
    with pytest.raises(TypeError):
        election.cast_vote('V0', 'C9', identity, 'not a function')


def test_state_changed_before_callback():
    election = make_election(1)

    def check(payload):
        return (election.has_voted(payload['voterId']), election.tally['C2'])

    assert election.cast_vote('V0', 'C2', check) == (True, 1)


def test_tally_sum_invariant():
    election = make_election(5)
    attempts = [
        ('V0', 'C1'), ('V1', 'C2'), ('V0', 'C2'), ('V9', 'C1'),
        ('V2', 'C9'), ('V2', 'C1'), ('V3', 'C3'), ('V3', 'C3'),
    ]
    for voter_id, cand_id in attempts:
        election.cast_vote(voter_id, cand_id, identity, identity)
        assert sum(election.tally.values()) == election.n_voted
    assert election.tally == {'C1': 2, 'C2': 1, 'C3': 1}


def test_results_default_descending():
    election = make_election(3)
    election.cast_vote('V0', 'C3')
    election.cast_vote('V1', 'C3')
    election.cast_vote('V2', 'C2')
    assert [row['id'] for row in election.get_results()] == ['C3', 'C2', 'C1']


def test_results_custom_comparator():
    election = make_election(3)
    election.cast_vote('V0', 'C1')
    election.cast_vote('V1', 'C1')
    election.cast_vote('V2', 'C2')
    results = election.get_results(lambda a, b: a['votes'] - b['votes'])
    assert [row['votes'] for row in results] == [0, 1, 2]
    assert [row['id'] for row in results] == ['C3', 'C2', 'C1']


def test_results_tie_order():
    election = make_election()
    assert [row['id'] for row in election.get_results()] == ['C1', 'C2', 'C3']


def test_results_do_not_leak_state():
    election = make_election(1)
    election.cast_vote('V0', 'C1')
    results = election.get_results()
    results[0]['votes'] = 100
    results.reverse()
    assert election.get_results()[0] == {
        'id': 'C1', 'name': 'Sarpanch Ram', 'party': 'Janata', 'votes': 1
    }


def test_winner_no_votes():
    assert make_election(2).get_winner() is None
    assert create_election([]).get_winner() is None


def test_winner():
    election = make_election(3)
    election.cast_vote('V0', 'C2')
    election.cast_vote('V1', 'C3')
    election.cast_vote('V2', 'C3')
    assert election.get_winner()['id'] == 'C3'


def test_winner_tie():
    election = make_election(2)
    election.cast_vote('V0', 'C2')
    election.cast_vote('V1', 'C1')
    assert election.get_winner()['id'] == 'C1'


def test_candidates_copied():
    candidates = [dict(cand) for cand in CANDIDATES]
    election = Election(candidates)
    candidates.append({'id': 'C4', 'name': 'Late', 'party': 'None'})
    candidates[0]['name'] = 'Changed'
    assert len(election.get_results()) == 3
    assert election.get_results()[0]['name'] == 'Sarpanch Ram'
    election.candidates[0]['name'] = 'Changed again'
    assert election.candidates[0]['name'] == 'Sarpanch Ram'


@pytest.mark.parametrize('candidates', [
    None, 'C1', 42, (cand for cand in CANDIDATES),
])
def test_invalid_candidates(candidates):
    election = create_election(candidates)
    assert election.get_results() == []
    assert election.tally == {}


@pytest.mark.parametrize('voter_id', [
    {'id': 'V0'},
    ['V0'],
    {'V0'},
    None,
    0,
])
def test_vote_non_string_voter(voter_id):
    election = make_election(1)
    assert election.cast_vote(voter_id, 'C1', identity, identity) == 'Voter not registered'
    assert not election.is_registered(voter_id)
    assert not election.has_voted(voter_id)
    assert election.n_voted == 0
