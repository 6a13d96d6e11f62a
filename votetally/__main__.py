"""A commandline tool to run an election described in a JSON file.

The file must contain a JSON object with a list of ``candidates``, a list of
``voters`` to register and a list of ``votes`` (objects with ``voter`` and
``candidate`` identifiers). An optional ``regions`` tree is also counted.
"""

import argparse
import io
import json
import logging
import sys
import warnings
from typing import Any, Dict, List, Optional

import votetally.region
import votetally.validate
from votetally.session import Election, ResultRow
from votetally.tally import total_votes

logger = logging.getLogger(__name__)

argparser = argparse.ArgumentParser(
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the election from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the election from standard input',
)
argparser.add_argument(
    '-a', '--min-age',
    type=int,
    default=None,
    help='screen out voters younger than this before registration',
)
argparser.add_argument(
    '-r', '--require',
    nargs='*',
    default=None,
    help='screen out voters missing any of these fields',
)
argparser.add_argument(
    '--ascending',
    action='store_true',
    help='list the results in ascending order of votes',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any log messages',
)


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         min_age: Optional[int] = None,
         require: Optional[List[str]] = None,
         ascending: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    setup = load_election(input_file)
    if not setup['candidates']:
        warnings.warn('no candidates: cannot run election, terminating')
        return
    validator = None
    if min_age is not None or require:
        validator = votetally.validate.VoterValidator.from_rules({
            'minAge': min_age,
            'requiredFields': require,
        })
    election = run_election(setup, validator)
    print(f'Registered {election.n_registered} voters'
          f' of {len(setup["voters"])}')
    print(f'Received {total_votes(election.tally)} valid votes'
          f' of {len(setup["votes"])}')
    print()
    print('Election result:')
    show_results(election.get_results(
        ascending_votes if ascending else None
    ))
    winner = election.get_winner()
    print()
    if winner is None:
        print('Nobody elected')
    else:
        print('Elected', ' ', winner['name'], f'({winner["party"]})')
    if setup['regions'] is not None:
        total = votetally.region.count_votes_in_regions(setup['regions'])
        print()
        print(f'Votes counted in regions: {total}')


def load_election(input_file: io.TextIOBase) -> Dict[str, Any]:
    """Load the election definition from the given JSON file."""
    try:
        content = json.load(input_file)
    except json.JSONDecodeError as e:
        raise ValueError(f'invalid election file: {e}') from e
    if not isinstance(content, dict):
        raise ValueError('invalid election file: JSON object expected,'
                         f' got {type(content).__name__}')
    setup = {
        'candidates': content.get('candidates') or [],
        'voters': content.get('voters') or [],
        'votes': content.get('votes') or [],
        'regions': content.get('regions'),
    }
    for key in ('candidates', 'voters', 'votes'):
        if not isinstance(setup[key], list):
            raise ValueError(f'invalid election file: {key} must be a list')
    for cand in setup['candidates']:
        if not isinstance(cand, dict):
            raise ValueError(
                'invalid election file: candidates must be objects'
            )
        if not isinstance(cand.get('id'), str):
            raise ValueError(
                'invalid election file: candidate ids must be strings'
            )
    return setup


def run_election(setup: Dict[str, Any],
                 validator: Optional[votetally.validate.VoterValidator] = None,
                 ) -> Election:
    """Register the voters and cast the votes of an election definition."""
    election = Election(setup['candidates'])
    for voter in setup['voters']:
        if validator is not None:
            verdict = validator(voter)
            if not verdict['valid']:
                logger.warning('voter %r screened out: %s',
                               voter, verdict['reason'])
                continue
        if not election.register_voter(voter):
            logger.warning('voter %r could not be registered', voter)
    for vote in setup['votes']:
        if not isinstance(vote, dict):
            logger.warning('ignoring malformed vote %r', vote)
            continue
        election.cast_vote(
            vote.get('voter'),
            vote.get('candidate'),
            on_error=lambda reason: logger.warning(
                'vote %r rejected: %s', vote, reason
            ),
        )
    return election


def ascending_votes(a: ResultRow, b: ResultRow) -> int:
    return a['votes'] - b['votes']


def show_results(results: List[ResultRow]) -> None:
    """Show a ranked table of candidates and their votes."""
    if not results:
        print('No candidates')
        return
    left_col = [
        f'{i}. {row["name"]} ({row["party"]})'
        for i, row in enumerate(results, start=1)
    ]
    n_just_chars = len(max(left_col, key=len))
    for left, row in zip(left_col, results):
        print(left.ljust(n_just_chars), ' ', str(row['votes']).rjust(6))


if __name__ == '__main__':
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))
