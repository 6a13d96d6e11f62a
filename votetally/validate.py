'''Configurable voter validators.

A validator is built once from a set of rules and can then be applied to any
number of voter records. Calling the validator returns a
:class:`ValidationResult` dictionary; the :meth:`VoterValidator.validate`
method raises :class:`InvalidVoter` instead, for code that prefers
exceptions.
'''

import logging
import collections.abc
from typing import Any, Dict, Optional, Sequence, Tuple

from votetally.util import MIN_VOTER_AGE, is_number


logger = logging.getLogger(__name__)

INVALID_VOTER_OBJECT = 'Invalid voter object'
MISSING_FIELD = 'Missing field: {}'
AGE_NOT_MET = 'Age requirement not met'

ValidationResult = Dict[str, Any]


class InvalidVoter(Exception):
    '''A voter does not satisfy the validation rules.

    :param voter: The voter record found to be invalid.
    :param reason: Description of the rule that was broken.
    '''
    def __init__(self, voter: Any, reason: str):
        self.voter = voter
        self.reason = reason
        super().__init__(f'invalid voter {voter!r}: {reason}')


class VoterValidator:
    '''Validate voter records against a minimum age and required fields.

    :param min_age: Minimum age the voter must meet or exceed.
    :param required_fields: Keys that must be present in the voter record.
        Only presence is checked; the value may be anything, even None.
        The fields are checked in the given order and the first missing one
        is reported.
    '''
    def __init__(self,
                 min_age: Any = MIN_VOTER_AGE,
                 required_fields: Sequence[str] = (),
                 ):
        self._min_age = min_age
        self._required_fields = tuple(required_fields)

    @property
    def min_age(self) -> Any:
        return self._min_age

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return self._required_fields

    @classmethod
    def from_rules(cls, rules: Optional[Dict[str, Any]] = None
                   ) -> 'VoterValidator':
        '''Create a validator from a rules mapping.

        Recognizes ``minAge`` and ``requiredFields`` keys, as well as their
        snake_case variants. Missing keys get the defaults.
        '''
        if not isinstance(rules, collections.abc.Mapping):
            rules = {}
        min_age = rules.get('minAge', rules.get('min_age'))
        required_fields = rules.get(
            'requiredFields', rules.get('required_fields')
        )
        return cls(
            min_age=MIN_VOTER_AGE if min_age is None else min_age,
            required_fields=required_fields or (),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'minAge': self.min_age,
            'requiredFields': list(self.required_fields),
        }

    def check(self, voter: Any) -> Optional[str]:
        '''Return the reason why the voter is invalid, or None if valid.'''
        if not isinstance(voter, collections.abc.Mapping):
            return INVALID_VOTER_OBJECT
        for field in self.required_fields:
            if field not in voter:
                return MISSING_FIELD.format(field)
        age = voter.get('age')
        if not is_number(age) or age < self.min_age:
            return AGE_NOT_MET
        return None

    def __call__(self, voter: Any) -> ValidationResult:
        reason = self.check(voter)
        if reason is None:
            return {'valid': True}
        logger.debug('voter %r invalid: %s', voter, reason)
        return {'valid': False, 'reason': reason}

    def is_valid(self, voter: Any) -> bool:
        return self.check(voter) is None

    def validate(self, voter: Any) -> None:
        '''Check the voter against the rules.

        :raises InvalidVoter: If the voter breaks any of the rules.
        '''
        reason = self.check(voter)
        if reason is not None:
            raise InvalidVoter(voter, reason)

    def __repr__(self) -> str:
        return (
            f'<VoterValidator(min_age={self.min_age!r},'
            f'required_fields={list(self.required_fields)!r})>'
        )


def create_vote_validator(rules: Optional[Dict[str, Any]] = None
                          ) -> VoterValidator:
    '''Create a voter validator from the given rules.

    The rules are read once; changing the rules mapping afterwards does not
    affect the validator.

    :param rules: A mapping with optional ``minAge`` (default 18) and
        ``requiredFields`` (default none) keys.
    :returns: A callable that takes a voter record and returns
        ``{'valid': True}``, or ``{'valid': False, 'reason': ...}``.
    '''
    return VoterValidator.from_rules(rules)
