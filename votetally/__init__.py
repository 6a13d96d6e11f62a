"""Votetally - a library for running small in-memory elections.

The library covers the life of a single simple election:

-   Who can vote. Voters are registered with an :class:`session.Election`
    and can be screened beforehand with a validator from the ``validate``
    module, built from declarative rules such as a minimum age.
-   Casting the votes. Each registered voter can vote once for one of the
    candidates; the outcome is reported through callbacks.
-   Results. The session ranks the candidates by votes (or by any custom
    comparator) and names the winner.

Vote counts can also be aggregated over nested administrative regions by
the ``region`` module, and the ``tally`` module provides the pure tally
update that the sessions use to record votes.
"""

from votetally.tally import tally_pure    # noqa
from votetally.session import Election, create_election    # noqa
from votetally.validate import VoterValidator, create_vote_validator    # noqa
from votetally.region import count_votes_in_regions    # noqa
