'''Vote counts over nested administrative regions.

A region tree is a mapping with a ``name``, the ``votes`` counted directly in
the region and a list of ``subRegions`` of the same shape. The counting is
total: malformed parts of the tree count as zero votes instead of raising.

Cyclic region graphs are not supported; counting them does not terminate.
'''

import logging
import collections.abc
from numbers import Real
from typing import Any

from votetally.util import is_number


logger = logging.getLogger(__name__)


def count_votes_in_regions(region_tree: Any) -> Real:
    '''Count all votes in the region and its subregions, recursively.

    :param region_tree: Root region mapping. Its ``votes`` count as zero
        if missing or not a number, its ``subRegions`` as empty if missing
        or not a list. Anything that is not a mapping counts as zero.
    :returns: Sum of votes of all regions in the tree.
    '''
    total = 0
    # explicit stack instead of recursion, so deep trees are fine
    stack = [region_tree]
    while stack:
        region = stack.pop()
        if not isinstance(region, collections.abc.Mapping):
            if region is not None:
                logger.debug('ignoring malformed region %r', region)
            continue
        votes = region.get('votes')
        if is_number(votes):
            total += votes
        sub_regions = region.get('subRegions')
        if isinstance(sub_regions, (list, tuple)):
            stack.extend(reversed(sub_regions))
    return total

