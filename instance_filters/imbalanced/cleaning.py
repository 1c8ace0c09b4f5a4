"""
Edited nearest neighbour cleaning.

References
----------
D.L. Wilson (1972). Asymptotic properties of nearest neighbor rules using
edited data. IEEE Transactions on Systems, Man, and Cybernetics, 2(3), 408-421.
"""
import logging
import numbers
from collections import Counter
from typing import Callable, List, Optional

from instance_filters.core.capabilities import Capabilities
from instance_filters.core.dataset import Dataset, Row
from instance_filters.core.protocol import InstanceFilter
from instance_filters.exceptions import ConfigError
from instance_filters.neighbors import LinearNeighborSearch, NeighborSearch

logger = logging.getLogger(__name__)


def is_outvoted(own_class: int, neighbor_classes: List[Optional[int]]) -> bool:
    """
    Check whether some other class strictly outvotes a row's own class.

    Neighbours with a missing class (None) do not vote. A tie with the own
    class does not count as being outvoted.
    """
    votes = Counter(code for code in neighbor_classes if code is not None)
    agree = votes.get(own_class, 0)
    return any(count > agree for code, count in votes.items() if code != own_class)


class EditedNearestNeighbours(InstanceFilter):
    """
    Remove rows whose class is outvoted by their k nearest neighbours.

    Every row is compared with its ``k`` nearest other rows. It is dropped
    when another class has strictly more votes among them than its own
    class. Rows with a missing class neither vote nor get removed. The
    retained rows keep their original order.

    Parameters
    ----------
    k : int, default=3
        Number of neighbours, between 1 and 99.
    neighbor_search : Callable[[Dataset], NeighborSearch], default=LinearNeighborSearch
        Factory building the neighbour search over the buffered rows.
    """
    capabilities = Capabilities(missing_values=True, missing_class_values=True)
    _param_names = ("k", "neighbor_search")

    def __init__(
        self,
        k: int = 3,
        neighbor_search: Callable[[Dataset], NeighborSearch] = LinearNeighborSearch,
    ):
        super().__init__()
        self.k = k
        self.neighbor_search = neighbor_search

    @property
    def k(self) -> int:
        return self._k

    @k.setter
    def k(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise ConfigError(f"Number of neighbours must be an integer, got {value!r}")
        if not 1 <= value <= 99:
            raise ConfigError("No. of neighbours must be between 1 and 99.")
        self._k = int(value)

    def _run_once(self, dataset: Dataset) -> List[Row]:
        search = self.neighbor_search(dataset)
        class_values = dataset.class_values()

        kept = []
        for i, target in enumerate(dataset):
            own_class = class_values[i]
            if own_class is not None:
                neighbors = search.nearest_indices(target, self._k, exclude=i)
                if is_outvoted(own_class, [class_values[j] for j in neighbors]):
                    continue
            kept.append(target.copy())

        logger.debug(f"Edited nearest neighbours (k={self._k}) removed {len(dataset) - len(kept)} of {len(dataset)} rows")
        return kept
