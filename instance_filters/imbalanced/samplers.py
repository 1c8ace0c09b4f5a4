"""
Random oversampling of the minority class.

References
----------
G.E.A.P.A. Batista, R.C. Prati, M.C. Monard (2004). A study of the behavior
of several methods for balancing machine learning training data.
SIGKDD Explorations, 6(1), 20-29.
"""
import logging
import numbers
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np
from sklearn.utils import check_random_state

from instance_filters.core.capabilities import Capabilities
from instance_filters.core.dataset import Dataset, Row
from instance_filters.core.protocol import InstanceFilter
from instance_filters.exceptions import ConfigError

logger = logging.getLogger(__name__)


def find_minority_majority(class_counts: np.ndarray) -> Tuple[Optional[int], Optional[int]]:
    """
    Find the least and most frequent observed classes.

    Classes that never occur are ignored. Ties go to the lowest class code.

    Parameters
    ----------
    class_counts : np.ndarray
        Occurrences indexed by class code.

    Returns
    -------
    Tuple[Optional[int], Optional[int]]
        The minority and majority class codes, (None, None) when no class
        was observed.
    """
    min_index, max_index = None, None
    for code, count in enumerate(class_counts):
        if count == 0:
            continue
        if min_index is None or count < class_counts[min_index]:
            min_index = code
        if max_index is None or count > class_counts[max_index]:
            max_index = code
    return min_index, max_index


class RandomOverSampler(InstanceFilter):
    """
    Duplicate random minority rows until the minority class reaches a
    given share of the majority class.

    The number of minority rows wanted is
    ``floor(percentage * n_majority / (100 - percentage))``. The missing
    rows are drawn with replacement among the minority rows and mixed into
    the original rows at random positions. Nothing is duplicated when the
    minority class is already large enough.

    Parameters
    ----------
    percentage : float, default=25.0
        Desired proportion of the minority class, between 1 and 99.
    random_state : int or RandomState, default=None
        Controls the rows drawn and the positions of the duplicates.

    Examples
    --------
    >>> from instance_filters import use_filter
    >>> sampler = RandomOverSampler(percentage=25.0, random_state=42)
    >>> balanced = use_filter(sampler, dataset)  # doctest: +SKIP
    """
    capabilities = Capabilities()
    _param_names = ("percentage", "random_state")

    def __init__(
        self,
        percentage: float = 25.0,
        random_state: Optional[Union[int, np.random.RandomState]] = None,
    ):
        super().__init__()
        self.percentage = percentage
        self.random_state = random_state

    @property
    def percentage(self) -> float:
        return self._percentage

    @percentage.setter
    def percentage(self, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ConfigError(f"Percentage must be a number, got {value!r}")
        if not 1 <= value <= 99:
            raise ConfigError("Percentage must be a value between 1 and 99.")
        self._percentage = float(value)

    def duplicates_needed(self, minority_count: int, majority_count: int) -> int:
        """Number of minority rows to add, negative when none are needed."""
        final_minority = int(self._percentage * majority_count / (100 - self._percentage))
        return final_minority - minority_count

    def _run_once(self, dataset: Dataset) -> Iterator[Row]:
        rng = check_random_state(self.random_state)
        class_counts = dataset.class_counts()
        min_class, max_class = find_minority_majority(class_counts)

        to_duplicate = 0
        # With a single observed class it is both minority and majority
        if min_class is not None:
            to_duplicate = self.duplicates_needed(
                int(class_counts[min_class]), int(class_counts[max_class])
            )

        if to_duplicate <= 0:
            logger.debug(f"Class counts {class_counts.tolist()}: no minority rows to duplicate")
            for row in dataset:
                yield row.copy()
            return

        minority = [i for i, code in enumerate(dataset.class_values()) if code == min_class]
        drawn: List[int] = [minority[rng.randint(len(minority))] for _ in range(to_duplicate)]
        logger.debug(
            f"Class counts {class_counts.tolist()}: duplicating {to_duplicate} rows "
            f"of class {min_class} against majority class {max_class}"
        )

        # Mix the duplicates in with the originals instead of appending them
        n_original, n_drawn = len(dataset), len(drawn)
        next_original, next_drawn = 0, 0
        while next_original < n_original or next_drawn < n_drawn:
            if next_original == n_original:
                take_original = False
            elif next_drawn == n_drawn:
                take_original = True
            else:
                take_original = rng.randint(2) == 0

            if take_original:
                yield dataset[next_original].copy()
                next_original += 1
            else:
                yield dataset[drawn[next_drawn]].copy()
                next_drawn += 1
