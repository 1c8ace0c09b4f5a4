"""
Module for detecting and handling duplicate rows.

Rows are compared with an :class:`EqualityRelation`, a total order over rows
in which two rows are equal when all their compared attribute values match.
The first occurrence of a row is unique, every later occurrence a duplicate.
"""
import logging
from bisect import bisect_left
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from instance_filters.core.capabilities import Capabilities
from instance_filters.core.dataset import Dataset, Row, Schema
from instance_filters.core.protocol import InstanceFilter
from instance_filters.exceptions import ConfigError, EmptyResultError

logger = logging.getLogger(__name__)


class EqualityRelation:
    """
    Total order over the rows of one schema.

    Rows are compared attribute by attribute in column order. A missing value
    sorts before any present value and present values compare numerically.

    Parameters
    ----------
    schema : Schema
        Schema of the rows to compare.
    use_class : bool, default=True
        Whether the class attribute takes part in the comparison.
    """

    def __init__(self, schema: Schema, use_class: bool = True):
        self.schema = schema
        self.use_class = use_class
        self._positions = tuple(
            i for i in range(schema.num_attributes)
            if use_class or i != schema.class_index
        )

    def key(self, row: Row) -> Tuple[Tuple[int, float], ...]:
        """Sort key of a row; equal keys mean equal rows."""
        return tuple((0, 0.0) if row.is_missing(i) else (1, row[i]) for i in self._positions)

    def compare(self, first: Row, second: Row) -> int:
        """Return -1, 0 or 1 as the first row sorts before, with or after the second."""
        first_key, second_key = self.key(first), self.key(second)
        return (first_key > second_key) - (first_key < second_key)

    def equal(self, first: Row, second: Row) -> bool:
        return self.key(first) == self.key(second)


class SortedRowSet:
    """Set of rows kept sorted under an equality relation."""

    def __init__(self, relation: EqualityRelation):
        self.relation = relation
        self._keys: List[Tuple] = []
        self._rows: List[Row] = []

    def add(self, row: Row) -> bool:
        """Insert a row unless an equal one is present; return whether it was inserted."""
        key = self.relation.key(row)
        pos = bisect_left(self._keys, key)
        if pos < len(self._keys) and self._keys[pos] == key:
            return False
        self._keys.insert(pos, key)
        self._rows.insert(pos, row)
        return True

    def __contains__(self, row: Row) -> bool:
        key = self.relation.key(row)
        pos = bisect_left(self._keys, key)
        return pos < len(self._keys) and self._keys[pos] == key

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows)


def partition_indices(dataset: Dataset, use_class: bool = True) -> Tuple[List[int], List[int]]:
    """
    Split row positions into first occurrences and repeated occurrences.

    Parameters
    ----------
    dataset : Dataset
        The rows to examine, in order.
    use_class : bool, default=True
        Whether the class attribute takes part in the comparison.

    Returns
    -------
    Tuple[List[int], List[int]]
        Positions of unique rows and positions of duplicate rows, both in
        original order.
    """
    seen = SortedRowSet(EqualityRelation(dataset.schema, use_class))
    uniques, duplicates = [], []
    for i, row in enumerate(dataset):
        size_before = len(seen)
        seen.add(row)
        if len(seen) > size_before:
            uniques.append(i)
        else:
            duplicates.append(i)
    return uniques, duplicates


class DuplicatePartitioner(InstanceFilter):
    """
    Remove duplicate rows, or keep only the duplicates.

    Parameters
    ----------
    invert : bool, default=False
        If False, output the first occurrence of every row. If True, output
        the rows that repeat an earlier row.
    use_class : bool, default=True
        Whether the class attribute takes part in the comparison.

    Raises
    ------
    EmptyResultError
        From ``batch_finished`` when the requested partition is empty.
    """
    capabilities = Capabilities(missing_values=True, missing_class_values=True)
    _param_names = ("invert", "use_class")

    def __init__(self, invert: bool = False, use_class: bool = True):
        super().__init__()
        self.invert = invert
        self.use_class = use_class

    @property
    def invert(self) -> bool:
        return self._invert

    @invert.setter
    def invert(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise ConfigError(f"invert must be a boolean, got {value!r}")
        self._invert = value

    @property
    def use_class(self) -> bool:
        return self._use_class

    @use_class.setter
    def use_class(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise ConfigError(f"use_class must be a boolean, got {value!r}")
        self._use_class = value

    def _run_once(self, dataset: Dataset) -> List[Row]:
        uniques, duplicates = partition_indices(dataset, self._use_class)
        logger.debug(f"Found {len(uniques)} unique and {len(duplicates)} duplicated rows")

        selected = duplicates if self._invert else uniques
        if not selected:
            raise EmptyResultError(
                len(uniques),
                len(duplicates),
                self._use_class,
                dataset.schema.describe_class(),
            )
        return [dataset[i] for i in selected]


def _frame_partition(
    df: pd.DataFrame,
    class_column: Optional[str],
    use_class: bool,
) -> Tuple[List[int], List[int]]:
    dataset = Dataset.from_frame(df, class_column=class_column)
    return partition_indices(dataset, use_class=use_class or class_column is None)


def detect_duplicates(
    df: pd.DataFrame,
    class_column: Optional[str] = None,
    use_class: bool = True,
) -> Dict[str, Any]:
    """
    Detect rows that repeat an earlier row of a dataframe.

    Parameters
    ----------
    df : pd.DataFrame
        The dataframe to analyze.
    class_column : Optional[str], default=None
        Column holding the class, if any.
    use_class : bool, default=True
        Whether the class column takes part in the comparison.

    Returns
    -------
    Dict[str, Any]
        Duplicate statistics.

    Examples
    --------
    >>> import pandas as pd
    >>> df = pd.DataFrame({
    ...     'A': [1, 2, 1, 3, 4],
    ...     'B': ['x', 'y', 'x', 'z', 'x'],
    ... })
    >>> result = detect_duplicates(df)
    >>> result['has_duplicates']
    True
    >>> result['duplicate_count']
    1
    >>> result['duplicate_percentage']
    20.0
    """
    uniques, duplicates = _frame_partition(df, class_column, use_class)
    n_rows = len(df)
    info_dict = {
        'has_duplicates': len(duplicates) > 0,
        'duplicate_count': len(duplicates),
        'duplicate_percentage': float(len(duplicates) / n_rows * 100) if n_rows else 0.0,
        'total_rows': n_rows,
        'unique_rows': len(uniques),
        'duplicate_positions': duplicates,
    }
    if class_column is not None:
        info_dict['class_column'] = class_column
        info_dict['use_class'] = use_class
    return info_dict


def remove_duplicates(
    df: pd.DataFrame,
    class_column: Optional[str] = None,
    use_class: bool = True,
    invert: bool = False,
) -> pd.DataFrame:
    """
    Remove rows that repeat an earlier row of a dataframe.

    Unlike :class:`DuplicatePartitioner`, an empty result is returned as an
    empty dataframe.

    Parameters
    ----------
    df : pd.DataFrame
        The dataframe to process.
    class_column : Optional[str], default=None
        Column holding the class, if any.
    use_class : bool, default=True
        Whether the class column takes part in the comparison.
    invert : bool, default=False
        If True, return the duplicate rows instead of the unique ones.

    Returns
    -------
    pd.DataFrame
        The selected rows with their original index and dtypes.

    Examples
    --------
    >>> import pandas as pd
    >>> df = pd.DataFrame({
    ...     'A': [1, 2, 1, 3, 4],
    ...     'B': ['x', 'y', 'x', 'z', 'x'],
    ... })
    >>> len(remove_duplicates(df))
    4
    """
    uniques, duplicates = _frame_partition(df, class_column, use_class)
    return df.iloc[duplicates if invert else uniques]
