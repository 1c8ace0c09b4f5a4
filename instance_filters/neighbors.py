"""
Nearest neighbour search over the rows of a dataset.

The class attribute never takes part in the distance. The brute force
:class:`LinearNeighborSearch` normalises numeric attributes to [0, 1] with a
MinMaxScaler, expands nominal attributes so that two different labels are at
distance 1, and relies on scikit-learn's ``nan_euclidean_distances`` for
missing values: coordinates missing in either row are ignored and the
squared distance is scaled up by the share of coordinates that were present.
Rows with no coordinate in common are infinitely far apart.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np
from sklearn.metrics.pairwise import nan_euclidean_distances
from sklearn.preprocessing import MinMaxScaler

from instance_filters.core.dataset import Dataset, Row

logger = logging.getLogger(__name__)

# One-hot coordinates are scaled so that a label mismatch adds exactly 1
# to the squared distance
_NOMINAL_SCALE = 1.0 / np.sqrt(2.0)


class NeighborSearch(ABC):
    """
    Abstract k-nearest-neighbour search built once over a dataset.

    Parameters
    ----------
    dataset : Dataset
        The rows that can be returned as neighbours.
    """

    def __init__(self, dataset: Dataset):
        self.dataset = dataset

    @abstractmethod
    def nearest_indices(self, query: Row, k: int, exclude: Optional[int] = None) -> List[int]:
        """
        Find the positions of the rows closest to a query row.

        Parameters
        ----------
        query : Row
            The row to find neighbours for.
        k : int
            Maximum number of neighbours to return.
        exclude : Optional[int], default=None
            Position of a row that must not be returned, typically the
            position of the query itself.

        Returns
        -------
        List[int]
            Row positions ordered by increasing distance. Rows at equal
            distance are ordered by position.
        """
        pass

    def nearest(self, query: Row, k: int, exclude: Optional[int] = None) -> List[Row]:
        """Return the rows closest to a query row, nearest first."""
        return [self.dataset[i] for i in self.nearest_indices(query, k, exclude)]


class LinearNeighborSearch(NeighborSearch):
    """Brute force search comparing the query with every row."""

    def __init__(self, dataset: Dataset):
        super().__init__(dataset)
        schema = dataset.schema
        features = [i for i in range(schema.num_attributes) if i != schema.class_index]
        self._numeric = [i for i in features if not schema.attributes[i].is_nominal]
        self._nominal = [i for i in features if schema.attributes[i].is_nominal]

        raw = dataset.to_array()
        self._scaler = None
        if self._numeric and len(raw) > 0:
            self._scaler = MinMaxScaler().fit(raw[:, self._numeric])
        self._matrix = self._encode(raw)

    def _encode(self, raw: np.ndarray) -> np.ndarray:
        blocks = []
        if self._numeric:
            numeric = raw[:, self._numeric]
            if self._scaler is not None:
                numeric = self._scaler.transform(numeric)
            blocks.append(numeric)

        for i in self._nominal:
            codes = raw[:, i]
            n_values = self.dataset.schema.attributes[i].num_values
            onehot = (codes[:, None] == np.arange(n_values)[None, :]).astype(float) * _NOMINAL_SCALE
            onehot[np.isnan(codes)] = np.nan
            blocks.append(onehot)

        if not blocks:
            return np.empty((len(raw), 0))
        return np.hstack(blocks)

    def distances(self, query: Row) -> np.ndarray:
        """Distance from the query to every row of the dataset."""
        if len(self.dataset) == 0:
            return np.empty(0)
        if self._matrix.shape[1] == 0:
            return np.zeros(len(self.dataset))

        encoded = self._encode(np.asarray([query.values], dtype=float))
        dist = nan_euclidean_distances(encoded, self._matrix)[0]
        dist[np.isnan(dist)] = np.inf
        return dist

    def nearest_indices(self, query: Row, k: int, exclude: Optional[int] = None) -> List[int]:
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        order = np.argsort(self.distances(query), kind="stable")
        if exclude is not None:
            order = order[order != exclude]
        return [int(i) for i in order[:k]]
