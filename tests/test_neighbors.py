"""Tests for the neighbors module."""
import math

import numpy as np
import pytest

from instance_filters.core.dataset import NOMINAL, NUMERIC, Attribute, Dataset, Row, Schema
from instance_filters.neighbors import LinearNeighborSearch


@pytest.fixture
def schema():
    return Schema(
        (
            Attribute("x", NUMERIC),
            Attribute("color", NOMINAL, ("r", "g")),
            Attribute("label", NOMINAL, ("A", "B")),
        ),
        class_index=2,
    )


@pytest.fixture
def data(schema):
    return Dataset(schema, [
        [0.0, 0, 0],
        [10.0, 0, 0],
        [5.0, 1, 1],
    ])


class TestLinearNeighborSearch:
    """Tests for LinearNeighborSearch."""

    def test_mixed_distances(self, data):
        """Test normalised numeric and nominal mismatch distances."""
        search = LinearNeighborSearch(data)
        dist = search.distances(data[0])

        assert dist[0] == pytest.approx(0.0, abs=1e-6)
        assert dist[1] == pytest.approx(1.0, abs=1e-6)
        assert dist[2] == pytest.approx(math.sqrt(0.25 + 1.0), abs=1e-6)

    def test_class_is_ignored(self, data):
        search = LinearNeighborSearch(data)
        same_but_class = Row([0.0, 0, 1])
        assert search.distances(same_but_class)[0] == pytest.approx(0.0, abs=1e-6)

    def test_nearest_order(self, data):
        search = LinearNeighborSearch(data)
        assert search.nearest_indices(data[0], 3) == [0, 1, 2]
        assert search.nearest_indices(data[0], 2, exclude=0) == [1, 2]
        assert search.nearest(data[1], 1, exclude=1) == [data[0]]

    def test_k_larger_than_dataset(self, data):
        search = LinearNeighborSearch(data)
        assert search.nearest_indices(data[1], 10, exclude=1) == [0, 2]

    def test_invalid_k(self, data):
        with pytest.raises(ValueError, match="at least 1"):
            LinearNeighborSearch(data).nearest_indices(data[0], 0)

    def test_ties_broken_by_position(self, schema):
        data = Dataset(schema, [
            [1.0, 0, 0],
            [3.0, 0, 0],
            [1.0, 0, 1],
            [2.0, 0, 1],
        ])
        search = LinearNeighborSearch(data)
        # Rows 0 and 2 only differ by their class
        assert search.nearest_indices(Row([1.0, 0, 1]), 3) == [0, 2, 3]

    def test_missing_values(self, data, schema):
        """Test that missing coordinates are ignored and the rest rescaled."""
        search = LinearNeighborSearch(data)
        dist = search.distances(Row([None, 1, 0]))

        # One of three coordinates is missing: squared distances scale by 3/2
        assert dist[0] == pytest.approx(math.sqrt(1.0 * 3 / 2), abs=1e-6)
        assert dist[2] == pytest.approx(0.0, abs=1e-6)

    def test_nothing_in_common_is_infinitely_far(self, data):
        search = LinearNeighborSearch(data)
        dist = search.distances(Row([None, None, 0]))
        assert np.all(np.isinf(dist))
        assert search.nearest_indices(Row([None, None, 0]), 2) == [0, 1]

    def test_only_class_attribute(self):
        schema = Schema((Attribute("label", NOMINAL, ("A", "B")),), class_index=0)
        data = Dataset(schema, [[0], [1], [0]])
        search = LinearNeighborSearch(data)
        assert search.nearest_indices(data[0], 2, exclude=0) == [1, 2]

    def test_empty_dataset(self, schema):
        search = LinearNeighborSearch(Dataset(schema))
        assert search.nearest_indices(Row([1.0, 0, 0]), 3) == []
