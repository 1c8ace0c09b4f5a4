"""Tests for the utils.dataframe_utils module."""
import numpy as np
import pandas as pd
import pytest

from instance_filters.data_quality import DuplicatePartitioner
from instance_filters.imbalanced import RandomOverSampler
from instance_filters.utils import check_dataframe_type, convert_dataframe, filter_frame


class TestDataframeUtils:
    """Test class for dataframe utilities."""

    @pytest.fixture
    def sample_df(self):
        return pd.DataFrame({
            "count": [1, 2, 2, 3, 4, 5, 6, 7],
            "flag": [True, False, False, True, True, False, True, True],
            "kind": ["u", "v", "v", "u", "u", "v", "u", "u"],
            "target": ["no", "yes", "yes", "no", "no", "no", "no", "no"],
        })

    def test_check_dataframe_type(self, sample_df):
        assert check_dataframe_type(sample_df) == "pandas"
        assert check_dataframe_type([1, 2, 3]) == "unknown"

    def test_convert_dataframe_noop(self, sample_df):
        assert convert_dataframe(sample_df, "pandas") is sample_df

    def test_convert_unknown(self):
        with pytest.raises(ValueError, match="unknown dataframe type"):
            convert_dataframe([1, 2, 3], "pandas")

    def test_filter_frame_keeps_dtypes(self, sample_df):
        result = filter_frame(DuplicatePartitioner(), sample_df, class_column="target")

        assert len(result) == 7
        assert list(result.index) == list(range(7))
        assert result["count"].dtype == sample_df["count"].dtype
        assert result["flag"].dtype == np.bool_
        assert result["kind"].tolist() == ["u", "v", "u", "u", "v", "u", "u"]
        assert result["target"].tolist() == ["no", "yes", "no", "no", "no", "no", "no"]

    def test_filter_frame_oversampling(self, sample_df):
        result = filter_frame(
            RandomOverSampler(percentage=40, random_state=0),
            sample_df,
            class_column="target",
        )
        # 6 majority rows: floor(40 * 6 / 60) = 4 minority rows wanted
        assert (result["target"] == "yes").sum() == 4
        assert len(result) == len(sample_df) + 2

    def test_filter_frame_nominal_columns(self, sample_df):
        result = filter_frame(
            DuplicatePartitioner(invert=True),
            sample_df,
            class_column="target",
            nominal_columns=["count"],
        )
        assert result["count"].tolist() == [2]
        assert result["count"].dtype == sample_df["count"].dtype
