"""Tests for the pipeline module."""
import pandas as pd
import pytest

from instance_filters.core.dataset import NOMINAL, NUMERIC, Attribute, Dataset, Schema
from instance_filters.data_quality import DuplicatePartitioner
from instance_filters.imbalanced import EditedNearestNeighbours, RandomOverSampler
from instance_filters.pipeline import FilterPipeline

A, B = 0, 1


class TestFilterPipeline:
    """Tests for the FilterPipeline class."""

    @pytest.fixture
    def sample_data(self):
        """Imbalanced data with repeated rows."""
        schema = Schema(
            (Attribute("x", NUMERIC), Attribute("label", NOMINAL, ("A", "B"))),
            class_index=1,
        )
        rows = [[float(i), A] for i in range(40)]
        rows += [[100.0 + i, B] for i in range(4)]
        rows += [[0.0, A], [1.0, A]]
        return Dataset(schema, rows)

    def test_pipeline_initialization(self):
        pipeline = FilterPipeline()
        assert pipeline.steps == []
        assert len(pipeline) == 0

        dedup = DuplicatePartitioner()
        ros = RandomOverSampler()
        pipeline = FilterPipeline([("dedup", dedup), ("ros", ros)])
        assert pipeline.step_names == ["dedup", "ros"]
        assert pipeline.get_step("ros") is ros

    def test_add_step(self):
        pipeline = FilterPipeline()
        result = pipeline.add_step("dedup", DuplicatePartitioner())
        assert result is pipeline

        with pytest.raises(ValueError, match="already exists"):
            pipeline.add_step("dedup", RandomOverSampler())

    def test_get_missing_step(self):
        with pytest.raises(ValueError, match="not found"):
            FilterPipeline().get_step("ros")

    def test_apply(self, sample_data):
        """Test that each step sees the complete output of the previous one."""
        pipeline = FilterPipeline([
            ("dedup", DuplicatePartitioner()),
            ("ros", RandomOverSampler(percentage=25, random_state=0)),
            ("enn", EditedNearestNeighbours(k=3)),
        ])
        result = pipeline.apply(sample_data)

        summary = pipeline.step_summary
        assert summary["step"].tolist() == ["dedup", "ros", "enn"]
        assert summary["rows_in"].tolist() == [46, 44, 53]
        assert summary["rows_out"].tolist()[:2] == [44, 53]
        assert summary["rows_out"].iloc[-1] == len(result)

    def test_empty_pipeline(self, sample_data):
        pipeline = FilterPipeline()
        assert pipeline.apply(sample_data) is sample_data
        assert pipeline.step_summary.empty

    def test_apply_frame(self):
        df = pd.DataFrame({
            "x": [1.0, 1.0, 2.0, 3.0],
            "label": ["a", "a", "b", "a"],
        })
        pipeline = FilterPipeline([("dedup", DuplicatePartitioner())])
        result = pipeline.apply_frame(df, class_column="label")

        assert result["x"].tolist() == [1.0, 2.0, 3.0]
        assert result["label"].astype(str).tolist() == ["a", "b", "a"]

    def test_save_and_load(self, tmp_path, sample_data):
        pipeline = FilterPipeline([
            ("dedup", DuplicatePartitioner()),
            ("ros", RandomOverSampler(percentage=30, random_state=5)),
        ])
        path = tmp_path / "pipelines" / "pipeline.pkl"
        pipeline.save(path)

        loaded = FilterPipeline.load(path)
        assert loaded.step_names == ["dedup", "ros"]
        assert loaded.get_step("ros").percentage == 30.0
        assert loaded.apply(sample_data).rows == pipeline.apply(sample_data).rows
