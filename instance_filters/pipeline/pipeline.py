"""Sequential composition of instance filters.

Each step is fully drained before its output is fed to the next step, so
every filter sees its whole input as a single first batch.
"""

from __future__ import annotations

import logging
import pickle
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from instance_filters.core.dataset import Dataset
from instance_filters.core.protocol import InstanceFilter, use_filter

logger = logging.getLogger(__name__)


class FilterPipeline:
    """Chain of named instance filters applied one after the other."""

    def __init__(self, steps: Optional[List[Tuple[str, InstanceFilter]]] = None):
        """Initialize the pipeline with optional steps.

        Args:
            steps: List of (name, filter) pairs to include
        """
        self.steps: List[Tuple[str, InstanceFilter]] = []
        self._summary: List[Dict[str, Any]] = []
        for name, instance_filter in steps or []:
            self.add_step(name, instance_filter)

    def add_step(self, name: str, instance_filter: InstanceFilter) -> FilterPipeline:
        """Add a step to the end of the pipeline.

        Args:
            name: Unique name of the step
            instance_filter: Filter run by the step

        Returns:
            self: For method chaining
        """
        if name in self.step_names:
            raise ValueError(f"Step name '{name}' already exists in pipeline")
        self.steps.append((name, instance_filter))
        return self

    @property
    def step_names(self) -> List[str]:
        return [name for name, _ in self.steps]

    def get_step(self, name: str) -> InstanceFilter:
        """Return the filter of the step with the given name."""
        for step_name, instance_filter in self.steps:
            if step_name == name:
                return instance_filter
        raise ValueError(f"Step '{name}' not found in pipeline")

    def apply(self, dataset: Dataset) -> Dataset:
        """Run the dataset through every step.

        Args:
            dataset: Input rows

        Returns:
            Output of the last step
        """
        self._summary = []
        data = dataset
        for name, instance_filter in self.steps:
            result = use_filter(instance_filter, data)
            logger.info(f"Step '{name}': {len(data)} rows in, {len(result)} rows out")
            self._summary.append({
                'step': name,
                'filter': type(instance_filter).__name__,
                'rows_in': len(data),
                'rows_out': len(result),
            })
            data = result
        return data

    def apply_frame(
        self,
        df: pd.DataFrame,
        class_column: Optional[str] = None,
        nominal_columns: Optional[List[str]] = None,
    ) -> pd.DataFrame:
        """Run the rows of a dataframe through every step.

        Args:
            df: Input dataframe
            class_column: Column holding the class
            nominal_columns: Numeric columns to treat as nominal

        Returns:
            Dataframe with the output of the last step
        """
        dataset = Dataset.from_frame(df, class_column=class_column, nominal_columns=nominal_columns)
        return self.apply(dataset).to_frame()

    @property
    def step_summary(self) -> pd.DataFrame:
        """Row counts before and after each step of the last run."""
        return pd.DataFrame(self._summary, columns=['step', 'filter', 'rows_in', 'rows_out'])

    def save(self, path: Union[str, Path]) -> None:
        """Save the pipeline to disk.

        Args:
            path: Path to save the pipeline
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'wb') as f:
            pickle.dump(self, f)

    @classmethod
    def load(cls, path: Union[str, Path]) -> FilterPipeline:
        """Load a pipeline from disk.

        Args:
            path: Path to load the pipeline from

        Returns:
            Loaded pipeline
        """
        with open(path, 'rb') as f:
            return pickle.load(f)

    def __len__(self) -> int:
        return len(self.steps)
