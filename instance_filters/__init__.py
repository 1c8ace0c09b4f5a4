"""
instance_filters: batch filters that select rows of tabular data for supervised learning.
"""

__version__ = "0.1.0"

from instance_filters.core.dataset import Attribute, Dataset, Row, Schema
from instance_filters.core.protocol import BatchFilterProtocol, FilterState, InstanceFilter, use_filter
from instance_filters.exceptions import (
    ConfigError,
    EmptyResultError,
    InstanceFilterError,
    InvalidStateError,
    UnsupportedFormatError,
)

# Filters
from instance_filters.imbalanced import EditedNearestNeighbours, RandomOverSampler
from instance_filters.data_quality import DuplicatePartitioner

from instance_filters.pipeline import FilterPipeline
from instance_filters.utils import filter_frame
