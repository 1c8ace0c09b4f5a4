"""
Module for detecting and removing duplicate rows.
"""

from instance_filters.data_quality.duplicates import (
    DuplicatePartitioner,
    EqualityRelation,
    SortedRowSet,
    detect_duplicates,
    partition_indices,
    remove_duplicates,
)

__all__ = [
    "DuplicatePartitioner",
    "EqualityRelation",
    "SortedRowSet",
    "detect_duplicates",
    "partition_indices",
    "remove_duplicates",
]
