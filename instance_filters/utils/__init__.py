"""
Utility functions for the instance_filters package.
"""

from instance_filters.utils.dataframe_utils import (
    check_dataframe_type,
    convert_dataframe,
    filter_frame,
)

__all__ = [
    "check_dataframe_type",
    "convert_dataframe",
    "filter_frame",
]
