"""
Data model and batch filter protocol shared by all filters.
"""

from instance_filters.core.dataset import NOMINAL, NUMERIC, Attribute, Dataset, Row, Schema
from instance_filters.core.capabilities import Capabilities
from instance_filters.core.protocol import (
    BatchFilterProtocol,
    FilterState,
    InstanceFilter,
    use_filter,
)

__all__ = [
    "NOMINAL",
    "NUMERIC",
    "Attribute",
    "Dataset",
    "Row",
    "Schema",
    "Capabilities",
    "BatchFilterProtocol",
    "FilterState",
    "InstanceFilter",
    "use_filter",
]
