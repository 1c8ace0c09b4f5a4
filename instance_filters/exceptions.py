"""
Exception types raised by the instance filters.
"""
from typing import Optional


class InstanceFilterError(Exception):
    """Base class for all errors raised by instance_filters."""


class ConfigError(InstanceFilterError, ValueError):
    """Raised when a filter option is set to an invalid value."""


class InvalidStateError(InstanceFilterError, RuntimeError):
    """Raised when a filter is used before its input format is established."""


class UnsupportedFormatError(InstanceFilterError, ValueError):
    """Raised when a schema is refused by a filter's capabilities."""


class EmptyResultError(InstanceFilterError):
    """
    Raised when the partition requested from a DuplicatePartitioner is empty.

    Parameters
    ----------
    unique_count : int
        Number of rows found to be unique.
    duplicate_count : int
        Number of rows found to repeat an earlier row.
    use_class : bool
        Whether the class attribute took part in the comparison.
    class_description : Optional[str]
        Description of the class attribute of the filtered data.
    """

    def __init__(
        self,
        unique_count: int,
        duplicate_count: int,
        use_class: bool,
        class_description: Optional[str] = None,
    ):
        self.unique_count = unique_count
        self.duplicate_count = duplicate_count
        self.use_class = use_class
        self.class_description = class_description
        message = (
            "0 instances will be returned. Additional information:"
            f"\n\t{unique_count}: unique instances."
            f"\n\t{duplicate_count}: duplicated instances."
            f"\n\tuse_class: {use_class}"
        )
        if class_description:
            message += f"\n\t{class_description}"
        super().__init__(message)
