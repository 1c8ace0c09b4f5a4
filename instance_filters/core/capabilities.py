"""
Declarations of the data each filter is able to process.
"""
from dataclasses import dataclass
from typing import FrozenSet

from instance_filters.core.dataset import NOMINAL, NUMERIC, Schema
from instance_filters.exceptions import UnsupportedFormatError


@dataclass(frozen=True)
class Capabilities:
    """
    Attribute and class types accepted by a filter.

    Parameters
    ----------
    attribute_kinds : FrozenSet[str]
        Attribute kinds allowed among the non-class attributes.
    class_kinds : FrozenSet[str]
        Kinds allowed for the class attribute.
    requires_class : bool
        Whether a schema without a class attribute is refused.
    missing_values : bool
        Whether missing attribute values are handled.
    missing_class_values : bool
        Whether rows with a missing class value are handled.

    Notes
    -----
    Only the schema is tested. The two missing value flags describe the
    filter and are never checked against rows: a filter that does not
    declare them still accepts rows with missing values and treats them as
    documented in its own docstring.
    """
    attribute_kinds: FrozenSet[str] = frozenset({NUMERIC, NOMINAL})
    class_kinds: FrozenSet[str] = frozenset({NOMINAL})
    requires_class: bool = True
    missing_values: bool = False
    missing_class_values: bool = False

    def test(self, schema: Schema) -> None:
        """
        Check a schema against these capabilities.

        Raises
        ------
        UnsupportedFormatError
            If the schema uses something the filter cannot handle.
        """
        for i, attr in enumerate(schema.attributes):
            if i == schema.class_index:
                continue
            if attr.kind not in self.attribute_kinds:
                raise UnsupportedFormatError(
                    f"Cannot handle {attr.kind} attribute '{attr.name}'"
                )

        class_attr = schema.class_attribute
        if class_attr is None:
            if self.requires_class:
                raise UnsupportedFormatError("No class attribute set")
            return
        if class_attr.kind not in self.class_kinds:
            raise UnsupportedFormatError(
                f"Cannot handle {class_attr.kind} class attribute '{class_attr.name}'"
            )

    def supports(self, schema: Schema) -> bool:
        try:
            self.test(schema)
        except UnsupportedFormatError:
            return False
        return True
