"""
Data model shared by the instance filters.

A :class:`Dataset` is an ordered list of :class:`Row` objects that all conform
to one :class:`Schema`. Rows hold every value as a float: numeric attributes
store their value, nominal attributes store the integer code of their label
and a missing value is stored as NaN.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

NUMERIC = "numeric"
NOMINAL = "nominal"

MISSING = float("nan")


def is_missing(value: float) -> bool:
    """Check whether a stored attribute value is the missing marker."""
    return value is None or math.isnan(value)


@dataclass(frozen=True)
class Attribute:
    """
    Description of one column of a dataset.

    Parameters
    ----------
    name : str
        Name of the attribute.
    kind : str, default='numeric'
        Either 'numeric' or 'nominal'.
    values : Tuple[Any, ...], default=()
        Labels of a nominal attribute. The position of a label is the code
        stored in rows.
    """
    name: str
    kind: str = NUMERIC
    values: Tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.kind not in (NUMERIC, NOMINAL):
            raise ValueError(f"Unknown attribute kind: {self.kind}. Use 'numeric' or 'nominal'.")
        object.__setattr__(self, "values", tuple(self.values))
        if self.kind == NUMERIC and self.values:
            raise ValueError(f"Numeric attribute '{self.name}' cannot declare nominal values")
        if len(set(self.values)) != len(self.values):
            raise ValueError(f"Nominal attribute '{self.name}' has repeated values")

    @property
    def is_nominal(self) -> bool:
        return self.kind == NOMINAL

    @property
    def num_values(self) -> int:
        return len(self.values)

    def index_of(self, label: Any) -> int:
        """Return the code of a nominal label."""
        try:
            return self.values.index(label)
        except ValueError:
            raise ValueError(f"'{label}' is not a value of attribute '{self.name}'") from None

    def label(self, code: float) -> Any:
        """Return the label of a stored nominal code, or None if missing."""
        if is_missing(code):
            return None
        return self.values[int(code)]

    def __str__(self) -> str:
        if self.is_nominal:
            return f"@attribute {self.name} {{{','.join(str(v) for v in self.values)}}}"
        return f"@attribute {self.name} numeric"


@dataclass(frozen=True)
class Schema:
    """
    Ordered attributes of a dataset and the position of its class attribute.

    Parameters
    ----------
    attributes : Sequence[Attribute]
        The attributes, in column order.
    class_index : Optional[int], default=None
        Position of the class attribute, or None if the data has no class.
    """
    attributes: Tuple[Attribute, ...]
    class_index: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "attributes", tuple(self.attributes))
        if self.class_index is not None and not 0 <= self.class_index < len(self.attributes):
            raise ValueError(
                f"Class index {self.class_index} out of range for {len(self.attributes)} attributes"
            )

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def attribute_names(self) -> List[str]:
        return [attr.name for attr in self.attributes]

    @property
    def class_attribute(self) -> Optional[Attribute]:
        if self.class_index is None:
            return None
        return self.attributes[self.class_index]

    @property
    def num_classes(self) -> int:
        """Number of labels of a nominal class attribute, 0 otherwise."""
        class_attr = self.class_attribute
        if class_attr is None or not class_attr.is_nominal:
            return 0
        return class_attr.num_values

    def describe_class(self) -> str:
        class_attr = self.class_attribute
        if class_attr is None:
            return "no class attribute"
        return str(class_attr)

    def conform(self, row: Union["Row", Sequence[float]]) -> "Row":
        """
        Convert a row to a :class:`Row` and check it against this schema.

        Raises
        ------
        ValueError
            If the row length does not match the schema.
        """
        if not isinstance(row, Row):
            row = Row(row)
        if len(row) != self.num_attributes:
            raise ValueError(
                f"Row has {len(row)} values but the schema defines "
                f"{self.num_attributes} attributes"
            )
        return row


class Row:
    """
    An immutable vector of attribute values.

    Values are converted to floats on construction; ``None`` becomes the
    missing marker (NaN). Two rows compare equal when all their values are
    equal, with missing values matching each other.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[Optional[float]]):
        object.__setattr__(
            self, "_values", tuple(MISSING if v is None else float(v) for v in values)
        )

    def __setattr__(self, name, value):
        raise AttributeError("Row objects are immutable")

    def __reduce__(self):
        return (Row, (self._values,))

    @property
    def values(self) -> Tuple[float, ...]:
        return self._values

    def copy(self) -> "Row":
        """Return a new row holding the same values."""
        return Row(self._values)

    def is_missing(self, index: int) -> bool:
        return is_missing(self._values[index])

    def class_value(self, schema: Schema) -> Optional[int]:
        """Return the class code of this row, or None if it is missing or unset."""
        if schema.class_index is None:
            return None
        value = self._values[schema.class_index]
        if is_missing(value):
            return None
        return int(value)

    def _key(self) -> Tuple[Optional[float], ...]:
        return tuple(None if math.isnan(v) else v for v in self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        shown = ", ".join("?" if math.isnan(v) else f"{v:g}" for v in self._values)
        return f"Row({shown})"


class Dataset:
    """
    Ordered collection of rows sharing one schema.

    Parameters
    ----------
    schema : Schema
        Schema every row must conform to.
    rows : Optional[Iterable[Union[Row, Sequence[float]]]], default=None
        Initial rows. Plain sequences are converted to :class:`Row`.
    """

    def __init__(
        self,
        schema: Schema,
        rows: Optional[Iterable[Union[Row, Sequence[float]]]] = None,
    ):
        self.schema = schema
        self._rows: List[Row] = []
        for row in rows or []:
            self.add(row)

    def add(self, row: Union[Row, Sequence[float]]) -> Row:
        """
        Append a row, converting it to a :class:`Row` if needed.

        Raises
        ------
        ValueError
            If the row length does not match the schema.
        """
        row = self.schema.conform(row)
        self._rows.append(row)
        return row

    def empty_like(self) -> "Dataset":
        return Dataset(self.schema)

    @property
    def rows(self) -> List[Row]:
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> Row:
        return self._rows[index]

    def __repr__(self) -> str:
        return f"Dataset({len(self._rows)} rows, {self.schema.num_attributes} attributes)"

    def class_values(self) -> List[Optional[int]]:
        """Return the class code of every row, None where it is missing."""
        return [row.class_value(self.schema) for row in self._rows]

    def class_counts(self) -> np.ndarray:
        """
        Count the occurrences of each class code.

        Returns
        -------
        np.ndarray
            Integer counts indexed by class code. Rows with a missing class
            are not counted.
        """
        codes = [code for code in self.class_values() if code is not None]
        return np.bincount(np.asarray(codes, dtype=int), minlength=self.schema.num_classes)

    def class_distribution(self) -> pd.Series:
        """Return the class counts as a Series indexed by class label."""
        class_attr = self.schema.class_attribute
        if class_attr is None:
            raise ValueError("Dataset has no class attribute")
        counts = self.class_counts()
        labels = list(class_attr.values) or list(range(len(counts)))
        return pd.Series(counts, index=labels, name=class_attr.name)

    def to_array(self) -> np.ndarray:
        """Return the values as a float matrix of shape (n_rows, n_attributes)."""
        if not self._rows:
            return np.empty((0, self.schema.num_attributes), dtype=float)
        return np.array([row.values for row in self._rows], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """
        Convert the dataset into a pandas DataFrame.

        Nominal attributes become categorical columns, missing values NaN.
        """
        matrix = self.to_array()
        columns = {}
        for i, attr in enumerate(self.schema.attributes):
            column = matrix[:, i]
            if attr.is_nominal:
                codes = np.where(np.isnan(column), -1, column).astype(int)
                columns[attr.name] = pd.Categorical.from_codes(codes, categories=list(attr.values))
            else:
                columns[attr.name] = column
        return pd.DataFrame(columns, columns=self.schema.attribute_names)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        class_column: Optional[str] = None,
        nominal_columns: Optional[List[str]] = None,
    ) -> "Dataset":
        """
        Build a dataset from a pandas DataFrame.

        Parameters
        ----------
        df : pd.DataFrame
            The data to convert.
        class_column : Optional[str], default=None
            Column holding the class. It is always treated as nominal.
        nominal_columns : Optional[List[str]], default=None
            Numeric columns that should be treated as nominal anyway.

        Returns
        -------
        Dataset
            Dataset whose schema mirrors the dataframe columns.

        Examples
        --------
        >>> import pandas as pd
        >>> df = pd.DataFrame({'x': [1.0, 2.0], 'label': ['a', 'b']})
        >>> data = Dataset.from_frame(df, class_column='label')
        >>> data.schema.num_classes
        2
        """
        if class_column is not None and class_column not in df.columns:
            raise ValueError(f"Column '{class_column}' not found in dataframe")
        forced = set(nominal_columns or [])
        if class_column is not None:
            forced.add(class_column)

        attributes = []
        encoded = []
        for name in df.columns:
            series = df[name]
            if name in forced or not _is_numeric_series(series):
                labels = _nominal_labels(series)
                codes = pd.Categorical(series, categories=labels).codes.astype(float)
                codes[codes < 0] = np.nan
                attributes.append(Attribute(name, NOMINAL, labels))
                encoded.append(codes)
            else:
                attributes.append(Attribute(name, NUMERIC))
                encoded.append(series.astype(float).to_numpy())

        class_index = None if class_column is None else list(df.columns).index(class_column)
        schema = Schema(tuple(attributes), class_index)
        matrix = np.column_stack(encoded) if encoded else np.empty((len(df), 0))
        return cls(schema, (Row(values) for values in matrix))


def _is_numeric_series(series: pd.Series) -> bool:
    return (
        pd.api.types.is_numeric_dtype(series)
        and not pd.api.types.is_bool_dtype(series)
        and not isinstance(series.dtype, pd.CategoricalDtype)
    )


def _nominal_labels(series: pd.Series) -> Tuple[Any, ...]:
    if isinstance(series.dtype, pd.CategoricalDtype):
        return tuple(series.cat.categories)
    present = pd.unique(series.dropna())
    try:
        return tuple(sorted(present))
    except TypeError:
        return tuple(sorted(present, key=str))
