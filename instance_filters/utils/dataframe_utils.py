"""
Utilities for running instance filters on dataframes.
"""
import logging
from typing import Any, List, Literal, Optional

import pandas as pd

from instance_filters.core.dataset import Dataset
from instance_filters.core.protocol import InstanceFilter, use_filter

logger = logging.getLogger(__name__)


def check_dataframe_type(df: Any) -> str:
    """
    Check the type of dataframe.

    Parameters
    ----------
    df : Any
        The dataframe to check.

    Returns
    -------
    str
        The type of dataframe: 'pandas', 'polars', or 'unknown'.

    Examples
    --------
    >>> import pandas as pd
    >>> df = pd.DataFrame({'A': [1, 2, 3]})
    >>> check_dataframe_type(df)
    'pandas'
    """
    if isinstance(df, pd.DataFrame):
        return "pandas"

    # polars is an optional dependency
    try:
        import polars
        if isinstance(df, polars.DataFrame):
            return "polars"
    except ImportError:
        pass

    return "unknown"


def convert_dataframe(df: Any, to_type: Literal["pandas", "polars"]) -> Any:
    """
    Convert a dataframe to the specified type.

    Parameters
    ----------
    df : Any
        The dataframe to convert.
    to_type : Literal["pandas", "polars"]
        The type to convert to.

    Returns
    -------
    Any
        The converted dataframe.
    """
    df_type = check_dataframe_type(df)

    if df_type == to_type:
        return df
    if df_type == "unknown":
        raise ValueError(f"Cannot convert unknown dataframe type to {to_type}")

    if to_type == "pandas":
        return df.to_pandas()

    if to_type == "polars":
        try:
            import polars as pl
        except ImportError:
            raise ImportError(
                "polars is not installed. Install it with 'pip install polars'."
            )
        return pl.from_pandas(df)

    raise NotImplementedError(f"Conversion from {df_type} to {to_type} not implemented")


def _restore_dtypes(result: pd.DataFrame, original: pd.DataFrame) -> pd.DataFrame:
    for name in original.columns:
        dtype = original[name].dtype
        if isinstance(dtype, pd.CategoricalDtype):
            continue
        column = result[name]
        if column.isna().any():
            # Integer and boolean dtypes cannot hold NaN
            if isinstance(column.dtype, pd.CategoricalDtype):
                result[name] = column.astype(object)
            continue
        result[name] = column.astype(dtype)
    return result


def filter_frame(
    instance_filter: InstanceFilter,
    df: Any,
    class_column: Optional[str] = None,
    nominal_columns: Optional[List[str]] = None,
) -> Any:
    """
    Apply an instance filter to the rows of a dataframe.

    Parameters
    ----------
    instance_filter : InstanceFilter
        The filter to apply. Its input format is reset.
    df : Any
        The dataframe to filter. Can be pandas or polars.
    class_column : Optional[str], default=None
        Column holding the class.
    nominal_columns : Optional[List[str]], default=None
        Numeric columns that should be treated as nominal.

    Returns
    -------
    Any
        Dataframe of the same type with the output rows and a fresh index.
        Column dtypes are kept where the values allow it.
    """
    df_type = check_dataframe_type(df)
    df_pandas = convert_dataframe(df, "pandas") if df_type != "pandas" else df

    dataset = Dataset.from_frame(df_pandas, class_column=class_column, nominal_columns=nominal_columns)
    filtered = use_filter(instance_filter, dataset)
    logger.info(f"{type(instance_filter).__name__}: {len(dataset)} rows in, {len(filtered)} rows out")

    result = _restore_dtypes(filtered.to_frame(), df_pandas)
    if df_type == "polars":
        return convert_dataframe(result, "polars")
    return result
