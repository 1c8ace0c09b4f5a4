"""
Two-phase batch filter protocol shared by all instance filters.

Rows are first buffered with :meth:`InstanceFilter.input`. When the batch is
closed with :meth:`InstanceFilter.batch_finished` the filter runs its
algorithm once over the whole buffer and queues the result, which callers
drain one row at a time with :meth:`InstanceFilter.poll_output`. Only the
first batch is processed; rows of later batches pass through unchanged.
"""
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Any, Callable, Deque, Dict, Iterable, Optional, Tuple

from instance_filters.core.capabilities import Capabilities
from instance_filters.core.dataset import Dataset, Row, Schema
from instance_filters.exceptions import ConfigError, InvalidStateError


class FilterState(Enum):
    """Lifecycle of a filter between two batches."""
    IDLE = "idle"
    BUFFERING = "buffering"
    FINALIZING = "finalizing"
    DRAINING = "draining"


class BatchFilterProtocol:
    """
    Buffer and output queue management for one filter instance.

    Parameters
    ----------
    run_once : Callable[[Dataset], Iterable[Row]]
        Algorithm executed on the buffered rows of the first batch. The rows
        it yields are queued for output in order.
    """

    def __init__(self, run_once: Callable[[Dataset], Iterable[Row]]):
        self._run_once = run_once
        self.reset(None)

    def reset(self, schema: Optional[Schema]) -> None:
        """Forget all buffered and queued rows and adopt a new schema."""
        self.schema = schema
        self._buffer = None if schema is None else Dataset(schema)
        self._queue: Deque[Row] = deque()
        self._new_batch = True
        self._first_batch_done = False
        self.state = FilterState.IDLE

    @property
    def first_batch_done(self) -> bool:
        return self._first_batch_done

    def _require_schema(self) -> None:
        if self.schema is None:
            raise InvalidStateError("No input instance format defined")

    def _start_batch(self) -> None:
        # The previous batch is over, so whatever was not collected is stale
        if self._new_batch:
            self._queue.clear()
            self._new_batch = False
            self.state = FilterState.BUFFERING

    def input(self, row: Row) -> bool:
        self._require_schema()
        self._start_batch()
        if self._first_batch_done:
            self._queue.append(self.schema.conform(row))
            self.state = FilterState.DRAINING
            return True
        self._buffer.add(row)
        return False

    def batch_finished(self) -> bool:
        """
        Close the batch, running the algorithm if it is the first one.

        If the algorithm raises, the batch stays open: the buffered rows are
        kept, the state goes back to BUFFERING and nothing is queued. Further
        rows extend the same batch until the next call succeeds or the
        schema is set again.
        """
        self._require_schema()
        self._start_batch()
        if not self._first_batch_done:
            self.state = FilterState.FINALIZING
            try:
                output = list(self._run_once(self._buffer))
            except Exception:
                self.state = FilterState.BUFFERING
                raise
            self._queue.extend(output)
            self._buffer = Dataset(self.schema)

        self._new_batch = True
        self._first_batch_done = True
        self.state = FilterState.DRAINING if self._queue else FilterState.IDLE
        return len(self._queue) != 0

    def poll_output(self) -> Optional[Row]:
        self._require_schema()
        if not self._queue:
            return None
        row = self._queue.popleft()
        if not self._queue and self.state == FilterState.DRAINING:
            self.state = FilterState.IDLE
        return row

    def output_peek(self) -> Optional[Row]:
        self._require_schema()
        return self._queue[0] if self._queue else None

    def num_pending_output(self) -> int:
        return len(self._queue)


class InstanceFilter(ABC):
    """
    Abstract base class for filters that select or generate whole rows.

    Subclasses implement :meth:`_run_once`, list their options in
    ``_param_names`` and declare the data they accept in ``capabilities``.
    """
    capabilities: Capabilities = Capabilities()
    _param_names: Tuple[str, ...] = ()

    def __init__(self):
        self._protocol = BatchFilterProtocol(self._run_once)

    @abstractmethod
    def _run_once(self, dataset: Dataset) -> Iterable[Row]:
        """
        Process the rows of the first batch.

        Args:
            dataset: All rows buffered during the first batch

        Returns:
            The rows to output, in order
        """
        pass

    @property
    def input_format(self) -> Optional[Schema]:
        return self._protocol.schema

    @property
    def state(self) -> FilterState:
        return self._protocol.state

    @property
    def is_first_batch_done(self) -> bool:
        return self._protocol.first_batch_done

    def set_input_format(self, schema: Schema) -> bool:
        """Establish the schema of incoming rows and reset the filter.

        Args:
            schema: Schema of the rows that will be fed to the filter

        Returns:
            Always True: the output format is known immediately

        Raises:
            UnsupportedFormatError: If the schema is refused by the filter's capabilities
        """
        self.capabilities.test(schema)
        self._protocol.reset(schema)
        return True

    def input(self, row: Row) -> bool:
        """Feed one row to the filter.

        Sequences are converted to :class:`Row` in every batch.

        Returns:
            True if the row is immediately available from poll_output

        Raises:
            ValueError: If the row length does not match the input format
        """
        return self._protocol.input(row)

    def batch_finished(self) -> bool:
        """Close the current batch.

        Returns:
            True if there are rows waiting to be collected

        Raises:
            EmptyResultError: If the filter refuses to produce an empty result.
                The batch then stays open with its rows buffered.
        """
        return self._protocol.batch_finished()

    def poll_output(self) -> Optional[Row]:
        """Remove and return the next output row, or None if there is none."""
        return self._protocol.poll_output()

    def output_peek(self) -> Optional[Row]:
        return self._protocol.output_peek()

    def num_pending_output(self) -> int:
        return self._protocol.num_pending_output()

    def get_params(self) -> Dict[str, Any]:
        """Return the filter options as a dictionary."""
        return {name: getattr(self, name) for name in self._param_names}

    def set_params(self, **params) -> "InstanceFilter":
        """Set several options at once, validating each of them.

        Returns:
            self: For method chaining
        """
        for name, value in params.items():
            if name not in self._param_names:
                raise ConfigError(f"Invalid option '{name}' for {type(self).__name__}")
            setattr(self, name, value)
        return self

    def __repr__(self) -> str:
        options = ", ".join(f"{k}={v!r}" for k, v in self.get_params().items())
        return f"{type(self).__name__}({options})"


def use_filter(instance_filter: InstanceFilter, dataset: Dataset) -> Dataset:
    """
    Push a whole dataset through a filter and collect its output.

    Parameters
    ----------
    instance_filter : InstanceFilter
        The filter to apply. Its input format is reset to the dataset schema.
    dataset : Dataset
        The rows to filter.

    Returns
    -------
    Dataset
        New dataset with the filter output, in output order.
    """
    instance_filter.set_input_format(dataset.schema)
    for row in dataset:
        instance_filter.input(row)
    instance_filter.batch_finished()

    result = dataset.empty_like()
    row = instance_filter.poll_output()
    while row is not None:
        result.add(row)
        row = instance_filter.poll_output()
    return result
