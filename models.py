from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator, List, Tuple, Union

COLUMNS = (
    "id",
    "timestamp",
    "voltage",
    "current",
    "temperature",
    "state_of_charge",
    "internal_resistance",
)

# Types used by array casts and binary COPY, in column order
COLUMN_TYPES = (
    "int4",
    "timestamptz",
    "float8",
    "float8",
    "float8",
    "float8",
    "float8",
)


class IngestMethod(str, Enum):
    """The closed set of ingestion techniques, in the order the sweep runs them"""

    INSERT_VALUES = "insert-values"
    PREPARED_INSERT_VALUES = "prepared-insert-values"
    INSERT_UNNEST = "insert-unnest"
    PREPARED_INSERT_UNNEST = "prepared-insert-unnest"
    COPY = "copy"
    BINARY_COPY = "binary-copy"

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]


_METHOD_LABELS = {
    IngestMethod.INSERT_VALUES: "Insert VALUES",
    IngestMethod.PREPARED_INSERT_VALUES: "Prepared Insert VALUES",
    IngestMethod.INSERT_UNNEST: "Insert UNNEST",
    IngestMethod.PREPARED_INSERT_UNNEST: "Prepared Insert UNNEST",
    IngestMethod.COPY: "Copy",
    IngestMethod.BINARY_COPY: "Binary Copy",
}


class TransactionMode(str, Enum):
    SINGLE = "single-transaction"
    PER_BATCH = "per-batch"

    @classmethod
    def from_flag(cls, transactions: bool) -> "TransactionMode":
        return cls.SINGLE if transactions else cls.PER_BATCH


class SweepOrder(str, Enum):
    """Order in which (method, batch size) combinations are run and reported"""

    BATCH_SIZE_FIRST = "batch-size-first"  # batch sizes outer, methods inner
    METHOD_FIRST = "method-first"  # methods outer, batch sizes inner


@dataclass(frozen=True)
class SensorReading:
    """One battery sensor reading, one row of the target table"""

    id: int
    timestamp: datetime
    voltage: float
    current: float
    temperature: float
    state_of_charge: float
    internal_resistance: float

    def as_row(self) -> tuple:
        return (
            self.id,
            self.timestamp,
            self.voltage,
            self.current,
            self.temperature,
            self.state_of_charge,
            self.internal_resistance,
        )


Batch = Tuple[SensorReading, ...]


class RecordSet:
    """Immutable, ordered, pre-loaded readings shared by every run"""

    def __init__(self, readings: Iterable[SensorReading]):
        self._readings: Tuple[SensorReading, ...] = tuple(readings)

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[SensorReading]:
        return iter(self._readings)

    def __getitem__(self, index):
        return self._readings[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, RecordSet):
            return self._readings == other._readings
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._readings)

    def __repr__(self) -> str:
        return f"RecordSet({len(self._readings):,} readings)"


@dataclass(frozen=True)
class RunConfig:
    method: IngestMethod
    batch_size: int
    transaction_mode: TransactionMode = TransactionMode.PER_BATCH

    @property
    def transactional(self) -> bool:
        return self.transaction_mode is TransactionMode.SINGLE

    def describe(self) -> str:
        return (
            f"{self.method.label} (batch size {self.batch_size:,}, "
            f"{self.transaction_mode.value})"
        )


@dataclass(frozen=True)
class RunResult:
    config: RunConfig
    rows_ingested: int
    elapsed_seconds: float

    def __post_init__(self):
        if self.rows_ingested < 0:
            raise ValueError("rows_ingested must be >= 0")
        if self.elapsed_seconds < 0:
            raise ValueError("elapsed_seconds must be >= 0")

    @property
    def rows_per_second(self) -> float:
        """Whole-run throughput, not an average of per-batch rates"""
        if self.elapsed_seconds == 0:
            return float("inf")
        return self.rows_ingested / self.elapsed_seconds


@dataclass(frozen=True)
class RunFailure:
    """Marker recorded in place of timing data when a run does not complete"""

    config: RunConfig
    error_type: str
    reason: str


ReportEntry = Union[RunResult, RunFailure]


@dataclass
class BenchmarkReport:
    """Ordered outcome of one sweep, one entry per requested combination"""

    record_count: int
    entries: List[ReportEntry] = field(default_factory=list)

    def add(self, entry: ReportEntry):
        self.entries.append(entry)

    @property
    def results(self) -> List[RunResult]:
        return [e for e in self.entries if isinstance(e, RunResult)]

    @property
    def failures(self) -> List[RunFailure]:
        return [e for e in self.entries if isinstance(e, RunFailure)]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ReportEntry]:
        return iter(self.entries)
