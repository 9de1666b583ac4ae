from typing import Iterator, Sequence

from errors import ConfigError
from models import Batch, SensorReading


class Batches:
    """Lazy, restartable partition of a record sequence into contiguous batches"""

    def __init__(self, records: Sequence[SensorReading], batch_size: int):
        self.records = records
        self.batch_size = batch_size

    def __iter__(self) -> Iterator[Batch]:
        for start in range(0, len(self.records), self.batch_size):
            yield tuple(self.records[start : start + self.batch_size])

    def __len__(self) -> int:
        return -(-len(self.records) // self.batch_size)


def split(records: Sequence[SensorReading], batch_size: int) -> Batches:
    """
    Split records into batches of at most batch_size readings.

    The batch size is validated here, not on first iteration, so a bad
    configuration fails before any run starts.
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise ConfigError(f"Batch size must be an integer, got {batch_size!r}")
    if batch_size < 1:
        raise ConfigError(f"Batch size must be >= 1, got {batch_size}")
    return Batches(records, batch_size)
