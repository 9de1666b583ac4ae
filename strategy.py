from typing import Optional

from errors import IngestionError
from models import Batch, IngestMethod

# PostgreSQL's limit on bind parameters in a single statement
MAX_BIND_PARAMETERS = 65535


class Strategy:
    """
    One wire-level technique for pushing a batch into the target table.

    The harness only calls start_run() once per run, before the clock starts,
    and ingest() once per batch. Implementations must return the number of
    rows the database confirmed and raise IngestionError on any failure.
    """

    method: IngestMethod
    max_batch_size: Optional[int] = None

    def __init__(self, db):
        self.db = db

    @property
    def table_name(self) -> str:
        return self.db.table_name

    @property
    def name(self) -> str:
        return self.method.label

    def check_batch_size(self, batch_size: int):
        if self.max_batch_size is not None and batch_size > self.max_batch_size:
            raise IngestionError(
                f"{self.name} with batch size of {batch_size:,} failed, too many "
                f"parameters (max batch size {self.max_batch_size:,})"
            )

    def start_run(self):
        """Drop any per-run state such as prepared statements"""

    def ingest(self, batch: Batch) -> int:
        """Insert the batch and return the number of rows the target confirmed"""
        raise NotImplementedError("Subclasses must implement this method")
