from typing import List

from database import column_list
from models import COLUMN_TYPES, COLUMNS, Batch, IngestMethod
from strategy import Strategy


def unnest_query(table_name: str) -> str:
    arrays = ", ".join(f"%s::{column_type}[]" for column_type in COLUMN_TYPES)
    return f"INSERT INTO {table_name} ({column_list()}) SELECT * FROM unnest({arrays})"


def column_arrays(batch: Batch) -> List[list]:
    """Transpose a batch into one list per column"""
    columns: List[list] = [[] for _ in COLUMNS]
    for reading in batch:
        for values, value in zip(columns, reading.as_row()):
            values.append(value)
    return columns


class InsertUnnestStrategy(Strategy):
    """INSERT ... SELECT FROM unnest() with one array parameter per column"""

    method = IngestMethod.INSERT_UNNEST

    def ingest(self, batch: Batch) -> int:
        return self.db.execute(unnest_query(self.table_name), column_arrays(batch))
