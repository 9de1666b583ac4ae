from typing import Dict, List

from database import PreparedStatement, column_list
from models import COLUMNS, Batch, IngestMethod
from strategy import MAX_BIND_PARAMETERS, Strategy


class PreparedInsertValuesStrategy(Strategy):
    """
    Multi-row INSERT with one bound parameter per value.

    The template depends on the number of rows, so it is prepared once per
    distinct batch length within a run: normally one template for the full
    batches and one more for a shorter final batch.
    """

    method = IngestMethod.PREPARED_INSERT_VALUES
    max_batch_size = MAX_BIND_PARAMETERS // len(COLUMNS)

    def __init__(self, db):
        super().__init__(db)
        self._statements: Dict[int, PreparedStatement] = {}

    def start_run(self):
        self.db.release_prepared()
        self._statements = {}

    def build_query(self, row_count: int) -> str:
        placeholders = "(" + ", ".join(["%s"] * len(COLUMNS)) + ")"
        values = ", ".join([placeholders] * row_count)
        return f"INSERT INTO {self.table_name} ({column_list()}) VALUES {values}"

    def _statement(self, row_count: int) -> PreparedStatement:
        statement = self._statements.get(row_count)
        if statement is None:
            statement = self.db.prepare(self.build_query(row_count))
            self._statements[row_count] = statement
        return statement

    def ingest(self, batch: Batch) -> int:
        params: List = []
        for reading in batch:
            params.extend(reading.as_row())
        return self.db.execute_prepared(self._statement(len(batch)), params)
