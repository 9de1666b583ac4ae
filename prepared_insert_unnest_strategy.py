from typing import Optional

from database import PreparedStatement
from insert_unnest_strategy import column_arrays, unnest_query
from models import Batch, IngestMethod
from strategy import Strategy


class PreparedInsertUnnestStrategy(Strategy):
    """The unnest() INSERT, prepared on the first batch and reused for the run"""

    method = IngestMethod.PREPARED_INSERT_UNNEST

    def __init__(self, db):
        super().__init__(db)
        self._statement: Optional[PreparedStatement] = None

    def start_run(self):
        self.db.release_prepared()
        self._statement = None

    def ingest(self, batch: Batch) -> int:
        if self._statement is None:
            self._statement = self.db.prepare(unnest_query(self.table_name))
        return self.db.execute_prepared(self._statement, column_arrays(batch))
