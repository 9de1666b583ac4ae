from typing import List, Optional

import pytest

from data_generation import SensorDataGenerator
from database import DEFAULT_TABLE, CopyFormat, PreparedStatement
from errors import IngestionError
from models import COLUMNS, RecordSet


class FakeDatabase:
    """
    In-memory stand-in for the database capability.

    Tracks committed and in-transaction row counts the way an autocommit
    PostgreSQL connection with explicit BEGIN/COMMIT would, and can fail the
    Nth ingest call.
    """

    def __init__(
        self,
        table_name: str = DEFAULT_TABLE,
        fail_on_call: Optional[int] = None,
        fail_reset: bool = False,
        under_report: int = 0,
    ):
        self.table_name = table_name
        self.fail_on_call = fail_on_call
        self.fail_reset = fail_reset
        self.under_report = under_report

        self.committed_rows = 0
        self.pending_rows: Optional[int] = None
        self.ingest_calls = 0
        self.resets = 0
        self.prepared: List[PreparedStatement] = []
        self.statements: List[tuple] = []
        self.events: List[str] = []

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    @property
    def in_transaction(self) -> bool:
        return self.pending_rows is not None

    def _ingest(self, row_count: int) -> int:
        self.ingest_calls += 1
        if self.fail_on_call == self.ingest_calls:
            self.events.append("fail")
            raise IngestionError(f"injected failure on call {self.ingest_calls}")
        if self.in_transaction:
            self.pending_rows += row_count
        else:
            self.committed_rows += row_count
        self.events.append(f"ingest:{row_count}")
        return row_count - self.under_report

    def execute(self, query, params=None):
        self.statements.append(("execute", query, params))
        if params is None:
            row_count = query.count("), (") + 1
        else:
            row_count = len(params[0])
        return self._ingest(row_count)

    def prepare(self, query):
        statement = PreparedStatement(query)
        self.prepared.append(statement)
        self.events.append("prepare")
        return statement

    def execute_prepared(self, statement, params):
        if statement not in self.prepared:
            raise IngestionError("statement was never prepared")
        self.statements.append(("execute_prepared", statement.query, params))
        if params and isinstance(params[0], list):
            row_count = len(params[0])
        else:
            row_count = len(params) // len(COLUMNS)
        return self._ingest(row_count)

    def release_prepared(self):
        self.events.append("release")
        self.prepared = []

    def bulk_stream(self, copy_format: CopyFormat, rows):
        rows = list(rows)
        self.statements.append(("bulk_stream", copy_format, rows))
        return self._ingest(len(rows))

    def begin_transaction(self):
        if self.in_transaction:
            raise IngestionError("already in a transaction")
        self.events.append("begin")
        self.pending_rows = 0

    def commit(self):
        self.events.append("commit")
        self.committed_rows += self.pending_rows or 0
        self.pending_rows = None

    def rollback(self):
        self.events.append("rollback")
        self.pending_rows = None

    def count_rows(self) -> int:
        return self.committed_rows + (self.pending_rows or 0)

    def reset_table(self):
        self.resets += 1
        if self.fail_reset:
            raise IngestionError("reset failed")
        self.committed_rows = 0
        self.pending_rows = None
        self.ingest_calls = 0
        self.events.append("reset")


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture(scope="session")
def records():
    return RecordSet(SensorDataGenerator(seed=42).generate(10_000))


@pytest.fixture(scope="session")
def small_records():
    return RecordSet(SensorDataGenerator(seed=7).generate(25))


@pytest.fixture
def db_factory():
    return FakeDatabase
