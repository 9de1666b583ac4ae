"""
Database capability consumed by the ingestion harness, and its psycopg 3
implementation for PostgreSQL.

The harness only ever talks to the Database protocol. PostgresDatabase runs
the connection in autocommit mode so that per-batch runs commit every
statement or COPY stream on its own, and issues explicit BEGIN/COMMIT/ROLLBACK
for single-transaction runs.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence

import psycopg

from errors import IngestionError
from models import COLUMN_TYPES, COLUMNS

DEFAULT_TABLE = "power_generation"


class CopyFormat(str, Enum):
    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class PreparedStatement:
    """Handle to a statement template that is parsed once and reused"""

    query: str


class Database(Protocol):
    table_name: str

    def execute(self, query: str, params: Optional[Sequence] = None) -> int:
        ...

    def prepare(self, query: str) -> PreparedStatement:
        ...

    def execute_prepared(self, statement: PreparedStatement, params: Sequence) -> int:
        ...

    def release_prepared(self):
        ...

    def bulk_stream(self, copy_format: CopyFormat, rows: Iterable[tuple]) -> int:
        ...

    def begin_transaction(self):
        ...

    def commit(self):
        ...

    def rollback(self):
        ...

    def count_rows(self) -> int:
        ...

    def reset_table(self):
        ...


def column_list() -> str:
    return ", ".join(f'"{column}"' for column in COLUMNS)


class PostgresDatabase:
    """Database capability backed by a single psycopg connection"""

    def __init__(self, conn_string: str, table_name: str = DEFAULT_TABLE):
        self.conn_string = conn_string
        self.table_name = table_name
        self.conn: Optional[psycopg.Connection] = None

    def connect(self):
        with self._errors("connect"):
            self.conn = psycopg.connect(self.conn_string, autocommit=True)

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @contextmanager
    def _errors(self, operation: str):
        try:
            yield
        except psycopg.Error as e:
            raise IngestionError(f"{operation} failed: {e}") from e

    def _connection(self) -> psycopg.Connection:
        if self.conn is None or self.conn.closed:
            raise IngestionError("Not connected to the database")
        return self.conn

    def execute(self, query: str, params: Optional[Sequence] = None) -> int:
        # prepare=False keeps psycopg's automatic preparation out of the
        # unprepared strategies even after many identical executions
        with self._errors("execute"):
            with self._connection().cursor() as cur:
                cur.execute(query, params, prepare=False)
                return cur.rowcount

    def prepare(self, query: str) -> PreparedStatement:
        # The server parses the statement on its first execute_prepared() and
        # psycopg keeps it until release_prepared()
        return PreparedStatement(query)

    def execute_prepared(self, statement: PreparedStatement, params: Sequence) -> int:
        with self._errors("execute prepared"):
            with self._connection().cursor() as cur:
                cur.execute(statement.query, params, prepare=True)
                return cur.rowcount

    def release_prepared(self):
        """Deallocate every prepared statement so the next run parses again"""
        conn = self._connection()
        with self._errors("release prepared"):
            # rollback() empties psycopg's statement cache and sends
            # DEALLOCATE ALL when anything was prepared
            conn.execute("BEGIN")
            conn.rollback()

    def bulk_stream(self, copy_format: CopyFormat, rows: Iterable[tuple]) -> int:
        statement = f"COPY {self.table_name} ({column_list()}) FROM STDIN"
        if copy_format is CopyFormat.BINARY:
            statement += " (FORMAT BINARY)"

        with self._errors("copy"):
            with self._connection().cursor() as cur:
                with cur.copy(statement) as copy:
                    if copy_format is CopyFormat.BINARY:
                        copy.set_types(list(COLUMN_TYPES))
                    for row in rows:
                        copy.write_row(row)
                return cur.rowcount

    def begin_transaction(self):
        with self._errors("begin"):
            self._connection().execute("BEGIN")

    def commit(self):
        with self._errors("commit"):
            self._connection().execute("COMMIT")

    def rollback(self):
        with self._errors("rollback"):
            self._connection().execute("ROLLBACK")

    def count_rows(self) -> int:
        with self._errors("count"):
            with self._connection().cursor() as cur:
                cur.execute(f"SELECT COUNT(*) FROM {self.table_name}")
                return cur.fetchone()[0]

    def reset_table(self):
        """Create the target table if needed and leave it empty and quiet"""
        conn = self._connection()
        with self._errors("reset"):
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table_name} (
                    "id" INTEGER,
                    "timestamp" TIMESTAMP WITH TIME ZONE,
                    "voltage" DOUBLE PRECISION,
                    "current" DOUBLE PRECISION,
                    "temperature" DOUBLE PRECISION,
                    "state_of_charge" DOUBLE PRECISION,
                    "internal_resistance" DOUBLE PRECISION
                )
            """
            )
            conn.execute(f"TRUNCATE TABLE {self.table_name}")
            conn.execute(
                f"ALTER TABLE {self.table_name} SET (autovacuum_enabled = false)"
            )
            conn.execute("CHECKPOINT")
