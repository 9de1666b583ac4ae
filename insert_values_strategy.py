import math

from database import column_list
from models import Batch, IngestMethod, SensorReading
from strategy import Strategy


def _float_literal(value: float) -> str:
    if math.isnan(value):
        return "'NaN'::float8"
    if math.isinf(value):
        return "'Infinity'::float8" if value > 0 else "'-Infinity'::float8"
    return repr(float(value))


def row_literal(reading: SensorReading) -> str:
    values = [
        str(int(reading.id)),
        f"'{reading.timestamp.isoformat()}'::timestamptz",
        _float_literal(reading.voltage),
        _float_literal(reading.current),
        _float_literal(reading.temperature),
        _float_literal(reading.state_of_charge),
        _float_literal(reading.internal_resistance),
    ]
    return f"({', '.join(values)})"


class InsertValuesStrategy(Strategy):
    """Multi-row INSERT with every value inlined as a literal, parsed per batch"""

    method = IngestMethod.INSERT_VALUES

    def build_query(self, batch: Batch) -> str:
        rows = ", ".join(row_literal(reading) for reading in batch)
        return f"INSERT INTO {self.table_name} ({column_list()}) VALUES {rows}"

    def ingest(self, batch: Batch) -> int:
        return self.db.execute(self.build_query(batch))
