from database import CopyFormat
from models import Batch, IngestMethod
from strategy import Strategy


class CopyStrategy(Strategy):
    """One text-format COPY FROM STDIN stream per batch"""

    method = IngestMethod.COPY
    copy_format = CopyFormat.TEXT

    def ingest(self, batch: Batch) -> int:
        return self.db.bulk_stream(
            self.copy_format, (reading.as_row() for reading in batch)
        )
