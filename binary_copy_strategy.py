from copy_strategy import CopyStrategy
from database import CopyFormat
from models import IngestMethod


class BinaryCopyStrategy(CopyStrategy):
    """
    One binary-format COPY FROM STDIN stream per batch.

    Rows are encoded in PostgreSQL's binary tuple format using the column
    types int4, timestamptz and float8, so nothing is rendered as text.
    """

    method = IngestMethod.BINARY_COPY
    copy_format = CopyFormat.BINARY
