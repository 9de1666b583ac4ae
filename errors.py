class BenchmarkError(Exception):
    """Base class for every error raised by the ingestion benchmark"""


class ConfigError(BenchmarkError):
    """Invalid configuration, detected before any run starts"""


class IngestionError(BenchmarkError):
    """A database failure during a run. Aborts that run only."""


class VerificationError(BenchmarkError):
    """A run completed but the target did not confirm the expected row count"""

    def __init__(self, expected: int, actual: int, source: str = "strategy"):
        self.expected = expected
        self.actual = actual
        self.source = source
        super().__init__(
            f"Expected {expected:,} rows but {source} reported {actual:,}"
        )
