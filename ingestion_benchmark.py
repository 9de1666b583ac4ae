"""
Ingestion Benchmark - Measures how fast a fixed record set can be loaded into
PostgreSQL with each ingestion method

For every requested (method, batch size) combination this benchmark:
1. Resets the target table (untimed, outside the harness)
2. Streams the whole record set through the method, batch by batch, inside
   one transaction or with per-batch autocommit
3. Times the run from the first batch to the last ingest (and the final
   COMMIT in single-transaction mode)
4. Verifies the row count and records either a result or a failure marker
"""

from typing import Callable, Optional, Sequence

from batcher import split
from config import BenchmarkConfig
from errors import ConfigError, IngestionError, VerificationError
from methods import create_strategy
from models import (
    BenchmarkReport,
    RunConfig,
    RunFailure,
    RunResult,
    SensorReading,
    TransactionMode,
)
from strategy import Strategy
from timer import BenchmarkTimer
from transaction import transaction_scope


def run_ingestion(
    db,
    strategy: Strategy,
    records: Sequence[SensorReading],
    batch_size: int,
    transaction_mode: TransactionMode = TransactionMode.PER_BATCH,
    verify: bool = True,
    verbose: bool = False,
) -> RunResult:
    """
    Ingest the full record set once and return the timed result.

    Raises IngestionError if any batch fails, in which case the partial
    elapsed time is thrown away, and VerificationError if the confirmed row
    count does not match the record set.
    """
    if len(records) == 0:
        raise ConfigError("The record set is empty, nothing to ingest")
    batches = split(records, batch_size)
    strategy.check_batch_size(batch_size)
    strategy.start_run()

    run_config = RunConfig(strategy.method, batch_size, transaction_mode)
    rows_ingested = 0

    with BenchmarkTimer() as timer:
        with transaction_scope(db, transaction_mode, verbose=verbose):
            for batch in batches:
                rows_ingested += strategy.ingest(batch)

    expected = len(records)
    if rows_ingested != expected:
        raise VerificationError(expected, rows_ingested, source=strategy.name)

    if verify:
        table_rows = db.count_rows()
        if table_rows != expected:
            raise VerificationError(expected, table_rows, source=db.table_name)

    return RunResult(run_config, rows_ingested, timer.elapsed)


class IngestionBenchmark:
    """Runs every requested combination sequentially over one connection"""

    def __init__(
        self,
        db,
        records: Sequence[SensorReading],
        reset_target: Optional[Callable[[], None]] = None,
        verbose: bool = True,
    ):
        """
        Args:
            db: Database capability the strategies ingest through
            records: Pre-loaded record set, shared read-only by every run
            reset_target: Setup step that leaves the target table empty.
                Called before each run, outside the timed region.
            verbose: Print progress for each run
        """
        self.db = db
        self.records = records
        self.reset_target = reset_target
        self.verbose = verbose

    def _print(self, message: str = ""):
        if self.verbose:
            print(message)

    def run_full_ingestion_benchmark(self, config: BenchmarkConfig) -> BenchmarkReport:
        """Run all combinations of config in its documented order"""
        if len(self.records) == 0:
            raise ConfigError("The record set is empty, nothing to ingest")
        run_configs = config.run_configs()

        self._print(f"\n{'=' * 80}")
        self._print("INGESTION BENCHMARK")
        self._print(f"Records: {len(self.records):,}")
        self._print(f"Runs: {len(run_configs)} ({config.order.value})")
        self._print(f"{'=' * 80}\n")

        report = BenchmarkReport(record_count=len(self.records))
        for run_config in run_configs:
            report.add(self.run_one(run_config, verify=config.verify))
        return report

    def run_one(self, run_config: RunConfig, verify: bool = True):
        """Run a single combination, returning a RunResult or a RunFailure"""
        self._print(f"--- Benchmarking: {run_config.describe()} ---")

        try:
            if self.reset_target is not None:
                self.reset_target()
            result = run_ingestion(
                self.db,
                create_strategy(run_config.method, self.db),
                self.records,
                run_config.batch_size,
                run_config.transaction_mode,
                verify=verify,
                verbose=self.verbose,
            )
        except (IngestionError, VerificationError) as e:
            self._print(f"  ✗ Error: {e}\n")
            return RunFailure(run_config, type(e).__name__, str(e))

        self._print(
            f"  ✓ Ingested {result.rows_ingested:,} rows in {result.elapsed_seconds:.2f}s "
            f"({result.rows_per_second:,.0f} records/sec)\n"
        )
        return result
