import os
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from database import DEFAULT_TABLE
from errors import ConfigError
from methods import parse_methods
from models import IngestMethod, RunConfig, SweepOrder, TransactionMode

CONNECTION_STRING_ENV = "CONNECTION_STRING"
DEFAULT_BATCH_SIZES = [1000]
DEFAULT_INPUT_FILE = "power_generation_1m.csv"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


@dataclass
class BenchmarkConfig:
    """Everything one sweep needs, passed explicitly into the benchmark"""

    methods: List[IngestMethod]
    batch_sizes: List[int] = field(default_factory=lambda: list(DEFAULT_BATCH_SIZES))
    transaction_mode: TransactionMode = TransactionMode.PER_BATCH
    order: SweepOrder = SweepOrder.BATCH_SIZE_FIRST
    connection_string: Optional[str] = None
    table_name: str = DEFAULT_TABLE
    input_file: str = DEFAULT_INPUT_FILE
    verify: bool = True
    csv_output: bool = False
    plot_file: Optional[str] = None
    generate: Optional[int] = None

    def __post_init__(self):
        if not self.methods:
            raise ConfigError("At least one ingestion method is required")
        if not self.batch_sizes:
            raise ConfigError("At least one batch size is required")
        for batch_size in self.batch_sizes:
            if isinstance(batch_size, bool) or not isinstance(batch_size, int):
                raise ConfigError(f"Batch size must be an integer, got {batch_size!r}")
            if batch_size < 1:
                raise ConfigError(f"Batch size must be >= 1, got {batch_size}")
        if not _IDENTIFIER.match(self.table_name):
            raise ConfigError(f"Invalid table name {self.table_name!r}")
        if self.generate is not None and self.generate < 1:
            raise ConfigError(f"--generate must be >= 1, got {self.generate}")

    def run_configs(self) -> List[RunConfig]:
        """All requested combinations, in the documented sweep order"""
        if self.order is SweepOrder.METHOD_FIRST:
            pairs = [(m, b) for m in self.methods for b in self.batch_sizes]
        else:
            pairs = [(m, b) for b in self.batch_sizes for m in self.methods]
        return [RunConfig(m, b, self.transaction_mode) for m, b in pairs]

    def require_connection_string(self) -> str:
        if not self.connection_string:
            raise ConfigError(
                f"A connection string must be provided via --connection-string "
                f"or the {CONNECTION_STRING_ENV} environment variable"
            )
        return self.connection_string


def parse_batch_sizes(values: Iterable) -> List[int]:
    batch_sizes = []
    for value in values:
        try:
            batch_sizes.append(int(str(value).replace("_", "").strip()))
        except ValueError:
            raise ConfigError(f"Batch size must be an integer, got {value!r}") from None
    return batch_sizes


def split_list(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten comma-separated command line values"""
    items = []
    for value in values or []:
        items.extend(part for part in value.split(",") if part.strip())
    return items


def build_config(args, environ=None) -> BenchmarkConfig:
    """Build and validate a BenchmarkConfig from parsed command line arguments"""
    environ = os.environ if environ is None else environ

    requested = ["all"] if args.all else split_list(args.methods)
    if not requested:
        raise ConfigError("No ingestion methods given (name one or more, or use --all)")

    batch_sizes = parse_batch_sizes(split_list(args.batch_sizes))

    return BenchmarkConfig(
        methods=parse_methods(requested),
        batch_sizes=batch_sizes or list(DEFAULT_BATCH_SIZES),
        transaction_mode=TransactionMode.from_flag(args.transactions),
        order=SweepOrder(args.order),
        connection_string=args.connection_string or environ.get(CONNECTION_STRING_ENV),
        table_name=args.table,
        input_file=args.input_file,
        verify=not args.no_verify,
        csv_output=args.csv_output,
        plot_file=args.plot,
        generate=args.generate,
    )
