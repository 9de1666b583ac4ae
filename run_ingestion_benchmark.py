#!/usr/bin/env python3
"""
Ingestion Benchmark Runner

Loads a CSV of battery sensor readings into memory and measures how fast each
ingestion method can load it into a PostgreSQL table, for every requested
batch size.

Usage:
    python run_ingestion_benchmark.py [METHODS] [OPTIONS]

Examples:
    # Compare COPY and binary COPY with two batch sizes
    python run_ingestion_benchmark.py copy,binary-copy -b 1000,10000

    # Every method, each run inside a single transaction, CSV output
    python run_ingestion_benchmark.py --all --transactions --csv-output

    # Generate a 1M row input file first
    python run_ingestion_benchmark.py --all --generate 1000000
"""

import argparse
import os
import sys

from config import (
    CONNECTION_STRING_ENV,
    DEFAULT_INPUT_FILE,
    build_config,
)
from data_generation import DataFileManager, load_records
from database import DEFAULT_TABLE, PostgresDatabase
from errors import ConfigError, IngestionError
from ingestion_benchmark import IngestionBenchmark
from models import IngestMethod, SweepOrder
from reporting import generate_visualization, print_results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Benchmark PostgreSQL bulk ingestion methods"
    )
    parser.add_argument(
        "methods",
        nargs="*",
        help="Comma separated ingestion methods: "
        + ", ".join(m.value for m in IngestMethod)
        + " or all",
    )
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Run every ingestion method",
    )
    parser.add_argument(
        "-b",
        "--batch-sizes",
        action="append",
        help="Comma separated batch sizes. Default: 1000",
    )
    parser.add_argument(
        "-t",
        "--transactions",
        action="store_true",
        help="Wrap each run in a single transaction instead of committing per batch",
    )
    parser.add_argument(
        "-c",
        "--csv-output",
        action="store_true",
        help="Print results as CSV instead of a table",
    )
    parser.add_argument(
        "--connection-string",
        default=None,
        help=f"PostgreSQL connection string. Default: ${CONNECTION_STRING_ENV}",
    )
    parser.add_argument(
        "-f",
        "--input-file",
        default=DEFAULT_INPUT_FILE,
        help=f"CSV file with the readings to ingest. Default: {DEFAULT_INPUT_FILE}",
    )
    parser.add_argument(
        "--table",
        default=DEFAULT_TABLE,
        help=f"Target table, emptied before every run. Default: {DEFAULT_TABLE}",
    )
    parser.add_argument(
        "--order",
        choices=[o.value for o in SweepOrder],
        default=SweepOrder.BATCH_SIZE_FIRST.value,
        help="Run order of the (method, batch size) combinations. Default: batch-size-first",
    )
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip counting the rows in the target table after each run",
    )
    parser.add_argument(
        "--generate",
        type=int,
        default=None,
        metavar="N",
        help="Generate N synthetic readings into the input file if it does not exist",
    )
    parser.add_argument(
        "--plot",
        default=None,
        metavar="PATH",
        help="Save throughput charts as a PNG",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
        connection_string = config.require_connection_string()

        if config.generate:
            data_dir = os.path.dirname(config.input_file) or "."
            DataFileManager(data_dir).generate_and_save(
                config.generate, path=config.input_file
            )

        records = load_records(config.input_file)
        if not config.csv_output:
            print(f"✓ Loaded {len(records):,} records from {config.input_file}")

        with PostgresDatabase(connection_string, config.table_name) as db:
            benchmark = IngestionBenchmark(
                db, records, reset_target=db.reset_table, verbose=not config.csv_output
            )
            report = benchmark.run_full_ingestion_benchmark(config)
    except ConfigError as e:
        print(f"✗ Configuration error: {e}", file=sys.stderr)
        return 2
    except IngestionError as e:
        print(f"✗ Benchmark failed with error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\n⚠ Benchmark interrupted by user", file=sys.stderr)
        return 130

    print_results(report, csv_output=config.csv_output)
    if config.plot_file:
        generate_visualization(report, config.plot_file)

    return 1 if report.failures else 0


if __name__ == "__main__":
    sys.exit(main())
