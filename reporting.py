import os
import sys
from typing import List

import matplotlib.pyplot as plt
import pandas as pd
from tabulate import tabulate

from models import BenchmarkReport, RunResult

CSV_HEADERS = [
    "Method",
    "Batch Size",
    "Transaction",
    "Duration",
    "Rows/sec",
    "Relative Speed",
]


def format_duration(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.2f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds * 1e6:.2f}µs"


def sorted_results(report: BenchmarkReport) -> List[RunResult]:
    """Successful results with a measurable duration, slowest first"""
    timed = [r for r in report.results if r.elapsed_seconds > 0]
    return sorted(timed, key=lambda r: r.rows_per_second)


def result_rows(report: BenchmarkReport) -> List[list]:
    results = sorted_results(report)
    if not results:
        return []
    max_speed = max(r.rows_per_second for r in results)

    rows = []
    for result in results:
        rows.append(
            [
                result.config.method.label,
                result.config.batch_size,
                "Yes" if result.config.transactional else "No",
                format_duration(result.elapsed_seconds),
                f"{result.rows_per_second:.0f}",
                f"x{max_speed / result.rows_per_second:.2f}",
            ]
        )
    return rows


def print_results(report: BenchmarkReport, csv_output: bool = False, out=None):
    """Print successful runs as a table or CSV, followed by any failed runs"""
    out = out or sys.stdout
    rows = result_rows(report)

    if csv_output:
        pd.DataFrame(rows, columns=CSV_HEADERS).to_csv(out, index=False)
    else:
        print(f"\n{'=' * 80}", file=out)
        print(f"RESULTS FOR IMPORT OF {report.record_count:,} RECORDS", file=out)
        print(f"{'=' * 80}\n", file=out)
        if rows:
            print(tabulate(rows, headers=CSV_HEADERS, tablefmt="grid"), file=out)
        else:
            print("No successful runs to display", file=out)

    if report.failures:
        print(f"\nFAILED RUNS ({len(report.failures)})", file=sys.stderr)
        for failure in report.failures:
            print(
                f"  ✗ {failure.config.describe()}: {failure.error_type}: {failure.reason}",
                file=sys.stderr,
            )


def generate_visualization(report: BenchmarkReport, output_file: str):
    """Save throughput and duration bar charts for the successful runs"""
    results = sorted_results(report)
    if not results:
        print("No successful runs to plot")
        return

    labels = [
        f"{r.config.method.label}\n(batch {r.config.batch_size:,})" for r in results
    ]
    throughputs = [r.rows_per_second for r in results]
    durations = [r.elapsed_seconds for r in results]
    x_pos = range(len(results))

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 7))

    ax1.bar(x_pos, throughputs, color="steelblue")
    ax1.set_xlabel("Method", fontsize=10, fontweight="bold")
    ax1.set_ylabel("Rows/Second", fontsize=10, fontweight="bold")
    ax1.set_title(
        f"Throughput Comparison ({report.record_count:,} records)",
        fontsize=12,
        fontweight="bold",
    )
    ax1.set_xticks(list(x_pos))
    ax1.set_xticklabels(labels, rotation=45, ha="right", fontsize=8)
    ax1.grid(axis="y", alpha=0.3)

    ax2.bar(x_pos, durations, color="coral")
    ax2.set_xlabel("Method", fontsize=10, fontweight="bold")
    ax2.set_ylabel("Time (seconds)", fontsize=10, fontweight="bold")
    ax2.set_title(
        f"Ingestion Time Comparison ({report.record_count:,} records)",
        fontsize=12,
        fontweight="bold",
    )
    ax2.set_xticks(list(x_pos))
    ax2.set_xticklabels(labels, rotation=45, ha="right", fontsize=8)
    ax2.grid(axis="y", alpha=0.3)

    plt.tight_layout()

    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"📊 Visualizations saved to: {output_file}\n")
