import random
from datetime import timedelta, timezone
from pathlib import Path
from typing import List, Optional

import pandas as pd
from faker import Faker

from errors import ConfigError
from models import COLUMNS, RecordSet, SensorReading

fake = Faker()


# ============================================================================
# DATA FILE MANAGER
# ============================================================================
class DataFileManager:
    """Manages generation of benchmark input files"""

    def __init__(self, data_dir: str = "./benchmark_data"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, count: int, prefix: str = "power_generation") -> Path:
        return self.data_dir / f"{prefix}_{count}.csv"

    def generate_and_save(
        self,
        count: int,
        path: Optional[str] = None,
        generation_batch_size: int = 100_000,
    ) -> str:
        """
        Generate sensor readings and write them to CSV in batches.

        Args:
            count: Number of readings to generate
            path: Output file, defaults to a file named after the count in data_dir
            generation_batch_size: Readings generated and written per step
        """
        csv_path = Path(path) if path else self.path_for(count)

        if csv_path.exists():
            print(f"\nData for {count:,} records exists at {csv_path}, skipping generation...")
            return str(csv_path)

        print(f"\nGenerating {count:,} sensor readings...")
        csv_path.parent.mkdir(parents=True, exist_ok=True)

        generator = SensorDataGenerator()
        total_processed = 0
        for batch_start in range(0, count, generation_batch_size):
            batch_count = min(generation_batch_size, count - batch_start)
            readings = generator.generate(batch_count, start_id=batch_start + 1)

            df = pd.DataFrame([r.as_row() for r in readings], columns=list(COLUMNS))
            df["timestamp"] = df["timestamp"].map(lambda ts: ts.isoformat())
            df.to_csv(csv_path, mode="a", header=batch_start == 0, index=False)

            total_processed += batch_count
            print(
                f"  ✓ Processed {total_processed:,} / {count:,} records "
                f"({total_processed * 100 / count:.1f}%)"
            )

        print(f"✓ CSV: {csv_path}\n")
        return str(csv_path)


def load_records(csv_path: str) -> RecordSet:
    """
    Load readings from a CSV file with the columns
    id,timestamp,voltage,current,temperature,state_of_charge,internal_resistance.

    Columns are taken by position; timestamps are RFC 3339 and stored as UTC.
    """
    path = Path(csv_path)
    if not path.exists():
        raise ConfigError(f"Input file {csv_path} does not exist")

    df = pd.read_csv(path)
    if len(df.columns) != len(COLUMNS):
        raise ConfigError(
            f"Input file {csv_path} has {len(df.columns)} columns, expected "
            f"{len(COLUMNS)} ({','.join(COLUMNS)})"
        )
    df.columns = list(COLUMNS)
    if df.isnull().values.any():
        raise ConfigError(f"Input file {csv_path} has missing values")

    try:
        timestamps = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
    except (ValueError, TypeError) as e:
        raise ConfigError(f"Input file {csv_path} has an invalid timestamp: {e}") from e

    return RecordSet(
        SensorReading(
            id=int(row.id),
            timestamp=timestamp.to_pydatetime(),
            voltage=float(row.voltage),
            current=float(row.current),
            temperature=float(row.temperature),
            state_of_charge=float(row.state_of_charge),
            internal_resistance=float(row.internal_resistance),
        )
        for row, timestamp in zip(df.itertuples(index=False), timestamps)
    )


# ============================================================================
# DATA GENERATION
# ============================================================================
class SensorDataGenerator:
    """Generate plausible battery sensor readings at a one-second cadence"""

    def __init__(self, seed: Optional[int] = None):
        self.random = random.Random(seed)
        if seed is not None:
            fake.seed_instance(seed)
        self.start_time = fake.date_time_between(
            start_date="-30d", end_date="-1d", tzinfo=timezone.utc
        ).replace(microsecond=0)

    def generate(self, count: int, start_id: int = 1) -> List[SensorReading]:
        """
        Args:
            count: Number of readings to generate
            start_id: id of the first reading, also its offset in seconds from start_time
        """
        readings = []
        for i in range(count):
            reading_id = start_id + i
            readings.append(
                SensorReading(
                    id=reading_id,
                    timestamp=self.start_time + timedelta(seconds=reading_id - 1),
                    voltage=round(self.random.uniform(3.0, 4.2), 4),
                    current=round(self.random.uniform(-50.0, 50.0), 4),
                    temperature=round(self.random.uniform(15.0, 45.0), 2),
                    state_of_charge=round(self.random.uniform(0.0, 100.0), 2),
                    internal_resistance=round(self.random.uniform(0.01, 0.1), 5),
                )
            )
        return readings
