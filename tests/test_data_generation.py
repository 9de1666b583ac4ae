from datetime import timezone

import pytest

from data_generation import DataFileManager, SensorDataGenerator, load_records
from errors import ConfigError
from models import RecordSet


class TestSensorDataGenerator:
    def test_generates_sequential_ids_and_timestamps(self):
        readings = SensorDataGenerator(seed=1).generate(5, start_id=11)
        assert [r.id for r in readings] == [11, 12, 13, 14, 15]
        deltas = {
            (b.timestamp - a.timestamp).total_seconds()
            for a, b in zip(readings, readings[1:])
        }
        assert deltas == {1.0}
        assert all(r.timestamp.tzinfo is not None for r in readings)

    def test_values_are_in_plausible_ranges(self):
        for reading in SensorDataGenerator(seed=3).generate(200):
            assert 3.0 <= reading.voltage <= 4.2
            assert 0.0 <= reading.state_of_charge <= 100.0
            assert 0.01 <= reading.internal_resistance <= 0.1


class TestDataFiles:
    def test_generated_file_loads_back(self, tmp_path):
        manager = DataFileManager(str(tmp_path))
        path = manager.generate_and_save(250, generation_batch_size=100)

        records = load_records(path)

        assert isinstance(records, RecordSet)
        assert len(records) == 250
        assert [r.id for r in records] == list(range(1, 251))
        assert records[0].timestamp.utcoffset() == timezone.utc.utcoffset(None)
        assert isinstance(records[0].voltage, float)

    def test_existing_file_is_reused(self, tmp_path, capsys):
        manager = DataFileManager(str(tmp_path))
        first = manager.generate_and_save(10)
        second = manager.generate_and_save(10)
        assert first == second
        assert "skipping generation" in capsys.readouterr().out

    def test_loads_rfc3339_timestamps_as_utc(self, tmp_path):
        path = tmp_path / "readings.csv"
        path.write_text(
            "id,timestamp,voltage,current,temperature,state_of_charge,internal_resistance\n"
            "1,2024-05-01T10:00:00+02:00,3.7,1.0,20.0,50.0,0.05\n"
            "2,2024-05-01T08:00:01Z,3.8,1.1,20.5,50.5,0.06\n"
        )
        records = load_records(str(path))
        assert records[0].timestamp.hour == 8
        assert records[0].timestamp.utcoffset().total_seconds() == 0
        assert records[1].current == 1.1

    def test_wrong_column_count_is_a_config_error(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("id,timestamp,voltage\n1,2024-05-01T10:00:00Z,3.7\n")
        with pytest.raises(ConfigError, match="expected 7"):
            load_records(str(path))

    def test_missing_file_is_a_config_error(self, tmp_path):
        with pytest.raises(ConfigError, match="does not exist"):
            load_records(str(tmp_path / "missing.csv"))
