import pytest

from errors import IngestionError
from models import TransactionMode
from transaction import transaction_scope


def test_single_transaction_commits_on_success(fake_db):
    with transaction_scope(fake_db, TransactionMode.SINGLE):
        assert fake_db.in_transaction
    assert fake_db.events == ["begin", "commit"]


def test_single_transaction_rolls_back_and_reraises(fake_db):
    with pytest.raises(IngestionError):
        with transaction_scope(fake_db, TransactionMode.SINGLE):
            raise IngestionError("lost connection")
    assert fake_db.events == ["begin", "rollback"]
    assert not fake_db.in_transaction


def test_per_batch_issues_no_transaction_statements(fake_db):
    with transaction_scope(fake_db, TransactionMode.PER_BATCH):
        pass
    assert fake_db.events == []


def test_failed_rollback_keeps_the_ingest_error(fake_db, capsys):
    def broken_rollback():
        raise IngestionError("connection closed")

    fake_db.rollback = broken_rollback
    with pytest.raises(IngestionError, match="batch failed"):
        with transaction_scope(fake_db, TransactionMode.SINGLE):
            raise IngestionError("batch failed")
    assert "Rollback failed" in capsys.readouterr().out
