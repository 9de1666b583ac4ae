from contextlib import contextmanager

from errors import IngestionError
from models import TransactionMode


@contextmanager
def transaction_scope(db, mode: TransactionMode, verbose: bool = True):
    """
    Wrap a whole run in one transaction, or leave each batch to autocommit.

    In single-transaction mode the commit happens on normal exit, inside
    whatever timer encloses this block. Any exception rolls the run back
    and is re-raised.
    """
    if mode is TransactionMode.PER_BATCH:
        yield
        return

    db.begin_transaction()
    try:
        yield
    except BaseException:
        try:
            db.rollback()
        except IngestionError as e:
            if verbose:
                print(f"  ⚠ Rollback failed: {e}")
        raise
    db.commit()
