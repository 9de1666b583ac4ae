from typing import Dict, Iterable, List, Type

from binary_copy_strategy import BinaryCopyStrategy
from copy_strategy import CopyStrategy
from errors import ConfigError
from insert_unnest_strategy import InsertUnnestStrategy
from insert_values_strategy import InsertValuesStrategy
from models import IngestMethod
from prepared_insert_unnest_strategy import PreparedInsertUnnestStrategy
from prepared_insert_values_strategy import PreparedInsertValuesStrategy
from strategy import Strategy

STRATEGIES: Dict[IngestMethod, Type[Strategy]] = {
    IngestMethod.INSERT_VALUES: InsertValuesStrategy,
    IngestMethod.PREPARED_INSERT_VALUES: PreparedInsertValuesStrategy,
    IngestMethod.INSERT_UNNEST: InsertUnnestStrategy,
    IngestMethod.PREPARED_INSERT_UNNEST: PreparedInsertUnnestStrategy,
    IngestMethod.COPY: CopyStrategy,
    IngestMethod.BINARY_COPY: BinaryCopyStrategy,
}

ALL = "all"


def create_strategy(method: IngestMethod, db) -> Strategy:
    return STRATEGIES[method](db)


def parse_method(value) -> IngestMethod:
    if isinstance(value, IngestMethod):
        return value
    normalized = str(value).strip().lower().replace("_", "-")
    try:
        return IngestMethod(normalized)
    except ValueError:
        choices = ", ".join(m.value for m in IngestMethod)
        raise ConfigError(
            f"Unknown ingestion method {value!r} (choose from {choices} or {ALL})"
        ) from None


def parse_methods(values: Iterable) -> List[IngestMethod]:
    """Resolve method names, expanding 'all' to every method in enum order"""
    methods: List[IngestMethod] = []
    for value in values:
        if isinstance(value, str) and value.strip().lower() == ALL:
            expanded = list(IngestMethod)
        else:
            expanded = [parse_method(value)]
        for method in expanded:
            if method not in methods:
                methods.append(method)
    return methods
