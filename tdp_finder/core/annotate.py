# tdp_finder/core/annotate.py
from __future__ import annotations
from collections.abc import Mapping, MutableMapping
import logging

from .errors import InvalidArgument, MissingField
from .model import ReferenceDataset, PROCESSOR_FIELD, TDP_FIELD
from .normalize import split_processors

_LOG = logging.getLogger(__name__)


def resolve_tdp(dataset: ReferenceDataset, processors: str) -> float:
    """
    Highest TDP among the comma-separated processors (running max, not a sum).
    Raises UnknownProcessor on the first name missing from the dataset.
    """
    tdp = 0.0
    for name in split_processors(processors):
        value = dataset.lookup(name)
        if value > tdp:
            tdp = value
    return tdp


def _check_batch(records) -> None:
    if records is None:
        raise InvalidArgument("Required Parameters not provided")
    if not isinstance(records, (list, tuple)):
        raise InvalidArgument("Inputs must be an array")


def _processors_of(record, index: int) -> str:
    if not isinstance(record, MutableMapping):
        kind = "read-only mapping" if isinstance(record, Mapping) else type(record).__name__
        raise InvalidArgument(f"record {index} must be a mutable mapping, got {kind}")
    if PROCESSOR_FIELD not in record:
        raise MissingField(PROCESSOR_FIELD, index)
    return record[PROCESSOR_FIELD]


def annotate(dataset: ReferenceDataset, records, atomic: bool = True) -> list:
    """
    Write ``thermal-design-power`` onto every record and return the same
    record objects in input order.

    atomic=True resolves the whole batch before touching any record, so a
    failing call leaves every record as it was. atomic=False writes each
    record as soon as it resolves; records before the failing one keep
    their new value.
    """
    _check_batch(records)

    if atomic:
        resolved = [resolve_tdp(dataset, _processors_of(r, i)) for i, r in enumerate(records)]
        for record, tdp in zip(records, resolved):
            record[TDP_FIELD] = tdp
    else:
        for i, record in enumerate(records):
            processors = _processors_of(record, i)
            record[TDP_FIELD] = 0
            record[TDP_FIELD] = resolve_tdp(dataset, processors)

    _LOG.debug("annotated %d record(s)", len(records))
    return list(records)
