"""Reduce a raw basic-block trace into a function-level occurrence sequence."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, TypeVar, Union

from .functions import EXIT, START, AddressResolver, FunctionRecord, FunctionTable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_trace(text: str) -> List[int]:
    """Parse one hexadecimal block address per line, skipping blank lines."""

    addresses: List[int] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            address = int(line, 16)
        except ValueError:
            raise ValueError(
                f"trace line {line_number}: invalid hexadecimal address {line!r}"
            ) from None
        if address < 0:
            raise ValueError(f"trace line {line_number}: negative address {line!r}")
        addresses.append(address)
    return addresses


def collapse_runs(sequence: Iterable[T]) -> List[T]:
    """Drop immediately repeated elements (``A A B A`` becomes ``A B A``)."""

    collapsed: List[T] = []
    for item in sequence:
        if not collapsed or collapsed[-1] != item:
            collapsed.append(item)
    return collapsed


def resolve_addresses(
    addresses: Iterable[int],
    resolver: AddressResolver,
) -> List[FunctionRecord]:
    resolved: List[FunctionRecord] = []
    dropped = 0
    for address in addresses:
        record = resolver.resolve(address)
        if record is None:
            dropped += 1
            continue
        resolved.append(record)
    if dropped:
        logger.debug("%d trace samples fell outside every function", dropped)
    return resolved


def reduce_trace(
    addresses: Sequence[int],
    table: Union[FunctionTable, AddressResolver],
) -> List[FunctionRecord]:
    """Return ``[Start, f1, f2, ..., Exit]`` with consecutive repeats collapsed.

    Addresses that no function contains are dropped.  The order of
    ``addresses`` is significant: it determines both the collapsed sequence
    and every transition derived from it.
    """

    resolver = table if isinstance(table, AddressResolver) else AddressResolver(table)
    resolved = resolve_addresses(addresses, resolver)
    sequence = collapse_runs([START, *resolved, EXIT])
    logger.debug(
        "reduced %d samples to %d occurrences (%d distinct addresses)",
        len(addresses),
        len(sequence),
        resolver.cached_addresses,
    )
    return sequence


def unique_in_order(sequence: Iterable[T]) -> List[T]:
    """Return the distinct elements of ``sequence`` by first occurrence."""

    return list(dict.fromkeys(sequence))
