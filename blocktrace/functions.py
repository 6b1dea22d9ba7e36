"""Function table loading and address resolution."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "_SEPERATOR_"
START_ID = "Start"
EXIT_ID = "Exit"


@dataclass(frozen=True)
class FunctionRecord:
    """Identity of a single function and the address interval it occupies.

    ``start`` and ``end`` are inclusive.  The two boundary sentinels carry no
    interval and therefore never match an address.
    """

    short_id: str
    name: str
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def is_boundary(self) -> bool:
        return self.start is None

    def contains(self, address: int) -> bool:
        if self.start is None or self.end is None:
            return False
        return self.start <= address <= self.end


START = FunctionRecord(START_ID, START_ID)
EXIT = FunctionRecord(EXIT_ID, EXIT_ID)


class ShortIdAllocator:
    """Hand out sequential display ids starting at ``first``."""

    def __init__(self, first: int = 1) -> None:
        self._next = first

    def allocate(self) -> str:
        value = self._next
        self._next += 1
        return str(value)


class FunctionTable(Sequence[FunctionRecord]):
    """Ordered collection of functions as supplied by static analysis."""

    def __init__(self, records: Iterable[FunctionRecord]) -> None:
        self._records: List[FunctionRecord] = list(records)

    @classmethod
    def load(
        cls,
        records: Iterable[Tuple[str, int, int]],
        *,
        allocator: Optional[ShortIdAllocator] = None,
    ) -> "FunctionTable":
        """Build a table from ``(name, start, length)`` triples.

        Entries are trusted as given: neither ordering nor overlap is checked.
        """

        allocator = allocator or ShortIdAllocator()
        functions: List[FunctionRecord] = []
        for name, start, length in records:
            if start < 0:
                raise ValueError(f"function {name!r} has a negative start address")
            if length < 0:
                raise ValueError(f"function {name!r} has a negative length")
            functions.append(
                FunctionRecord(
                    short_id=allocator.allocate(),
                    name=name,
                    start=start,
                    end=start + length,
                )
            )
        return cls(functions)

    def resolve(self, address: int) -> Optional[FunctionRecord]:
        """Return the first function whose interval contains ``address``."""

        for record in self._records:
            if record.contains(address):
                return record
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> FunctionRecord:
        return self._records[index]

    def __iter__(self) -> Iterator[FunctionRecord]:
        return iter(self._records)


class AddressResolver:
    """Memoising front-end for :meth:`FunctionTable.resolve`.

    Traces revisit the same basic blocks over and over, so every distinct
    address is only scanned once.  Misses are cached as well.
    """

    def __init__(self, table: FunctionTable) -> None:
        self.table = table
        self._cache: Dict[int, Optional[FunctionRecord]] = {}

    def resolve(self, address: int) -> Optional[FunctionRecord]:
        try:
            return self._cache[address]
        except KeyError:
            record = self.table.resolve(address)
            self._cache[address] = record
            return record

    @property
    def cached_addresses(self) -> int:
        return len(self._cache)


def _function_pattern(separator: str) -> "re.Pattern[str]":
    sep = re.escape(separator)
    return re.compile(rf"^(\S+){sep}(\S+){sep}(\S+)$")


def _parse_hex(value: str, *, line_number: int, field: str) -> int:
    try:
        return int(value, 16)
    except ValueError:
        raise ValueError(
            f"line {line_number}: invalid hexadecimal {field} {value!r}"
        ) from None


def parse_function_records(
    text: str, *, separator: str = DEFAULT_SEPARATOR
) -> List[Tuple[str, int, int]]:
    """Parse ``<name>SEP<start>SEP<length>`` lines into integer triples."""

    if not separator:
        raise ValueError("function separator must not be empty")
    pattern = _function_pattern(separator)
    records: List[Tuple[str, int, int]] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        match = pattern.match(line)
        if match is None:
            raise ValueError(
                f"line {line_number}: expected <name>{separator}<start>{separator}<length>,"
                f" got {line!r}"
            )
        name, start_text, length_text = match.groups()
        start = _parse_hex(start_text, line_number=line_number, field="start")
        length = _parse_hex(length_text, line_number=line_number, field="length")
        records.append((name, start, length))
    return records


def parse_function_table(
    text: str, *, separator: str = DEFAULT_SEPARATOR
) -> FunctionTable:
    records = parse_function_records(text, separator=separator)
    table = FunctionTable.load(records)
    logger.debug("loaded %d functions", len(table))
    return table
