import pytest

from blocktrace.functions import (
    EXIT,
    START,
    AddressResolver,
    FunctionTable,
    ShortIdAllocator,
    parse_function_records,
    parse_function_table,
)


def test_load_assigns_sequential_ids_and_end_addresses():
    table = FunctionTable.load([("main", 0x1000, 0x20), ("helper", 0x1020, 0x10)])

    assert [record.short_id for record in table] == ["1", "2"]
    assert [record.name for record in table] == ["main", "helper"]
    assert table[0].start == 0x1000
    assert table[0].end == 0x1020
    assert table[1].end == 0x1030


def test_load_uses_supplied_allocator():
    table = FunctionTable.load([("a", 0, 4), ("b", 8, 4)], allocator=ShortIdAllocator(first=10))

    assert [record.short_id for record in table] == ["10", "11"]


def test_ids_are_reproducible_between_loads():
    records = [("a", 0, 4), ("b", 8, 4)]

    first = [record.short_id for record in FunctionTable.load(records)]
    second = [record.short_id for record in FunctionTable.load(records)]

    assert first == second == ["1", "2"]


def test_resolve_prefers_first_matching_interval():
    table = FunctionTable.load([("A", 0, 10), ("B", 5, 10)])

    assert table.resolve(7).name == "A"
    assert table.resolve(12).name == "B"


@pytest.mark.parametrize(
    "address,expected",
    [
        (0, "A"),
        (10, "A"),
        (15, "B"),
        (16, None),
    ],
)
def test_resolve_bounds_are_inclusive(address, expected):
    table = FunctionTable.load([("A", 0, 10), ("B", 5, 10)])

    record = table.resolve(address)

    assert (record.name if record else None) == expected


def test_boundary_nodes_never_contain_addresses():
    assert START.is_boundary and EXIT.is_boundary
    assert not START.contains(0)
    assert not EXIT.contains(0)
    assert START.short_id == "Start"
    assert EXIT.short_id == "Exit"


def test_load_rejects_negative_length():
    with pytest.raises(ValueError, match="negative length"):
        FunctionTable.load([("broken", 0x10, -1)])


def test_address_resolver_caches_hits_and_misses():
    table = FunctionTable.load([("A", 0, 10)])
    resolver = AddressResolver(table)

    assert resolver.resolve(3) is table[0]
    assert resolver.resolve(3) is table[0]
    assert resolver.resolve(0x100) is None
    assert resolver.resolve(0x100) is None
    assert resolver.cached_addresses == 2


def test_parse_function_table_reads_hex_fields_and_skips_blank_lines():
    text = "main_SEPERATOR_1000_SEPERATOR_20\n\n  helper_SEPERATOR_1020_SEPERATOR_1f  \n"

    table = parse_function_table(text)

    assert len(table) == 2
    assert table[1].name == "helper"
    assert table[1].start == 0x1020
    assert table[1].end == 0x103F


def test_parse_function_records_with_custom_separator():
    records = parse_function_records("sub_401000;401000;a5\n", separator=";")

    assert records == [("sub_401000", 0x401000, 0xA5)]


def test_parse_function_records_keeps_separator_inside_names():
    records = parse_function_records("odd_SEPERATOR_name_SEPERATOR_10_SEPERATOR_4")

    assert records == [("odd_SEPERATOR_name", 0x10, 0x4)]


def test_parse_function_table_rejects_malformed_line():
    text = "main_SEPERATOR_1000_SEPERATOR_20\nthis line is wrong\n"

    with pytest.raises(ValueError, match="line 2"):
        parse_function_table(text)


def test_parse_function_table_rejects_bad_hex():
    with pytest.raises(ValueError, match="invalid hexadecimal start"):
        parse_function_table("main_SEPERATOR_zz_SEPERATOR_20")
