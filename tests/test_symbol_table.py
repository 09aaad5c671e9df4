"""Tests for the symbol table codec and the lookups built from it."""

import os
import struct
import sys
import tempfile

# Add src to path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from services.preordained_patcher.errors import DecodeError
from services.preordained_patcher.models import SymbolEntry
from services.preordained_patcher.symbol_table import (
    build_symbol_maps,
    decode_symbol_table,
    encode_symbol_table,
    load_symbol_maps,
    read_symbol_table,
)
from utils.logging import update_log_file_path

_LOG_DIR = tempfile.mkdtemp(prefix="preordained_test_log_")
update_log_file_path(_LOG_DIR)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _raw_table(triplets, blob: bytes) -> bytes:
    """Build a table by hand so ranges can be set independently of the blob."""
    data = struct.pack("<i", len(triplets))
    for entry_id, start, end in triplets:
        data += struct.pack("<iii", entry_id, start, end)
    return data + blob


def _expect_decode_error(data: bytes):
    try:
        decode_symbol_table(data)
    except DecodeError:
        return
    assert False, "Should have raised DecodeError"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def test_decode_strips_trailing_nul():
    data = _raw_table([(5, 0, 6), (9, 6, 9)], b"chest\x00abc")
    entries = decode_symbol_table(data)
    assert entries == [SymbolEntry(5, "chest"), SymbolEntry(9, "abc")], entries
    print("  PASS: test_decode_strips_trailing_nul")


def test_decode_name_length_matches_range():
    """Length is end-start, minus one only when the range ends in NUL."""
    blob = b"abc\x00defg\x00\x00"
    triplets = [(1, 0, 4), (2, 4, 8), (3, 4, 9), (4, 9, 10), (5, 3, 3)]
    entries = decode_symbol_table(_raw_table(triplets, blob))

    for (entry_id, start, end), entry in zip(triplets, entries):
        expected = end - start
        if end > start and blob[end - 1] == 0:
            expected -= 1
        assert entry.id == entry_id
        assert len(entry.name) == expected, f"id {entry_id}: {entry.name!r}"
        assert not entry.name.endswith("\x00")
    assert entries[1].name == "defg"
    assert entries[3].name == ""
    assert entries[4].name == ""
    print("  PASS: test_decode_name_length_matches_range")


def test_decode_utf8_names():
    data = encode_symbol_table([(1, "épée"), (2, "helm")])
    assert [e.name for e in decode_symbol_table(data)] == ["épée", "helm"]
    print("  PASS: test_decode_utf8_names")


def test_decode_empty_table():
    assert decode_symbol_table(struct.pack("<i", 0)) == []
    print("  PASS: test_decode_empty_table")


def test_decode_rejects_short_input():
    _expect_decode_error(b"")
    _expect_decode_error(b"\x01\x00")
    print("  PASS: test_decode_rejects_short_input")


def test_decode_rejects_truncated_triplets():
    data = struct.pack("<i", 3) + struct.pack("<iii", 1, 0, 0)
    _expect_decode_error(data)
    print("  PASS: test_decode_rejects_truncated_triplets")


def test_decode_rejects_bad_ranges():
    _expect_decode_error(_raw_table([(1, 0, 10)], b"short"))
    _expect_decode_error(_raw_table([(1, 3, 2)], b"short"))
    _expect_decode_error(_raw_table([(1, -1, 2)], b"short"))
    _expect_decode_error(struct.pack("<i", -1))
    print("  PASS: test_decode_rejects_bad_ranges")


def test_decode_rejects_invalid_utf8():
    _expect_decode_error(_raw_table([(1, 0, 2)], b"\xff\xfe"))
    print("  PASS: test_decode_rejects_invalid_utf8")


def test_encode_decode_round_trip():
    pairs = [
        (101, "mit_preordained_helmet_01"),
        (-7, "HairAndHelmet"),
        (0, ""),
        (2 ** 31 - 1, "me_armor_female_chest"),
    ]
    entries = decode_symbol_table(encode_symbol_table(pairs))
    assert [(e.id, e.name) for e in entries] == pairs
    print("  PASS: test_encode_decode_round_trip")


def test_encode_layout():
    data = encode_symbol_table([(3, "ab")])
    assert data == struct.pack("<iiii", 1, 3, 0, 3) + b"ab\x00"
    print("  PASS: test_encode_layout")


def test_read_symbol_table_names_file_on_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "symbol_table_fab.bin")
        with open(path, "wb") as f:
            f.write(b"\x05")
        try:
            read_symbol_table(path)
            assert False, "Should have raised DecodeError"
        except DecodeError as e:
            assert "symbol_table_fab.bin" in str(e)
    print("  PASS: test_read_symbol_table_names_file_on_error")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def test_build_symbol_maps():
    maps = build_symbol_maps(
        encode_symbol_table([(7, "mit_rogue_common06_mm_head_01"), (8, "other")]),
        encode_symbol_table([(101, "mit_preordained_helmet_01")]),
        encode_symbol_table([(5, "HairAndHelmet")]),
    )
    assert maps.simtype_name(7) == "mit_rogue_common06_mm_head_01"
    assert maps.simtype_name(99) is None
    assert maps.fab_id("mit_preordained_helmet_01") == 101
    assert maps.fab_slot_id("HairAndHelmet") == 5
    print("  PASS: test_build_symbol_maps")


def test_fab_lookup_ignores_case_fab_slot_does_not():
    maps = build_symbol_maps(
        encode_symbol_table([]),
        encode_symbol_table([(42, "ME_Armor_Chest")]),
        encode_symbol_table([(5, "HairAndHelmet")]),
    )
    assert maps.fab_id("me_armor_chest") == 42
    assert maps.fab_id("ME_ARMOR_CHEST") == 42
    assert maps.fab_slot_id("hairandhelmet") is None
    print("  PASS: test_fab_lookup_ignores_case_fab_slot_does_not")


def test_duplicate_names_keep_last_id():
    maps = build_symbol_maps(
        encode_symbol_table([]),
        encode_symbol_table([(1, "me_armor_chest"), (2, "ME_ARMOR_CHEST")]),
        encode_symbol_table([(5, "HairAndHelmet"), (6, "HairAndHelmet")]),
    )
    assert maps.fab_id("me_armor_chest") == 2
    assert maps.fab_slot_id("HairAndHelmet") == 6
    print("  PASS: test_duplicate_names_keep_last_id")


def test_maps_are_read_only():
    maps = build_symbol_maps(
        encode_symbol_table([(1, "a")]),
        encode_symbol_table([]),
        encode_symbol_table([]),
    )
    try:
        maps.simtypes[2] = "b"
        assert False, "Should not be able to modify simtypes"
    except TypeError:
        pass
    print("  PASS: test_maps_are_read_only")


def test_load_symbol_maps_from_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        tables = {
            "symbol_table_simtype.bin": [(7, "mit_mage_common06_mm_chest_01")],
            "symbol_table_fab.bin": [(11, "mit_preordained_mage_chest_01")],
            "symbol_table_fabslot.bin": [(5, "HairAndHelmet")],
        }
        for name, pairs in tables.items():
            with open(os.path.join(tmpdir, name), "wb") as f:
                f.write(encode_symbol_table(pairs))

        maps = load_symbol_maps(tmpdir)
        assert maps.simtype_name(7) == "mit_mage_common06_mm_chest_01"
        assert maps.fab_id("mit_preordained_mage_chest_01") == 11
        assert maps.fab_slot_id("HairAndHelmet") == 5
    print("  PASS: test_load_symbol_maps_from_directory")


if __name__ == "__main__":
    tests = [
        test_decode_strips_trailing_nul,
        test_decode_name_length_matches_range,
        test_decode_utf8_names,
        test_decode_empty_table,
        test_decode_rejects_short_input,
        test_decode_rejects_truncated_triplets,
        test_decode_rejects_bad_ranges,
        test_decode_rejects_invalid_utf8,
        test_encode_decode_round_trip,
        test_encode_layout,
        test_read_symbol_table_names_file_on_error,
        test_build_symbol_maps,
        test_fab_lookup_ignores_case_fab_slot_does_not,
        test_duplicate_names_keep_last_id,
        test_maps_are_read_only,
        test_load_symbol_maps_from_directory,
    ]

    print(f"Running {len(tests)} symbol table tests...\n")
    failed = 0
    for test in tests:
        try:
            test()
        except Exception as e:
            failed += 1
            print(f"  FAIL: {test.__name__}: {e}")

    print(f"\nResults: {len(tests) - failed} passed, {failed} failed")
    if failed:
        sys.exit(1)
