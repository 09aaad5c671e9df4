"""Symbol table codec for Kingdoms of Amalur symbol_table_*.bin files.

Layout (all integers little-endian int32, no alignment):

    [0]            count
    [4 + 12*i]     id, start, end        (one triplet per entry)
    [4 + 12*count] string blob

Each name is blob[start:end] decoded as UTF-8, minus a trailing NUL when the
range ends with one.
"""

import os
import struct
from types import MappingProxyType
from typing import Dict, Iterable, List, Tuple

from constants import FAB_TABLE, FABSLOT_TABLE, SIMTYPE_TABLE
from utils.logging import log_error

from .errors import DecodeError
from .models import SymbolEntry, SymbolMaps

_COUNT_SIZE = 4
_TRIPLET = struct.Struct("<iii")


def decode_symbol_table(data: bytes) -> List[SymbolEntry]:
    """Decode a symbol table into entries, in file order."""
    if len(data) < _COUNT_SIZE:
        raise DecodeError(f"Symbol table too short: {len(data)} bytes")

    count = struct.unpack_from("<i", data, 0)[0]
    if count < 0:
        raise DecodeError(f"Negative symbol count: {count}")

    blob_start = _COUNT_SIZE + count * _TRIPLET.size
    if blob_start > len(data):
        raise DecodeError(
            f"Symbol table declares {count} entries ({blob_start} bytes of header) "
            f"but is only {len(data)} bytes"
        )
    blob_len = len(data) - blob_start

    entries = []
    for i in range(count):
        entry_id, start, end = _TRIPLET.unpack_from(data, _COUNT_SIZE + i * _TRIPLET.size)
        if not 0 <= start <= end <= blob_len:
            raise DecodeError(
                f"Symbol {i} (id {entry_id}) has string range [{start}, {end}) "
                f"outside the {blob_len}-byte string blob"
            )
        if end > start and data[blob_start + end - 1] == 0:
            end -= 1
        raw = data[blob_start + start : blob_start + end]
        try:
            name = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Symbol {i} (id {entry_id}) is not valid UTF-8: {e}") from e
        entries.append(SymbolEntry(id=entry_id, name=name))
    return entries


def encode_symbol_table(entries: Iterable[Tuple[int, str]]) -> bytes:
    """Build a symbol table from (id, name) pairs. Names are NUL-terminated."""
    entries = list(entries)
    header = bytearray(struct.pack("<i", len(entries)))
    blob = bytearray()
    for entry_id, name in entries:
        start = len(blob)
        blob += name.encode("utf-8") + b"\x00"
        header += _TRIPLET.pack(entry_id, start, len(blob))
    return bytes(header + blob)


def read_symbol_table(path: str) -> List[SymbolEntry]:
    with open(path, "rb") as f:
        data = f.read()
    try:
        return decode_symbol_table(data)
    except DecodeError as e:
        raise DecodeError(f"{os.path.basename(path)}: {e}") from e


def _invert(entries: List[SymbolEntry], table: str, fold_case: bool = False) -> Dict[str, int]:
    """Map name -> id. A repeated name keeps the last id seen."""
    by_name: Dict[str, int] = {}
    for entry in entries:
        key = entry.name.casefold() if fold_case else entry.name
        if key in by_name and by_name[key] != entry.id:
            log_error(
                f"Duplicate name {entry.name!r} in {table}: "
                f"id {by_name[key]} replaced by {entry.id}"
            )
        by_name[key] = entry.id
    return by_name


def _maps_from_entries(
    simtype_entries: List[SymbolEntry],
    fab_entries: List[SymbolEntry],
    fabslot_entries: List[SymbolEntry],
) -> SymbolMaps:
    return SymbolMaps(
        simtypes=MappingProxyType({e.id: e.name for e in simtype_entries}),
        fabs=MappingProxyType(_invert(fab_entries, FAB_TABLE, fold_case=True)),
        fab_slots=MappingProxyType(_invert(fabslot_entries, FABSLOT_TABLE)),
    )


def build_symbol_maps(
    simtype_data: bytes, fab_data: bytes, fabslot_data: bytes
) -> SymbolMaps:
    """Decode the three tables and build the lookups the patch needs."""
    return _maps_from_entries(
        decode_symbol_table(simtype_data),
        decode_symbol_table(fab_data),
        decode_symbol_table(fabslot_data),
    )


def load_symbol_maps(directory: str) -> SymbolMaps:
    """Read symbol_table_{simtype,fab,fabslot}.bin from an unpacked archive."""
    return _maps_from_entries(
        read_symbol_table(os.path.join(directory, SIMTYPE_TABLE)),
        read_symbol_table(os.path.join(directory, FAB_TABLE)),
        read_symbol_table(os.path.join(directory, FABSLOT_TABLE)),
    )
