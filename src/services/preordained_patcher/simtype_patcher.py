"""Simtype batch patcher: swaps fab ids inside 134225858_ksmt.batch.

Batch layout (little-endian int32 throughout):

    [0]              entry count N
    [4 + 8*i]        id, size                (one pair per entry)
    [4 + 8*N]        payloads, back to back in entry order

Simtype payloads are opaque except for the fab id block, found by searching
for the 8-byte marker 06 00 00 00 07 00 00 00. Relative to the marker:

    +28  male fab id
    +32  female fab id
    +48  fab slot id (only rewritten for rogue helmets)

Only those fields change; the batch keeps its exact size.
"""

import struct
from typing import List, Optional, Tuple

from constants import ARMOR_PREFIXES, HELMET_CATEGORY, HELMET_FAB_SLOT, ROGUE_PREFIX
from utils.logging import log_info

from .bundle_writer import build_bundle, write_bundle
from .errors import DecodeError, MarkerNotFoundError, PreordainedError, ResolutionError
from .fab_resolver import resolve_fab_ids
from .models import BatchEntry, PatchedEntry, PatchResult, SymbolMaps

FAB_MARKER = b"\x06\x00\x00\x00\x07\x00\x00\x00"

_OFS_MALE_FAB = 28
_OFS_FEMALE_FAB = 32
_OFS_FAB_SLOT = 48
_FIELD_SIZE = 4

_ENTRY = struct.Struct("<ii")


def parse_batch_header(data: bytes) -> Tuple[List[BatchEntry], int]:
    """Read the entry index. Returns (entries, offset of the first payload).

    Raises:
        DecodeError: If the index or any payload runs past the end of the data.
    """
    if len(data) < 4:
        raise DecodeError(f"Batch too short: {len(data)} bytes")
    count = struct.unpack_from("<i", data, 0)[0]
    if count < 0:
        raise DecodeError(f"Negative batch entry count: {count}")

    payload_start = 4 + count * _ENTRY.size
    if payload_start > len(data):
        raise DecodeError(
            f"Batch declares {count} entries but the index needs {payload_start} bytes "
            f"and the file is {len(data)}"
        )

    entries = []
    cursor = payload_start
    for i in range(count):
        entry_id, size = _ENTRY.unpack_from(data, 4 + i * _ENTRY.size)
        if size < 0 or cursor + size > len(data):
            raise DecodeError(
                f"Batch entry {i} (id {entry_id}, size {size}) runs past the end "
                f"of the batch ({len(data)} bytes)"
            )
        entries.append(BatchEntry(id=entry_id, size=size, offset=cursor))
        cursor += size

    if cursor != len(data):
        log_info(
            f"Batch payloads end at {cursor} but the file is {len(data)} bytes; "
            f"trailing bytes left untouched"
        )
    return entries, payload_start


def match_prefix(name: str) -> Optional[str]:
    """Return the armor prefix the simtype name starts with, if any."""
    for prefix in ARMOR_PREFIXES:
        if name.startswith(prefix):
            return prefix
    return None


def extract_category(name: str, prefix: str) -> str:
    """Armor category from a simtype name.

    Reading starts two characters after the prefix and the category runs to
    the next underscore. When those two characters stop inside the body code
    (mit_mage_common06_mm_chest_01 leaves "m_chest_01"), the leftover code
    character is skipped too, giving "chest".
    """
    rest = name[len(prefix) + 2 :]
    head, sep, tail = rest.partition("_")
    if sep and len(head) <= 1 and tail:
        head = tail.partition("_")[0]
    return head


def find_marker(payload: bytes) -> int:
    """Offset of the fab id marker in a payload, or -1."""
    return payload.find(FAB_MARKER)


def _write_field(buf: bytearray, payload_end: int, offset: int, value: int, what: str):
    if offset + _FIELD_SIZE > payload_end:
        raise DecodeError(f"{what} field at {offset} lies outside the payload")
    struct.pack_into("<i", buf, offset, value)


def _patch_entry(buf: bytearray, entry: BatchEntry, name: str, prefix: str,
                 maps: SymbolMaps) -> PatchedEntry:
    category = extract_category(name, prefix)
    male_id, female_id = resolve_fab_ids(maps, category, prefix)

    payload_end = entry.offset + entry.size
    marker = find_marker(buf[entry.offset:payload_end])
    if marker == -1:
        raise MarkerNotFoundError(f"fab id marker not found in {category!r} payload")
    base = entry.offset + marker

    _write_field(buf, payload_end, base + _OFS_MALE_FAB, male_id, "male fab")
    _write_field(buf, payload_end, base + _OFS_FEMALE_FAB, female_id, "female fab")

    if category == HELMET_CATEGORY and prefix == ROGUE_PREFIX:
        slot_id = maps.fab_slot_id(HELMET_FAB_SLOT)
        if slot_id is None:
            raise ResolutionError(f"Fab slot {HELMET_FAB_SLOT!r} not found")
        _write_field(buf, payload_end, base + _OFS_FAB_SLOT, slot_id, "fab slot")

    return PatchedEntry(
        id=entry.id,
        name=name,
        category=category,
        prefix=prefix,
        male_id=male_id,
        female_id=female_id,
        bundle=build_bundle(male_id, female_id),
    )


def patch_simtype_batch(data: bytes, maps: SymbolMaps) -> PatchResult:
    """Patch a batch in memory. The input is not modified.

    Raises:
        DecodeError, ResolutionError, MarkerNotFoundError: On the first entry
            that cannot be patched. The message names the entry.
    """
    entries, _ = parse_batch_header(data)
    buf = bytearray(data)
    patched = []

    for entry in entries:
        name = maps.simtype_name(entry.id)
        if name is None:
            continue
        prefix = match_prefix(name)
        if prefix is None:
            continue
        try:
            patched.append(_patch_entry(buf, entry, name, prefix, maps))
        except PreordainedError as e:
            raise type(e)(f"Simtype {entry.id} ({name}): {e}") from e

    return PatchResult(data=bytes(buf), entries_seen=len(entries), patched=patched)


def patch_simtype_batch_file(path: str, maps: SymbolMaps, out_dir: str) -> PatchResult:
    """Patch a batch file in place and write one bundle per patched simtype.

    Nothing is written unless every entry patched cleanly. Bundles are
    written before the batch, so a failed bundle write leaves the batch as it
    was.
    """
    with open(path, "rb") as f:
        data = f.read()

    result = patch_simtype_batch(data, maps)

    for entry in result.patched:
        write_bundle(out_dir, entry.id, entry.bundle)

    with open(path, "wb") as f:
        f.write(result.data)
    return result
