"""Writes the <id>.bundle companion file for each patched simtype.

Layout (30 bytes, zero-filled):
    [8]  int32  2
    [16] int32  male fab id
    [20] int32  female fab id
    [24] uint32 0x00001010
"""

import os
import struct

from constants import BUNDLE_EXTENSION

BUNDLE_SIZE = 30
_OFS_FLAG = 8
_OFS_MALE_ID = 16
_OFS_FEMALE_ID = 20
_OFS_TRAILER = 24

_BUNDLE_FLAG = 2
_BUNDLE_TRAILER = 0x00001010


def build_bundle(male_id: int, female_id: int) -> bytes:
    buf = bytearray(BUNDLE_SIZE)
    struct.pack_into("<i", buf, _OFS_FLAG, _BUNDLE_FLAG)
    struct.pack_into("<i", buf, _OFS_MALE_ID, male_id)
    struct.pack_into("<i", buf, _OFS_FEMALE_ID, female_id)
    struct.pack_into("<I", buf, _OFS_TRAILER, _BUNDLE_TRAILER)
    return bytes(buf)


def bundle_path(directory: str, entry_id: int) -> str:
    return os.path.join(directory, f"{entry_id}{BUNDLE_EXTENSION}")


def write_bundle(directory: str, entry_id: int, data: bytes) -> str:
    """Write an already built bundle for one simtype and return its path."""
    if len(data) != BUNDLE_SIZE:
        raise ValueError(f"Bundle for {entry_id} is {len(data)} bytes, expected {BUNDLE_SIZE}")
    path = bundle_path(directory, entry_id)
    with open(path, "wb") as f:
        f.write(data)
    return path
