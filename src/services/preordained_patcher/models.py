"""Data models for the preordained armor patcher."""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from config.settings import Settings


@dataclass(frozen=True)
class SymbolEntry:
    """One id/name pair from a symbol_table_*.bin file."""

    id: int
    name: str


@dataclass(frozen=True)
class BatchEntry:
    """Index record from the head of a .batch file."""

    id: int
    size: int
    offset: int = 0  # absolute offset of the payload inside the batch


@dataclass(frozen=True)
class SymbolMaps:
    """Lookups built from the simtype, fab and fabslot symbol tables.

    Fab names are stored casefolded so lookups ignore case; fab slot names
    are matched exactly.
    """

    simtypes: Mapping[int, str]
    fabs: Mapping[str, int]
    fab_slots: Mapping[str, int]

    def simtype_name(self, simtype_id: int) -> Optional[str]:
        return self.simtypes.get(simtype_id)

    def fab_id(self, name: str) -> Optional[int]:
        return self.fabs.get(name.casefold())

    def fab_slot_id(self, name: str) -> Optional[int]:
        return self.fab_slots.get(name)


@dataclass
class PatchedEntry:
    """A simtype that had its fab ids swapped."""

    id: int
    name: str
    category: str
    prefix: str
    male_id: int
    female_id: int
    bundle: bytes = b""


@dataclass
class PatchResult:
    """Outcome of patching one batch buffer in memory."""

    data: bytes
    entries_seen: int = 0
    patched: List[PatchedEntry] = field(default_factory=list)

    @property
    def bundles(self) -> List[Tuple[int, bytes]]:
        return [(p.id, p.bundle) for p in self.patched]


@dataclass
class RunContext:
    """Everything one run shares between steps."""

    settings: Settings
    scratch_dir: str
    maps: Optional[SymbolMaps] = None

    def scratch_path(self, name: str) -> str:
        return os.path.join(self.scratch_dir, name)


@dataclass
class RunSummary:
    """Returned by PreordainedPatcher.run()."""

    action: str  # "backup" on the first run, "restore" afterwards
    entries_seen: int = 0
    patched: List[PatchedEntry] = field(default_factory=list)
    archive_size: int = 0
