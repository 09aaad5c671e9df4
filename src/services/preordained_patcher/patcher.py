"""Preordained armor patcher orchestrator: backup, unpack, patch, repack."""

import os
import shutil
import tempfile
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from config.settings import Settings
from constants import FABSLOT_TABLE
from utils.logging import log_info

from .backup import backup_or_restore
from .models import RunContext, RunSummary
from .pak_tools import ExecutablePakTools, PakTools
from .simtype_patcher import patch_simtype_batch_file
from .symbol_table import load_symbol_maps


@contextmanager
def scratch_directory(prefix: str = "preordained_") -> Iterator[str]:
    """Private working directory, removed however the block exits."""
    path = tempfile.mkdtemp(prefix=prefix)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


class PreordainedPatcher:
    def __init__(
        self,
        settings: Settings,
        tools: Optional[PakTools] = None,
        on_progress: Optional[Callable[[float, str], None]] = None,
    ):
        self.settings = settings
        if tools is not None:
            self.tools = tools
        else:
            self.tools = ExecutablePakTools(
                settings.unpacker, settings.builder, cwd=settings.modding_dir
            )
        self.on_progress = on_progress

    def _progress(self, fraction: float, message: str):
        if self.on_progress:
            self.on_progress(fraction, message)

    def unpack(self, ctx: RunContext):
        """Extract patch_0.pak and the fabslot table from initial_0.pak."""
        s = ctx.settings
        self.tools.unpack(s.patch_pak_path, ctx.scratch_dir)
        self.tools.unpack(s.initial_pak_path, ctx.scratch_dir, [FABSLOT_TABLE])

    def pack(self, ctx: RunContext):
        """Rebuild patch_0.pak from everything in the scratch directory."""
        files = sorted(
            os.path.join(ctx.scratch_dir, name)
            for name in os.listdir(ctx.scratch_dir)
            if os.path.isfile(os.path.join(ctx.scratch_dir, name))
        )
        self.tools.pack(files, ctx.settings.patch_pak_path)

    def run(self) -> RunSummary:
        """Apply the swap to patch_0.pak. Any failure aborts the whole run."""
        s = self.settings

        self._progress(0.0, "Checking backup...")
        action = backup_or_restore(s.data_dir, s.patch_pak, s.backup_zip)
        summary = RunSummary(action=action)

        with scratch_directory() as scratch_dir:
            ctx = RunContext(settings=s, scratch_dir=scratch_dir)

            self._progress(0.1, f"Unpacking {s.patch_pak}...")
            self.unpack(ctx)

            self._progress(0.4, "Reading symbol tables...")
            ctx.maps = load_symbol_maps(scratch_dir)

            self._progress(0.5, f"Patching {s.batch_file}...")
            result = patch_simtype_batch_file(
                ctx.scratch_path(s.batch_file), ctx.maps, scratch_dir
            )
            summary.entries_seen = result.entries_seen
            summary.patched = result.patched
            for entry in result.patched:
                log_info(
                    f"Patched simtype {entry.id} ({entry.name}): "
                    f"fabs {entry.male_id}/{entry.female_id}"
                )

            self._progress(0.7, f"Rebuilding {s.patch_pak}...")
            self.pack(ctx)

        if os.path.exists(s.patch_pak_path):
            summary.archive_size = os.path.getsize(s.patch_pak_path)
        self._progress(1.0, "Done!")
        return summary
