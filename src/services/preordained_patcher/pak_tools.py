"""Wrappers around the game's pak archive tools.

The unpacker and builder ship with the official modding kit and are treated
as black boxes: run them, wait, check the exit code.
"""

import os
import subprocess
import tempfile
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence


class PakToolError(Exception):
    """Raised when a pak tool is missing or exits with an error."""
    pass


class PakTools(ABC):
    """Extracts files from and rebuilds .pak archives."""

    @abstractmethod
    def unpack(
        self, archive: str, target_dir: str, files: Optional[Sequence[str]] = None
    ) -> None:
        """Extract an archive (or only the named files) into target_dir."""

    @abstractmethod
    def pack(self, files: Sequence[str], archive: str) -> None:
        """Build an archive from a list of loose files."""


class ExecutablePakTools(PakTools):
    """Runs pakfileunpacker / pakfilebuilder as subprocesses."""

    def __init__(self, unpacker: str, builder: str, cwd: Optional[str] = None):
        self.unpacker = unpacker
        self.builder = builder
        self.cwd = cwd

    def _resolve(self, exe: str) -> str:
        if self.cwd and not os.path.isabs(exe):
            return os.path.join(self.cwd, exe)
        return exe

    def is_available(self) -> bool:
        return os.path.isfile(self._resolve(self.unpacker))

    def _run(self, args: List[str]) -> None:
        exe = self._resolve(args[0])
        if not os.path.isfile(exe):
            raise PakToolError(f"{os.path.basename(exe)} not found at {exe}")
        try:
            result = subprocess.run(
                [exe] + args[1:],
                cwd=self.cwd,
                capture_output=True,
            )
        except OSError as e:
            raise PakToolError(f"Failed to start {os.path.basename(exe)}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")[:200]
            raise PakToolError(
                f"{os.path.basename(exe)} exited with code {result.returncode}: {stderr}"
            )

    def unpack(
        self, archive: str, target_dir: str, files: Optional[Sequence[str]] = None
    ) -> None:
        self._run([self.unpacker, archive, "unpack", target_dir] + list(files or []))

    def pack(self, files: Sequence[str], archive: str) -> None:
        # The builder takes its inputs from a list file, one path per line
        fd, list_path = tempfile.mkstemp(suffix=".txt")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write("\n".join(files) + "\n")
            self._run([self.builder, "-c", list_path, archive])
        finally:
            if os.path.exists(list_path):
                os.remove(list_path)
