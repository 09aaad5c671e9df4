"""
Preordained Swapper - console entry point.

Swaps the common06/common07 mage, rogue and warrior armor visuals in
Kingdoms of Amalur: Re-Reckoning for the preordained set by patching
patch_0.pak with the official modding tools.
"""

import argparse
import os
import sys
from typing import List, Optional

from config.settings import load_settings
from constants import APP_VERSION
from services.preordained_patcher import (
    ExecutablePakTools,
    PakToolError,
    PreordainedError,
    PreordainedPatcher,
)
from utils.logging import get_log_file, init_log_file, log_exception


def _print_progress(fraction: float, message: str):
    print(f"[{int(fraction * 100):3d}%] {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="preordained-swapper",
        description="Swap common06/common07 armor visuals for the preordained set.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument(
        "--modding-dir",
        help="Folder containing pakfileunpacker.exe and pakfilebuilder.exe "
        "(default: current folder)",
    )
    parser.add_argument(
        "--data-dir",
        help="Folder containing patch_0.pak and initial_0.pak "
        "(default: ../data next to the modding folder)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""
    args = build_parser().parse_args(argv)
    init_log_file()

    settings = load_settings()
    if args.modding_dir:
        settings.modding_dir = os.path.abspath(args.modding_dir)
        if not args.data_dir:
            settings.data_dir = os.path.join(settings.modding_dir, "..", "data")
    if args.data_dir:
        settings.data_dir = os.path.abspath(args.data_dir)

    tools = ExecutablePakTools(settings.unpacker, settings.builder, cwd=settings.modding_dir)
    if not tools.is_available():
        print(
            f"{settings.unpacker} not found. Please make sure this is located in your "
            "Kingdoms of Amalur Re-Reckoning\\modding directory."
        )
        return 1

    patcher = PreordainedPatcher(settings, tools=tools, on_progress=_print_progress)
    try:
        summary = patcher.run()
    except (PreordainedError, PakToolError, OSError) as e:
        log_exception("Patch failed", e)
        print(f"Patch failed: {e}")
        print(f"See {get_log_file()} for details")
        return 1
    except Exception as e:
        log_exception("Unexpected error", e)
        print(f"Unexpected error: {e}")
        print(f"See {get_log_file()} for details")
        return 1

    if summary.action == "backup":
        print(f"Backed up {settings.patch_pak} to {settings.backup_zip}")
    else:
        print(f"Restored {settings.patch_pak} from {settings.backup_zip} before patching")
    print(
        f"Patched {len(summary.patched)} of {summary.entries_seen} simtypes; "
        f"{settings.patch_pak} is now {summary.archive_size:,} bytes"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
