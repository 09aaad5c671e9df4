"""Backup and restore of patch_0.pak.

The first run zips the untouched archive next to it. Every later run puts
that copy back before patching, so the patch is always applied to the
original data and never stacked on a previous run's output.

Both directions write to a ``.tmp`` file first and only move it into place
once it is complete: patch_0.pak is never removed before a readable copy
exists, and a half-written zip never becomes the backup.
"""

import os
import shutil
from zipfile import ZIP_DEFLATED, BadZipFile, ZipFile

from utils.logging import log_info

from .errors import BackupError

BACKUP = "backup"
RESTORE = "restore"


def _remove_if_exists(path: str):
    if os.path.exists(path):
        os.remove(path)


def _create_backup(pak_path: str, backup_path: str, pak_name: str):
    tmp_path = backup_path + ".tmp"
    try:
        with ZipFile(tmp_path, "w", compression=ZIP_DEFLATED) as zf:
            zf.write(pak_path, arcname=pak_name)
        os.replace(tmp_path, backup_path)
    finally:
        _remove_if_exists(tmp_path)


def _restore_backup(backup_path: str, pak_path: str, pak_name: str):
    backup_name = os.path.basename(backup_path)
    tmp_path = pak_path + ".tmp"
    try:
        with ZipFile(backup_path, "r") as zf:
            if pak_name not in zf.namelist():
                raise BackupError(f"{backup_name} does not contain {pak_name}")
            with zf.open(pak_name) as src, open(tmp_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
        os.replace(tmp_path, pak_path)
    except BadZipFile as e:
        raise BackupError(f"{backup_name} is damaged: {e}") from e
    finally:
        _remove_if_exists(tmp_path)


def backup_or_restore(data_dir: str, pak_name: str, backup_name: str) -> str:
    """Create the backup if missing, otherwise restore from it.

    Returns:
        "backup" if the backup was created, "restore" if the pak was restored.

    Raises:
        FileNotFoundError: No backup yet and no pak to back up.
        BackupError: The backup exists but cannot be restored. patch_0.pak
            is left as it was.
    """
    pak_path = os.path.join(data_dir, pak_name)
    backup_path = os.path.join(data_dir, backup_name)

    if not os.path.exists(backup_path):
        if not os.path.exists(pak_path):
            raise FileNotFoundError(f"{pak_name} not found in {data_dir}")
        _create_backup(pak_path, backup_path, pak_name)
        log_info(f"Backed up {pak_name} to {backup_name}")
        return BACKUP

    _restore_backup(backup_path, pak_path, pak_name)
    log_info(f"Restored {pak_name} from {backup_name}")
    return RESTORE
