"""Filesystem operations for deployment artifacts and the daemon data dir.

Pure rendering lives in :mod:`mintdctl.domain` (correct dependency
direction: infrastructure -> domain). This module handles actual file I/O.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from mintdctl.domain.unit import DATA_DIR_MODE

# Env file: read by systemd as root. Launch descriptor and everything else:
# read by the launcher running as the service user.
SECRET_MODE = 0o600
PUBLIC_MODE = 0o644


def write_artifact(path: Path, content: str, *, mode: int = PUBLIC_MODE) -> bool:
    """Atomically write *content* to *path* with permission *mode*.

    Creates parent directories if they don't exist. Returns False and leaves
    the file untouched when it already holds identical content.
    """
    if path.is_file() and path.read_text(encoding="utf-8") == content:
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.chmod(mode)
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return True


def prepare_data_dir(path: Path, user: str, group: str) -> Path:
    """Create the daemon data directory owned by *user*:*group*, mode 0750."""
    path.mkdir(parents=True, exist_ok=True)
    path.chmod(DATA_DIR_MODE)
    shutil.chown(path, user=user, group=group)
    return path
