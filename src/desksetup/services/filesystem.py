"""Filesystem helpers for desksetup."""

import os
import shutil
from pathlib import Path
from typing import Optional


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger):
        self.logger = logger

    def backup_file(self, path: str, suffix: str) -> Optional[str]:
        if not os.path.exists(path):
            return None

        backup_path = f"{path}.bak.{suffix}"
        shutil.copy2(path, backup_path)
        self.logger.debug("Backed up %s to %s", path, backup_path)
        return backup_path

    def write_file(self, path: str, content: str, staging_dir: Optional[str] = None):
        """Writes content to path, staging it first when a scratch dir is given."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        if not staging_dir or not os.path.isdir(staging_dir):
            Path(path).write_text(content, encoding="utf-8")
            return

        staged = Path(staging_dir) / Path(path).name
        staged.write_text(content, encoding="utf-8")
        shutil.move(str(staged), path)

    def set_permissions(self, path: str, mode: int):
        try:
            os.chmod(path, mode)
        except OSError as exc:
            self.logger.warning("Could not set permissions on %s: %s", path, exc)

    def set_owner(self, path: str, user: str, group: str):
        try:
            shutil.chown(path, user=user, group=group)
        except (OSError, LookupError) as exc:
            self.logger.warning("Could not change owner of %s: %s", path, exc)

    def cleanup_dir(self, path: str):
        if os.path.exists(path):
            try:
                shutil.rmtree(path)
                self.logger.debug("Removed directory: %s", path)
            except OSError as exc:
                self.logger.warning("Could not remove %s: %s", path, exc)
