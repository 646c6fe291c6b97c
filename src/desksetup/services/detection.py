"""Distribution family detection."""

import shlex
import shutil
from pathlib import Path
from typing import Callable, Dict, Optional

from desksetup.constants import OS_RELEASE_PATH
from desksetup.errors import SetupError
from desksetup.errors_catalog import actionable_error
from desksetup.models import Family

FAMILY_BY_ID: Dict[str, Family] = {
    "arch": Family.ARCH,
    "cachyos": Family.ARCH,
    "manjaro": Family.ARCH,
    "endeavouros": Family.ARCH,
    "garuda": Family.ARCH,
    "fedora": Family.FEDORA,
    "rhel": Family.FEDORA,
    "centos": Family.FEDORA,
    "nobara": Family.FEDORA,
    "ultramarine": Family.FEDORA,
}

# Fedora wins when both match; Fedora also packages pacman.
LIKE_MARKERS = (
    ("fedora", Family.FEDORA),
    ("arch", Family.ARCH),
)

FAMILY_BINARIES = (
    ("dnf", Family.FEDORA),
    ("pacman", Family.ARCH),
)


def parse_os_release(text: str) -> Dict[str, str]:
    values = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            parts = [raw_value.strip("\"'")]
        values[key.strip()] = " ".join(parts)
    return values


class DetectionService:
    """Classifies the host into a supported distribution family."""

    def __init__(
        self,
        run_log,
        os_release_path: str = OS_RELEASE_PATH,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        self.run_log = run_log
        self.os_release_path = os_release_path
        self.which = which

    def detect_system(self) -> Family:
        family = self.detect_from_os_release()
        if family is None:
            family = self.detect_from_binaries()

        if family is None:
            raise SetupError(actionable_error("unsupported_distro"))

        self.run_log.ok("Detected base: %s", family.value.upper())
        return family

    def detect_from_os_release(self) -> Optional[Family]:
        path = Path(self.os_release_path)
        if not path.is_file():
            self.run_log.debug("%s not found", self.os_release_path)
            return None

        try:
            release = parse_os_release(path.read_text(encoding="utf-8"))
        except OSError as exc:
            self.run_log.debug("Could not read %s: %s", self.os_release_path, exc)
            return None

        os_id = release.get("ID", "").lower()
        if os_id in FAMILY_BY_ID:
            return FAMILY_BY_ID[os_id]

        os_id_like = release.get("ID_LIKE", "").lower()
        for marker, family in LIKE_MARKERS:
            if marker in os_id_like:
                return family

        return None

    def detect_from_binaries(self) -> Optional[Family]:
        for binary, family in FAMILY_BINARIES:
            if self.which(binary):
                return family
        return None
