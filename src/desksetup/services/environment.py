"""Family-specific package manager and repository configuration."""

import os
import re
from pathlib import Path
from typing import List, Optional, Set, Tuple

from desksetup.constants import (
    AUR_HELPERS,
    FEDORA_COPRS,
    MULTILIB_INCLUDE,
    PACMAN_CONF,
    PARALLEL_DOWNLOADS,
    REPO_RPMFUSION,
    REPO_VIVALDI,
    RPMFUSION_URLS,
    VIVALDI_REPO_FILE,
    VIVALDI_REPO_URL,
)
from desksetup.errors import SetupError
from desksetup.models import ConfigurationResult, Family, RunContext

_COLOR_RE = re.compile(r"^#Color[ \t]*$", re.MULTILINE)
_PARALLEL_RE = re.compile(r"^#[ \t]*ParallelDownloads[ \t]*=[ \t]*\d+[ \t]*$", re.MULTILINE)
_MULTILIB_RE = re.compile(r"^\[multilib\][ \t]*$", re.MULTILINE)


def tune_pacman_conf(text: str) -> Tuple[str, List[str]]:
    """Applies the pacman.conf tweaks that are not already in place."""
    changes = []

    if _COLOR_RE.search(text):
        text = _COLOR_RE.sub("Color\nILoveCandy", text, count=1)
        changes.append("enabled Color and ILoveCandy")

    if _PARALLEL_RE.search(text):
        text = _PARALLEL_RE.sub(f"ParallelDownloads = {PARALLEL_DOWNLOADS}", text, count=1)
        changes.append(f"set ParallelDownloads = {PARALLEL_DOWNLOADS}")

    if not _MULTILIB_RE.search(text):
        if text and not text.endswith("\n"):
            text += "\n"
        text += f"\n[multilib]\n{MULTILIB_INCLUDE}\n"
        changes.append("added [multilib] repository")

    return text, changes


class EnvironmentService:
    """Prepares package manager sources before packages are installed."""

    def __init__(
        self,
        runner,
        run_log,
        filesystem_service,
        pacman_conf: str = PACMAN_CONF,
        vivaldi_repo_file: str = VIVALDI_REPO_FILE,
    ):
        self.runner = runner
        self.run_log = run_log
        self.filesystem_service = filesystem_service
        self.pacman_conf = pacman_conf
        self.vivaldi_repo_file = vivaldi_repo_file

    def configure(self, context: RunContext) -> ConfigurationResult:
        if context.family == Family.ARCH:
            return self.setup_arch_env(context)
        if context.family == Family.FEDORA:
            return self.setup_fedora_env(context)
        raise ValueError(f"Unsupported family: {context.family}")

    def setup_arch_env(self, context: RunContext) -> ConfigurationResult:
        self.run_log.info("Configuring Arch...")
        if context.dry_run:
            self.run_log.dry("Would back up and tune %s", self.pacman_conf)
            self.run_log.dry("Would refresh archlinux-keyring and upgrade the system")
            self.run_log.dry("Would look for an AUR helper (%s)", ", ".join(AUR_HELPERS))
            return ConfigurationResult()

        self.tune_pacman(context.timestamp)

        self.run_log.info("Updating system...")
        if not self.runner.retry(["pacman", "-Sy", "--noconfirm", "archlinux-keyring"]):
            self.run_log.warning("Keyring refresh failed after retries.")
        if not self.runner.retry(["pacman", "-Syu", "--noconfirm"]):
            self.run_log.warning("System upgrade failed after retries.")

        helper = self.find_aur_helper(context.real_user)
        if helper is None:
            self.run_log.warning("No AUR helper found (%s).", "/".join(AUR_HELPERS))
            self.run_log.warning("AUR packages (e.g. Vivaldi, Cava) will be SKIPPED.")
        else:
            self.run_log.ok("AUR helper found: %s", helper)

        return ConfigurationResult(aux_helper=helper)

    def tune_pacman(self, timestamp: str):
        if not os.path.exists(self.pacman_conf):
            self.run_log.warning("%s not found; skipping pacman tuning.", self.pacman_conf)
            return

        backup = self.filesystem_service.backup_file(self.pacman_conf, timestamp)
        self.run_log.info("Backup saved to %s", backup)

        path = Path(self.pacman_conf)
        original = path.read_text(encoding="utf-8")
        tuned, changes = tune_pacman_conf(original)
        if not changes:
            self.run_log.ok("%s already tuned.", self.pacman_conf)
            return

        path.write_text(tuned, encoding="utf-8")
        for change in changes:
            self.run_log.ok("pacman.conf: %s", change)

    def find_aur_helper(self, real_user: str) -> Optional[str]:
        for helper in AUR_HELPERS:
            probe = ["sudo", "-u", real_user, "sh", "-c", 'command -v "$1"', "sh", helper]
            if self.runner.succeeds(probe):
                return helper
        return None

    def setup_fedora_env(self, context: RunContext) -> ConfigurationResult:
        self.run_log.info("Configuring Fedora...")
        if context.dry_run:
            self.run_log.dry("Would install RPM Fusion free and nonfree release packages")
            self.run_log.dry("Would add the Vivaldi repository if missing")
            self.run_log.dry("Would enable COPRs: %s", ", ".join(FEDORA_COPRS))
            self.run_log.dry("Would run a full system update")
            return ConfigurationResult()

        unavailable: Set[str] = set()

        if not self.install_rpmfusion():
            unavailable.add(REPO_RPMFUSION)

        if os.path.exists(self.vivaldi_repo_file):
            self.run_log.ok("Vivaldi repository already configured.")
        elif not self.runner.execute(["dnf", "config-manager", "--add-repo", VIVALDI_REPO_URL]):
            self.run_log.warning("Could not add the Vivaldi repository.")
            unavailable.add(REPO_VIVALDI)

        self.run_log.info("Configuring COPRs...")
        for copr in FEDORA_COPRS:
            if not self.runner.execute(["dnf", "copr", "enable", "-y", copr]):
                self.run_log.warning("COPR %s failed.", copr)
                unavailable.add(copr)

        if not self.runner.retry(["dnf", "update", "-y"]):
            self.run_log.warning("System update failed after retries.")

        return ConfigurationResult(unavailable_repos=frozenset(unavailable))

    def install_rpmfusion(self) -> bool:
        release = self.fedora_release()
        if release is None:
            self.run_log.warning("Could not determine the Fedora release; RPM Fusion skipped.")
            return False

        urls = [url.format(release=release) for url in RPMFUSION_URLS]
        if not self.runner.execute(["dnf", "install", "-y"] + urls):
            self.run_log.warning("RPM Fusion installation failed.")
            return False
        return True

    def fedora_release(self) -> Optional[str]:
        try:
            result = self.runner.run(["rpm", "-E", "%fedora"], check=False, capture_output=True)
        except SetupError as exc:
            self.run_log.debug("rpm release query failed: %s", exc)
            return None

        release = (result.stdout or "").strip()
        if result.returncode != 0 or not release.isdigit():
            return None
        return release
