"""Pre-flight checks run before any system change."""

import shutil
from pathlib import Path
from typing import Callable, Optional, Sequence

import requests

from desksetup.constants import (
    CONNECTIVITY_PROBE_URL,
    CONNECTIVITY_TIMEOUT_SECONDS,
    MIN_FREE_BYTES,
    REQUIRED_TOOLS,
    ROOT_MOUNT,
)
from desksetup.errors import SetupError
from desksetup.errors_catalog import actionable_error
from desksetup.models import RunContext

SNAPSHOT_COMMANDS = (
    ["pacman", "-Q"],
    ["rpm", "-qa"],
)


class PreflightService:
    """Validates tools, connectivity and disk space, and snapshots packages."""

    def __init__(
        self,
        runner,
        run_log,
        requests_module=requests,
        which: Callable[[str], Optional[str]] = shutil.which,
        required_tools: Sequence[str] = REQUIRED_TOOLS,
        probe_url: str = CONNECTIVITY_PROBE_URL,
        min_free_bytes: int = MIN_FREE_BYTES,
        root_mount: str = ROOT_MOUNT,
    ):
        self.runner = runner
        self.run_log = run_log
        self.requests = requests_module
        self.which = which
        self.required_tools = tuple(required_tools)
        self.probe_url = probe_url
        self.min_free_bytes = min_free_bytes
        self.root_mount = root_mount

    def check_system_health(self, context: RunContext):
        self.run_log.info("Checking system...")

        for tool in self.required_tools:
            if not self.which(tool):
                raise SetupError(actionable_error("missing_tool", tool=tool))

        if not context.dry_run:
            self.ensure_network()
            self.ensure_disk_space()

        self.run_log.ok("System healthy.")

    def ensure_network(self):
        last_error: Optional[Exception] = None
        for method in ("HEAD", "GET"):
            try:
                response = self.requests.request(
                    method,
                    self.probe_url,
                    allow_redirects=True,
                    timeout=CONNECTIVITY_TIMEOUT_SECONDS,
                    stream=(method == "GET"),
                )
                response.raise_for_status()
                response.close()
                return
            except self.requests.RequestException as exc:
                last_error = exc

        self.run_log.debug("Connectivity probe failed: %s", last_error)
        raise SetupError(actionable_error("no_network", target=self.probe_url))

    def ensure_disk_space(self):
        free = shutil.disk_usage(self.root_mount).free
        if free < self.min_free_bytes:
            raise SetupError(
                actionable_error(
                    "low_disk",
                    path=self.root_mount,
                    free_gb=f"{free / 1024 ** 3:.1f}",
                    required_gb=f"{self.min_free_bytes / 1024 ** 3:.1f}",
                )
            )

    def take_snapshot(self, context: RunContext):
        if context.dry_run:
            return

        self.run_log.info("Creating package snapshot...")
        cmd = next((cmd for cmd in SNAPSHOT_COMMANDS if self.which(cmd[0])), None)
        if cmd is None:
            self.run_log.warning("No package query tool found; snapshot skipped.")
            return

        try:
            result = self.runner.run(cmd, check=True, capture_output=True)
            Path(context.snapshot_file).write_text(result.stdout or "", encoding="utf-8")
        except (SetupError, OSError) as exc:
            self.run_log.warning("Could not create package snapshot: %s", exc)
            return

        self.run_log.ok("Snapshot saved to %s", context.snapshot_file)
