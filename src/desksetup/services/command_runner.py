"""Subprocess execution service for desksetup."""

import subprocess
import time
from typing import List, Optional

from desksetup.errors import SetupError
from desksetup.models import RetryPolicy


class CommandRunner:
    """Runs external commands with consistent error handling and dry-run support."""

    def __init__(self, logger, dry_run: bool = False, retry_policy: Optional[RetryPolicy] = None):
        self.logger = logger
        self.dry_run = dry_run
        self.retry_policy = retry_policy or RetryPolicy()

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        policy: Optional[RetryPolicy] = None,
    ) -> subprocess.CompletedProcess:
        """Runs ``cmd``; with a ``policy`` a non-zero exit is retried after a fixed delay."""
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        max_attempts = max(1, policy.max_attempts) if policy else 1
        for attempt in range(1, max_attempts + 1):
            try:
                result = subprocess.run(cmd, text=True, capture_output=capture_output)
            except FileNotFoundError as exc:
                raise SetupError(
                    f"Required command not found: {cmd[0]}. Please install it and try again."
                ) from exc
            except OSError as exc:
                raise SetupError(f"Failed to execute command: {cmd_str}. {exc}") from exc

            if capture_output and result.stdout:
                self.logger.debug("Command output: %s", result.stdout.strip())

            if result.returncode == 0:
                return result

            if attempt < max_attempts:
                self.logger.warning(
                    "Attempt %s/%s failed. Retrying in %.1fs: %s",
                    attempt,
                    max_attempts,
                    policy.delay_seconds,
                    cmd_str,
                )
                time.sleep(policy.delay_seconds)
                continue

            stderr = (result.stderr or "").strip() if capture_output else ""
            message = f"Command failed ({result.returncode}): {cmd_str}"
            if stderr:
                message = f"{message}\n{stderr}"

            if check:
                raise SetupError(message)

            self.logger.debug(message)
            return result

    def execute(self, cmd: List[str]) -> bool:
        """Runs a mutating command once, or only announces it in dry-run."""
        if self.dry_run:
            self.logger.dry("Would run: %s", " ".join(cmd))
            return True

        try:
            result = self.run(cmd, check=False)
        except SetupError as exc:
            self.logger.warning(str(exc))
            return False
        return result.returncode == 0

    def retry(self, cmd: List[str], policy: Optional[RetryPolicy] = None) -> bool:
        """Runs a network-bound command under a bounded retry policy."""
        policy = policy or self.retry_policy
        if self.dry_run:
            self.logger.dry("Would run (with retry): %s", " ".join(cmd))
            return True

        try:
            result = self.run(cmd, check=False, policy=policy)
        except SetupError as exc:
            self.logger.warning(str(exc))
            return False
        return result.returncode == 0

    def succeeds(self, cmd: List[str]) -> bool:
        """Read-only probe: True when the command exits 0, quietly."""
        try:
            result = self.run(cmd, check=False, capture_output=True)
        except SetupError:
            return False
        return result.returncode == 0
