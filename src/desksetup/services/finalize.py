"""Post-install system configuration."""

import shutil
from typing import Callable, Optional

from desksetup.constants import (
    FLATHUB_NAME,
    FLATHUB_URL,
    FLATPAK_FILESYSTEM_OVERRIDES,
    POLKIT_RULE,
    POLKIT_RULE_FILE,
    SERVICES_TO_ENABLE,
    VERIFIED_SERVICE,
)
from desksetup.models import RunContext


class FinalizeService:
    """Applies Flatpak, polkit and service settings once packages are in place."""

    def __init__(
        self,
        runner,
        run_log,
        filesystem_service,
        polkit_rule_file: str = POLKIT_RULE_FILE,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        self.runner = runner
        self.run_log = run_log
        self.filesystem_service = filesystem_service
        self.polkit_rule_file = polkit_rule_file
        self.which = which

    def finalize(self, context: RunContext):
        self.run_log.info("Final adjustments...")
        if context.dry_run:
            self.run_log.dry("Would add the %s remote and apply Flatpak overrides", FLATHUB_NAME)
            self.run_log.dry("Would write %s", self.polkit_rule_file)
            self.run_log.dry("Would enable services: %s", ", ".join(SERVICES_TO_ENABLE))
            return

        self.configure_flatpak()
        self.write_polkit_rule(context.tmp_dir)
        self.enable_services()

    def configure_flatpak(self):
        if not self.which("flatpak"):
            self.run_log.warning("flatpak not found; skipping Flathub and overrides.")
            return

        if not self.runner.execute(["flatpak", "remote-add", "--if-not-exists", FLATHUB_NAME, FLATHUB_URL]):
            self.run_log.warning("Could not add the %s remote.", FLATHUB_NAME)

        for target in FLATPAK_FILESYSTEM_OVERRIDES:
            if not self.runner.execute(["flatpak", "override", f"--filesystem={target}"]):
                self.run_log.warning("Flatpak override for %s failed.", target)

    def write_polkit_rule(self, staging_dir: Optional[str] = None):
        try:
            self.filesystem_service.write_file(self.polkit_rule_file, POLKIT_RULE, staging_dir=staging_dir)
        except OSError as exc:
            self.run_log.error("Could not write %s: %s", self.polkit_rule_file, exc)
            return
        self.run_log.ok("Polkit rule written to %s", self.polkit_rule_file)

    def enable_services(self):
        for service in SERVICES_TO_ENABLE:
            if not self.runner.execute(["systemctl", "enable", service]):
                self.run_log.warning("Failed to enable %s", service)

        if self.runner.succeeds(["systemctl", "is-enabled", VERIFIED_SERVICE]):
            self.run_log.ok("Service %s is enabled.", VERIFIED_SERVICE)
        else:
            self.run_log.error("%s is not enabled.", VERIFIED_SERVICE)
