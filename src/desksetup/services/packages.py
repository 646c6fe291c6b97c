"""Package reconciliation against the per-profile catalog."""

from typing import AbstractSet, List, Sequence

from desksetup.catalog import AUX_CHECK_COMMAND, NATIVE_COMMANDS, aux_install_command, select_groups
from desksetup.models import PackageGroup, PackageSource, PackageSpec, ResultLedger, RunContext

NO_AUR_HELPER = "no AUR helper"


class PackageService:
    """Installs missing packages and records every outcome in the ledger."""

    def __init__(self, runner, run_log):
        self.runner = runner
        self.run_log = run_log

    def reconcile(
        self,
        context: RunContext,
        ledger: ResultLedger,
        unavailable_repos: AbstractSet[str] = frozenset(),
    ):
        self.run_log.info("Starting profile: %s", context.profile.value)
        native_install, native_check = NATIVE_COMMANDS[context.family]

        for group in select_groups(context.family, context.profile):
            if group.source == PackageSource.NATIVE:
                self.install_list(
                    native_install,
                    native_check,
                    group.packages,
                    ledger,
                    context.dry_run,
                    unavailable_repos,
                )
            elif context.aux_helper:
                self.install_list(
                    aux_install_command(context.real_user, context.aux_helper),
                    AUX_CHECK_COMMAND,
                    group.packages,
                    ledger,
                    context.dry_run,
                    unavailable_repos,
                )
            else:
                self.skip_group(group, ledger, NO_AUR_HELPER)

    def install_list(
        self,
        install_cmd: List[str],
        check_cmd: List[str],
        packages: Sequence[PackageSpec],
        ledger: ResultLedger,
        dry_run: bool = False,
        unavailable_repos: AbstractSet[str] = frozenset(),
    ):
        total = len(packages)
        for current, package in enumerate(packages, start=1):
            name = package.name
            if not dry_run and self.runner.succeeds(check_cmd + [name]):
                self.run_log.ok("[%s/%s] %s already installed.", current, total, name)
                ledger.record_installed(name)
                continue

            if package.requires_repo and package.requires_repo in unavailable_repos:
                self.run_log.warning(
                    "[%s/%s] Skipping %s: repository %s is unavailable.",
                    current,
                    total,
                    name,
                    package.requires_repo,
                )
                ledger.record_skipped(name, f"{package.requires_repo} unavailable")
                continue

            self.run_log.info("[%s/%s] Installing: %s", current, total, name)
            if self.runner.execute(install_cmd + [name]):
                ledger.record_installed(name)
            else:
                self.run_log.error("Failed to install %s", name)
                ledger.record_failed(name)

    def skip_group(self, group: PackageGroup, ledger: ResultLedger, reason: str):
        names = " ".join(package.name for package in group.packages)
        self.run_log.warning("Skipping %s (%s): %s", group.name, reason, names)
        for package in group.packages:
            ledger.record_skipped(package.name, reason)
