import logging
import os
import tempfile
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

import click
from rich.console import Console

from .constants import (
    DEFAULT_LOG_DIR,
    LOG_FILE_MODE,
    LOG_FILE_TEMPLATE,
    SNAPSHOT_FILE_TEMPLATE,
    TIMESTAMP_FORMAT,
)
from .errors import SetupError
from .models import Profile, ResultLedger, RetryPolicy, RunContext, Stage
from .services.command_runner import CommandRunner
from .services.detection import DetectionService
from .services.environment import EnvironmentService
from .services.filesystem import FileSystemService
from .services.finalize import FinalizeService
from .services.packages import PackageService
from .services.preflight import PreflightService
from .services.report import ReportService
from .services.run_log import RunLogger, attach_log_file, detach_log_file

console = Console()
logger = logging.getLogger("desksetup")


def resolve_real_user() -> str:
    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user:
        return sudo_user
    try:
        return os.getlogin()
    except OSError:
        return "root"


class DesktopSetup:
    def __init__(
        self,
        profile: Optional[Profile] = None,
        dry_run: bool = False,
        log_dir: Optional[str] = None,
        verbose: bool = False,
        retry_policy: Optional[RetryPolicy] = None,
        profile_chooser: Optional[Callable[[], Optional[Profile]]] = None,
        real_user: Optional[str] = None,
    ):
        self.profile = profile
        self.dry_run = dry_run
        self.verbose = verbose
        self.log_dir = log_dir or DEFAULT_LOG_DIR
        self.retry_policy = retry_policy or RetryPolicy()
        self.profile_chooser = profile_chooser

        timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        self.context = RunContext(
            dry_run=dry_run,
            real_user=real_user or resolve_real_user(),
            timestamp=timestamp,
            log_file=os.path.join(self.log_dir, LOG_FILE_TEMPLATE.format(timestamp=timestamp)),
            snapshot_file=os.path.join(self.log_dir, SNAPSHOT_FILE_TEMPLATE.format(timestamp=timestamp)),
            tmp_dir="",
        )
        self.ledger = ResultLedger()
        self.stage = Stage.START
        self.log_handler: Optional[logging.Handler] = None

        self.run_log = RunLogger(logger=logger, console=console)
        self.command_runner = CommandRunner(
            logger=self.run_log,
            dry_run=dry_run,
            retry_policy=self.retry_policy,
        )
        self.filesystem_service = FileSystemService(logger=self.run_log)
        self.preflight_service = PreflightService(runner=self.command_runner, run_log=self.run_log)
        self.detection_service = DetectionService(run_log=self.run_log)
        self.environment_service = EnvironmentService(
            runner=self.command_runner,
            run_log=self.run_log,
            filesystem_service=self.filesystem_service,
        )
        self.package_service = PackageService(runner=self.command_runner, run_log=self.run_log)
        self.finalize_service = FinalizeService(
            runner=self.command_runner,
            run_log=self.run_log,
            filesystem_service=self.filesystem_service,
        )
        self.report_service = ReportService(console=console)

    def _open_session(self):
        os.makedirs(self.log_dir, exist_ok=True)
        logger.setLevel(logging.DEBUG if self.verbose else logging.INFO)
        self.log_handler = attach_log_file(logger, self.context.log_file, verbose=self.verbose)
        tmp_dir = tempfile.mkdtemp(prefix="desksetup.")
        self.context = replace(self.context, tmp_dir=tmp_dir)

        if self.context.real_user == "root":
            self.run_log.warning("Running directly as root (chroot?).")

    def _run_step(self, stage: Stage, callback, *args, **kwargs):
        logger.debug("Entering step towards stage '%s'", stage.value)
        result = callback(*args, **kwargs)
        self.stage = stage
        return result

    def check_system(self):
        self.preflight_service.check_system_health(self.context)
        self.preflight_service.take_snapshot(self.context)

    def detect_system(self):
        family = self.detection_service.detect_system()
        self.context = replace(self.context, family=family)

    def choose_profile(self) -> Optional[Profile]:
        if self.profile is not None:
            return self.profile
        if self.profile_chooser is None:
            return None
        return self.profile_chooser()

    def configure_environment(self):
        configuration = self.environment_service.configure(self.context)
        self.context = replace(self.context, aux_helper=configuration.aux_helper)
        return configuration

    def reconcile_packages(self, unavailable_repos):
        self.package_service.reconcile(self.context, self.ledger, unavailable_repos=unavailable_repos)

    def finalize(self):
        self.finalize_service.finalize(self.context)

    def show_report(self):
        self.report_service.show_report(self.ledger, self.context.log_file)

    def cleanup(self):
        if self.context.tmp_dir:
            self.filesystem_service.cleanup_dir(self.context.tmp_dir)

        if os.path.isfile(self.context.log_file) and self.context.real_user != "root":
            self.filesystem_service.set_owner(self.context.log_file, user="root", group=self.context.real_user)
            self.filesystem_service.set_permissions(self.context.log_file, LOG_FILE_MODE)

        detach_log_file(logger, self.log_handler)
        self.log_handler = None

    def run(self) -> int:
        exit_code = 1

        try:
            self._open_session()
            if self.dry_run:
                console.print("[bold yellow]!!! DRY-RUN MODE ACTIVE - NO CHANGES WILL BE MADE !!![/bold yellow]")

            self._run_step(Stage.VALIDATED, self.check_system)
            self._run_step(Stage.DETECTED, self.detect_system)

            profile = self.choose_profile()
            if profile is None:
                self.run_log.info("No profile selected. Exiting.")
                exit_code = 0
                return exit_code
            self.context = replace(self.context, profile=profile)

            configuration = self._run_step(Stage.CONFIGURED, self.configure_environment)
            self._run_step(Stage.RECONCILED, self.reconcile_packages, configuration.unavailable_repos)
            self._run_step(Stage.FINALIZED, self.finalize)
            self._run_step(Stage.REPORTED, self.show_report)
            exit_code = 0
            return exit_code

        except (KeyboardInterrupt, click.Abort):
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            exit_code = 1
            return exit_code
        except SetupError as exc:
            self.run_log.error(str(exc))
            exit_code = 1
            return exit_code
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            exit_code = 1
            return exit_code
        finally:
            self.cleanup()
