import logging
import os
from typing import Optional

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_NAME
from .core import DesktopSetup, SetupError, console
from .errors_catalog import actionable_error
from .models import Profile, RetryPolicy
from .services.config_loader import ConfigLoader
from .services.run_log import SkipTaggedRecords

MENU_CHOICES = {
    "1": Profile.HYPRLAND,
    "2": Profile.BASE,
}


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def prompt_profile() -> Optional[Profile]:
    console.print("\n[bold]DESKTOP SETUP[/bold]")
    console.print("1) Install Hyprland + DMS")
    console.print("2) Install base only")
    console.print("3) Exit")
    choice = click.prompt("Option", default="", show_default=False)
    return MENU_CHOICES.get(choice.strip())


_console_handler = RichHandler(rich_tracebacks=True, show_level=False, show_path=False)
_console_handler.addFilter(SkipTaggedRecords())

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[_console_handler],
)


@click.command()
@click.option("--dry-run", is_flag=True, default=None, help="Simulate the run without changing anything.")
@click.option(
    "--install",
    "profile",
    flag_value=Profile.HYPRLAND.value,
    help="Non-interactive install of the Hyprland + DMS desktop profile.",
)
@click.option(
    "--base",
    "profile",
    flag_value=Profile.BASE.value,
    help="Non-interactive install of the base profile only.",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_NAME} if present.",
)
@click.option("--log-dir", type=click.Path(), help="Directory for the run log and package snapshot.")
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
def main(dry_run, profile, config, log_dir, verbose):
    """Provision an Arch or Fedora based desktop. Must be run with sudo."""
    logger = logging.getLogger("desksetup")

    if os.geteuid() != 0:
        raise click.ClickException(actionable_error("not_root"))

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_NAME)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except SetupError as exc:
        raise click.ClickException(str(exc)) from exc

    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
    profile = _resolve_option(profile, config_values, "profile")
    log_dir = _resolve_option(log_dir, config_values, "log_dir")
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    retry_policy = RetryPolicy(
        max_attempts=int(config_values.get("retry_attempts", RetryPolicy.max_attempts)),
        delay_seconds=float(config_values.get("retry_delay_seconds", RetryPolicy.delay_seconds)),
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    setup = DesktopSetup(
        profile=Profile(profile) if profile else None,
        dry_run=dry_run,
        log_dir=log_dir,
        verbose=verbose,
        retry_policy=retry_policy,
        profile_chooser=prompt_profile,
    )

    raise SystemExit(setup.run())


if __name__ == "__main__":
    main()
