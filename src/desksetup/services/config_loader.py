"""Configuration loader for desksetup."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from desksetup.errors import SetupError
from desksetup.models import Profile


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "dry_run",
        "profile",
        "log_dir",
        "verbose",
        "retry_attempts",
        "retry_delay_seconds",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise SetupError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise SetupError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise SetupError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise SetupError(f"Unknown configuration keys: {unknown_list}")

        profile = parsed.get("profile")
        if profile is not None and profile not in {item.value for item in Profile}:
            choices = ", ".join(item.value for item in Profile)
            raise SetupError(f"Invalid profile '{profile}'. Supported profiles: {choices}")

        attempts = parsed.get("retry_attempts")
        if attempts is not None and (isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1):
            raise SetupError(f"Invalid retry_attempts '{attempts}'. Expected an integer of at least 1.")

        delay = parsed.get("retry_delay_seconds")
        if delay is not None and (isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0):
            raise SetupError(f"Invalid retry_delay_seconds '{delay}'. Expected a non-negative number.")

        return parsed
