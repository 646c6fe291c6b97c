"""Actionable error catalog for desksetup."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "not_root": {
        "what": "desksetup must run with administrative privileges.",
        "next": "Re-run the command with `sudo`.",
    },
    "missing_tool": {
        "what": "Required command '{tool}' was not found.",
        "next": "Install '{tool}' with your package manager and retry.",
    },
    "no_network": {
        "what": "No internet connection ({target} is unreachable).",
        "next": "Check your network connection, or use `--dry-run` to preview the run offline.",
    },
    "low_disk": {
        "what": "Insufficient free space on {path}: {free_gb} GB available, {required_gb} GB required.",
        "next": "Free up disk space on {path} and retry.",
    },
    "unsupported_distro": {
        "what": "Unsupported distribution.",
        "next": "Only Arch-based and Fedora-based systems are supported.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
