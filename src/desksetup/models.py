"""Shared domain models for desksetup."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class Family(str, Enum):
    ARCH = "arch"
    FEDORA = "fedora"


class Profile(str, Enum):
    BASE = "base"
    HYPRLAND = "hyprland"


class PackageSource(str, Enum):
    NATIVE = "native"
    AUXILIARY = "auxiliary"


class Stage(str, Enum):
    START = "start"
    VALIDATED = "validated"
    DETECTED = "detected"
    CONFIGURED = "configured"
    RECONCILED = "reconciled"
    FINALIZED = "finalized"
    REPORTED = "reported"


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay_seconds: float = 2.0


@dataclass(frozen=True)
class RunContext:
    """Runtime facts shared by every stage of a single run."""

    dry_run: bool
    real_user: str
    timestamp: str
    log_file: str
    snapshot_file: str
    tmp_dir: str
    family: Optional[Family] = None
    profile: Optional[Profile] = None
    aux_helper: Optional[str] = None


@dataclass(frozen=True)
class PackageSpec:
    name: str
    requires_repo: Optional[str] = None


@dataclass(frozen=True)
class PackageGroup:
    name: str
    source: PackageSource
    packages: Tuple[PackageSpec, ...]


@dataclass(frozen=True)
class ConfigurationResult:
    aux_helper: Optional[str] = None
    unavailable_repos: FrozenSet[str] = frozenset()


@dataclass
class ResultLedger:
    """Partitions every attempted package into installed, failed or skipped."""

    installed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    skip_reasons: Dict[str, str] = field(default_factory=dict)

    def record_installed(self, name: str):
        self._ensure_unrecorded(name)
        self.installed.append(name)

    def record_failed(self, name: str):
        self._ensure_unrecorded(name)
        self.failed.append(name)

    def record_skipped(self, name: str, reason: str):
        self._ensure_unrecorded(name)
        self.skipped.append(name)
        self.skip_reasons[name] = reason

    @property
    def total(self) -> int:
        return len(self.installed) + len(self.failed) + len(self.skipped)

    def _ensure_unrecorded(self, name: str):
        if name in self.installed or name in self.failed or name in self.skipped:
            raise ValueError(f"Package already recorded in the ledger: {name}")
