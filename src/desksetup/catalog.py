"""Package lists per distribution family and installation profile."""

from typing import Dict, List, Optional, Tuple

from desksetup.constants import COPR_DMS, REPO_RPMFUSION, REPO_VIVALDI
from desksetup.models import Family, PackageGroup, PackageSource, PackageSpec, Profile


def _specs(*names: str, repo: Optional[str] = None) -> Tuple[PackageSpec, ...]:
    return tuple(PackageSpec(name=name, requires_repo=repo) for name in names)


ARCH_BASE = PackageGroup(
    name="arch-base",
    source=PackageSource.NATIVE,
    packages=_specs(
        "git",
        "base-devel",
        "neovim",
        "zsh",
        "wget",
        "curl",
        "htop",
        "steam",
        "corectrl",
        "flatpak",
        "sddm",
        "networkmanager",
    ),
)

ARCH_AUR_BASE = PackageGroup(
    name="aur-base",
    source=PackageSource.AUXILIARY,
    packages=_specs("vivaldi", "vivaldi-ffmpeg-codecs"),
)

ARCH_HYPRLAND = PackageGroup(
    name="arch-hyprland",
    source=PackageSource.NATIVE,
    packages=_specs(
        "hyprland",
        "nautilus",
        "qt5ct",
        "qt6ct",
        "cliphist",
        "xdg-desktop-portal-hyprland",
    ),
)

ARCH_AUR_HYPRLAND = PackageGroup(
    name="aur-hyprland",
    source=PackageSource.AUXILIARY,
    packages=_specs("dms-shell-git", "quickshell-git", "matugen-bin", "cava"),
)

FEDORA_BASE = PackageGroup(
    name="fedora-base",
    source=PackageSource.NATIVE,
    packages=(
        _specs("git", "neovim", "zsh", "wget", "curl", "htop")
        + _specs("vivaldi-stable", repo=REPO_VIVALDI)
        + _specs("steam", repo=REPO_RPMFUSION)
        + _specs("corectrl", "flatpak", "sddm", "NetworkManager")
    ),
)

FEDORA_HYPRLAND = PackageGroup(
    name="fedora-hyprland",
    source=PackageSource.NATIVE,
    packages=(
        # Only COPR-exclusive packages are tagged; the rest are also in the Fedora repos.
        _specs("hyprland", "nautilus", "qt5ct", "qt6ct", "cliphist", "xdg-desktop-portal-hyprland")
        + _specs("dms", "quickshell-git", repo=COPR_DMS)
        + _specs("matugen", "cava")
    ),
)

PROFILE_GROUPS: Dict[Tuple[Family, Profile], Tuple[PackageGroup, ...]] = {
    (Family.ARCH, Profile.BASE): (ARCH_BASE, ARCH_AUR_BASE),
    (Family.ARCH, Profile.HYPRLAND): (ARCH_BASE, ARCH_AUR_BASE, ARCH_HYPRLAND, ARCH_AUR_HYPRLAND),
    (Family.FEDORA, Profile.BASE): (FEDORA_BASE,),
    (Family.FEDORA, Profile.HYPRLAND): (FEDORA_BASE, FEDORA_HYPRLAND),
}

NATIVE_COMMANDS: Dict[Family, Tuple[List[str], List[str]]] = {
    Family.ARCH: (["pacman", "-S", "--needed", "--noconfirm"], ["pacman", "-Qi"]),
    Family.FEDORA: (["dnf", "install", "-y"], ["rpm", "-q"]),
}

AUX_CHECK_COMMAND = ["pacman", "-Qi"]


def select_groups(family: Family, profile: Profile) -> Tuple[PackageGroup, ...]:
    return PROFILE_GROUPS[(family, profile)]


def aux_install_command(real_user: str, helper: str) -> List[str]:
    return ["sudo", "-u", real_user, helper, "-S", "--needed", "--noconfirm"]
