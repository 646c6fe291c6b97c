"""Fixed paths, URLs and thresholds used across desksetup."""

OS_RELEASE_PATH = "/etc/os-release"
DEFAULT_LOG_DIR = "/var/log"
LOG_FILE_TEMPLATE = "setup_master_{timestamp}.log"
SNAPSHOT_FILE_TEMPLATE = "pkg_snapshot_{timestamp}.txt"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
DEFAULT_CONFIG_NAME = ".desksetup.yml"

LOG_FILE_MODE = 0o644

REQUIRED_TOOLS = ("curl",)
CONNECTIVITY_PROBE_URL = "https://dns.google"
CONNECTIVITY_TIMEOUT_SECONDS = 5
# df -k reports KiB; 5,000,000 KiB is the ~5 GB floor.
MIN_FREE_BYTES = 5_000_000 * 1024
ROOT_MOUNT = "/"

PACMAN_CONF = "/etc/pacman.conf"
PARALLEL_DOWNLOADS = 10
MULTILIB_INCLUDE = "Include = /etc/pacman.d/mirrorlist"
AUR_HELPERS = ("paru", "yay")

RPMFUSION_URLS = (
    "https://mirrors.rpmfusion.org/free/fedora/rpmfusion-free-release-{release}.noarch.rpm",
    "https://mirrors.rpmfusion.org/nonfree/fedora/rpmfusion-nonfree-release-{release}.noarch.rpm",
)
VIVALDI_REPO_FILE = "/etc/yum.repos.d/vivaldi.repo"
VIVALDI_REPO_URL = "https://repo.vivaldi.com/archive/vivaldi-fedora.repo"

REPO_RPMFUSION = "rpmfusion"
REPO_VIVALDI = "vivaldi"
COPR_HYPRLAND = "solopasha/hyprland"
COPR_DMS = "avengemedia/dms-git"
FEDORA_COPRS = (COPR_HYPRLAND, COPR_DMS)

FLATHUB_NAME = "flathub"
FLATHUB_URL = "https://flathub.org/repo/flathub.flatpakrepo"
FLATPAK_FILESYSTEM_OVERRIDES = ("xdg-config/gtk-4.0", "~/.themes")

POLKIT_RULE_FILE = "/etc/polkit-1/rules.d/90-corectrl.rules"
POLKIT_RULE = """polkit.addRule(function(action, subject) {
    if ((action.id == "org.corectrl.helper.init" || action.id == "org.corectrl.helperkiller.init") && subject.isInGroup("wheel")) {
        return polkit.Result.YES;
    }
});
"""

SERVICES_TO_ENABLE = ("sddm", "NetworkManager")
VERIFIED_SERVICE = "sddm"
