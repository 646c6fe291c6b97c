import pytest

from desksetup.errors import SetupError
from desksetup.models import Family
from desksetup.services.detection import DetectionService, parse_os_release


class DummyRunLog:
    def ok(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None


def _service(tmp_path, os_release=None, binaries=()):
    path = tmp_path / "os-release"
    if os_release is not None:
        path.write_text(os_release, encoding="utf-8")
    return DetectionService(
        run_log=DummyRunLog(),
        os_release_path=str(path),
        which=lambda name: f"/usr/bin/{name}" if name in binaries else None,
    )


@pytest.mark.parametrize(
    "os_id, expected",
    [
        ("arch", Family.ARCH),
        ("cachyos", Family.ARCH),
        ("manjaro", Family.ARCH),
        ("endeavouros", Family.ARCH),
        ("garuda", Family.ARCH),
        ("fedora", Family.FEDORA),
        ("rhel", Family.FEDORA),
        ("centos", Family.FEDORA),
        ("nobara", Family.FEDORA),
        ("ultramarine", Family.FEDORA),
    ],
)
def test_detect_system_maps_known_ids(tmp_path, os_id, expected):
    service = _service(tmp_path, os_release=f'NAME="Some Linux"\nID="{os_id}"\n')

    assert service.detect_system() == expected


def test_detect_system_falls_back_to_id_like(tmp_path):
    service = _service(tmp_path, os_release='ID=bazzite\nID_LIKE="rhel centos fedora"\n')

    assert service.detect_system() == Family.FEDORA


def test_detect_system_id_like_arch(tmp_path):
    service = _service(tmp_path, os_release="ID=artix\nID_LIKE=arch\n")

    assert service.detect_system() == Family.ARCH


def test_detect_system_falls_back_to_binaries(tmp_path):
    service = _service(tmp_path, os_release="ID=mystery\n", binaries=("dnf",))

    assert service.detect_system() == Family.FEDORA


def test_detect_system_without_os_release_uses_binaries(tmp_path):
    service = _service(tmp_path, os_release=None, binaries=("pacman",))

    assert service.detect_system() == Family.ARCH


def test_os_release_id_wins_over_binaries(tmp_path):
    service = _service(tmp_path, os_release="ID=fedora\n", binaries=("pacman",))

    assert service.detect_system() == Family.FEDORA


def test_detect_system_fails_for_unknown_host(tmp_path):
    service = _service(tmp_path, os_release="ID=debian\nID_LIKE=ubuntu\n")

    with pytest.raises(SetupError, match="Unsupported distribution"):
        service.detect_system()


def test_parse_os_release_handles_quotes_and_comments():
    parsed = parse_os_release('# comment\n\nID="fedora"\nVERSION_ID=41\nPRETTY_NAME=\'Fedora Linux 41\'\n')

    assert parsed == {"ID": "fedora", "VERSION_ID": "41", "PRETTY_NAME": "Fedora Linux 41"}


def test_fedora_wins_when_both_binaries_present(tmp_path):
    service = _service(tmp_path, os_release=None, binaries=("pacman", "dnf"))

    assert service.detect_system() == Family.FEDORA


def test_fedora_wins_when_id_like_names_both(tmp_path):
    service = _service(tmp_path, os_release='ID=hybrid\nID_LIKE="arch fedora"\n')

    assert service.detect_system() == Family.FEDORA
