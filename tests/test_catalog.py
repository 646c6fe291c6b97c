import pytest

from desksetup.catalog import PROFILE_GROUPS, aux_install_command, select_groups
from desksetup.models import Family, PackageSource, Profile


def _names(groups):
    return [package.name for group in groups for package in group.packages]


@pytest.mark.parametrize("family", list(Family))
@pytest.mark.parametrize("profile", list(Profile))
def test_every_family_and_profile_has_groups(family, profile):
    assert select_groups(family, profile)


@pytest.mark.parametrize("key", list(PROFILE_GROUPS))
def test_package_names_are_unique_per_profile(key):
    names = _names(PROFILE_GROUPS[key])

    assert len(names) == len(set(names))


def test_hyprland_profile_extends_base_profile():
    for family in Family:
        base = _names(select_groups(family, Profile.BASE))
        extended = _names(select_groups(family, Profile.HYPRLAND))

        assert extended[: len(base)] == base
        assert len(extended) > len(base)


def test_arch_groups_are_ordered_native_then_aur():
    groups = select_groups(Family.ARCH, Profile.HYPRLAND)

    assert [group.source for group in groups] == [
        PackageSource.NATIVE,
        PackageSource.AUXILIARY,
        PackageSource.NATIVE,
        PackageSource.AUXILIARY,
    ]
    assert groups[0].packages[0].name == "git"
    assert groups[1].packages[0].name == "vivaldi"


def test_fedora_has_no_auxiliary_groups():
    for profile in Profile:
        assert all(group.source == PackageSource.NATIVE for group in select_groups(Family.FEDORA, profile))


def test_fedora_copr_packages_declare_their_repository():
    requirements = {
        package.name: package.requires_repo
        for group in select_groups(Family.FEDORA, Profile.HYPRLAND)
        for package in group.packages
    }

    assert requirements["hyprland"] is None
    assert requirements["xdg-desktop-portal-hyprland"] is None
    assert requirements["dms"] == "avengemedia/dms-git"
    assert requirements["quickshell-git"] == "avengemedia/dms-git"
    assert requirements["vivaldi-stable"] == "vivaldi"
    assert requirements["steam"] == "rpmfusion"
    assert requirements["git"] is None


def test_aux_install_command_runs_helper_as_real_user():
    assert aux_install_command("alice", "yay") == ["sudo", "-u", "alice", "yay", "-S", "--needed", "--noconfirm"]
