import os
import stat

import pytest

from cwagent_testkit.permissions import (
    FilePermission,
    FilePermissionError,
    check_file_owner_rights,
    check_file_rights,
    file_has_permission,
    get_file_group_name,
    get_file_owner_user_name,
    get_file_stat_permission,
)


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("data")
    return path


def test_stat_permission_holds_mode_bits(sample):
    os.chmod(sample, 0o640)
    mode = get_file_stat_permission(sample)
    assert stat.S_IMODE(mode) == 0o640
    assert stat.S_ISREG(mode)


def test_permission_masks_match_stat_bits():
    assert FilePermission.OWNER_WRITE.mask == stat.S_IWUSR
    assert FilePermission("AnyoneWrite") is FilePermission.ANYONE_WRITE


@pytest.mark.parametrize(
    "mode, permission, expected",
    [
        (0o600, FilePermission.OWNER_WRITE, True),
        (0o600, FilePermission.ANYONE_WRITE, False),
        (0o620, FilePermission.GROUP_WRITE, True),
        (0o604, FilePermission.ANYONE_READ, True),
        (0o200, FilePermission.OWNER_READ, False),
    ],
)
def test_file_has_permission(sample, mode, permission, expected):
    os.chmod(sample, mode)
    assert file_has_permission(sample, permission) is expected


def test_missing_file_raises(tmp_path):
    missing = tmp_path / "absent"
    with pytest.raises(FilePermissionError, match="cannot get file's stat"):
        get_file_stat_permission(missing)
    with pytest.raises(FilePermissionError):
        file_has_permission(missing, FilePermission.OWNER_READ)
    with pytest.raises(FilePermissionError):
        get_file_owner_user_name(missing)
    with pytest.raises(FilePermissionError):
        get_file_group_name(missing)


def test_owner_and_group_are_consistent(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.write_text("a")
    second.write_text("b")
    assert get_file_owner_user_name(first) == get_file_owner_user_name(second)
    assert get_file_group_name(first) == get_file_group_name(second)


@pytest.mark.parametrize("mode", [0o400, 0o200, 0o000, 0o500])
def test_check_file_rights_rejects_missing_read_or_write(sample, mode):
    os.chmod(sample, mode)
    with pytest.raises(FilePermissionError, match="does not have enough permission"):
        check_file_rights(sample)


def test_check_file_rights_accepts_read_write_then_rejects(sample):
    os.chmod(sample, 0o600)
    check_file_rights(sample)
    os.chmod(sample, 0o400)
    with pytest.raises(FilePermissionError):
        check_file_rights(sample)


def test_check_file_owner_rights_wrong_owner(sample):
    owner = get_file_owner_user_name(sample)
    check_file_owner_rights(sample, owner)
    with pytest.raises(FilePermissionError, match="owner does not have permission"):
        check_file_owner_rights(sample, owner + "-other")


def test_check_file_owner_rights_missing_file(tmp_path):
    with pytest.raises(FilePermissionError, match="cannot look up file owner's name"):
        check_file_owner_rights(tmp_path / "absent", "root")