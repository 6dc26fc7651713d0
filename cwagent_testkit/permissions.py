"""Checks on the ownership and mode bits of files."""

from __future__ import annotations

import grp
import os
import pwd
import stat
from enum import Enum


class FilePermissionError(Exception):
    """Raised when a file's permissions cannot be read or are not as required."""


class FilePermission(str, Enum):
    """A single permission bit of a file's mode."""

    OWNER_WRITE = "OwnerWrite"
    GROUP_WRITE = "GroupWrite"
    ANYONE_WRITE = "AnyoneWrite"
    OWNER_READ = "OwnerRead"
    ANYONE_READ = "AnyoneRead"

    @property
    def mask(self) -> int:
        """The mode bit this permission stands for."""
        return _MASKS[self]

    def __str__(self) -> str:
        return self.value


_MASKS = {
    FilePermission.OWNER_WRITE: stat.S_IWUSR,
    FilePermission.GROUP_WRITE: stat.S_IWGRP,
    FilePermission.ANYONE_WRITE: stat.S_IWOTH,
    FilePermission.OWNER_READ: stat.S_IRUSR,
    FilePermission.ANYONE_READ: stat.S_IROTH,
}


def _stat(path: str | os.PathLike[str]) -> os.stat_result:
    try:
        return os.stat(path)
    except OSError as err:
        raise FilePermissionError(f"cannot get file's stat {path}: {err}") from err


def get_file_stat_permission(path: str | os.PathLike[str]) -> int:
    """Return the full mode of ``path``, file type bits included."""
    return _stat(path).st_mode


def file_has_permission(path: str | os.PathLike[str], permission: FilePermission) -> bool:
    """Tell whether ``path`` has the given permission bit set."""
    return bool(get_file_stat_permission(path) & FilePermission(permission).mask)


def get_file_owner_user_name(path: str | os.PathLike[str]) -> str:
    """Return the user name of the owner of ``path``."""
    uid = _stat(path).st_uid
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError as err:
        raise FilePermissionError(
            f"cannot look up file owner's name {path}: unknown user id {uid}"
        ) from err


def get_file_group_name(path: str | os.PathLike[str]) -> str:
    """Return the name of the group of ``path``."""
    gid = _stat(path).st_gid
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError as err:
        raise FilePermissionError(
            f"cannot look up file group name {path}: unknown group id {gid}"
        ) from err


def check_file_rights(path: str | os.PathLike[str]) -> None:
    """Raise unless the owner of ``path`` can both read and write it."""
    mode = _stat(path).st_mode
    if mode & stat.S_IRUSR and mode & stat.S_IWUSR:
        return
    raise FilePermissionError(
        f"file's owner does not have enough permission at path {path}"
    )


def check_file_owner_rights(path: str | os.PathLike[str], required_owner: str) -> None:
    """Raise unless ``path`` is owned by ``required_owner``."""
    try:
        owner = get_file_owner_user_name(path)
    except FilePermissionError as err:
        raise FilePermissionError(
            f"cannot look up file owner's name {path}: {err}"
        ) from err
    if owner != required_owner:
        raise FilePermissionError(f"owner does not have permission to protect file {path}")