"""System configuration model and validation of user-supplied values."""

from __future__ import annotations

import base64
import binascii
import os
import secrets
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_HOSTNAME_PREFIX = "panther"
_EFI_SYSFS_PATH = "/sys/firmware/efi"
_HOSTNAME_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_LOWER = frozenset(string.ascii_lowercase)
_DIGITS = frozenset(string.digits)
_ALNUM = frozenset(string.ascii_letters + string.digits)


class ValidationError(ValueError):
    """Raised when a configuration value fails validation."""


class _NamedEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


class Firmware(_NamedEnum):
    """Boot firmware of the target machine."""

    EFI = "efi"
    BIOS = "bios"

    @classmethod
    def detect(cls) -> Firmware:
        """Return EFI when the running kernel exposes EFI firmware, else BIOS."""
        return cls.EFI if os.path.exists(_EFI_SYSFS_PATH) else cls.BIOS


class Filesystem(_NamedEnum):
    """Filesystem for the root partition."""

    EXT4 = "ext4"
    BTRFS = "btrfs"


class DesktopEnvironment(_NamedEnum):
    """Desktop environment installed on the target system."""

    GNOME = "gnome"
    KDE = "kde"
    XFCE = "xfce"
    MATE = "mate"
    SWAY = "sway"
    I3 = "i3"
    LXQT = "lxqt"


@dataclass
class UserAccount:
    """A user account created on the target system."""

    name: str
    comment: str
    groups: list[str] = field(default_factory=list)


@dataclass
class EncryptionConfig:
    """LUKS settings: the name of the mapped device under /dev/mapper."""

    device_target: str


@dataclass
class BlockDevice:
    """A disk that can host the installation."""

    name: str
    dev_path: str
    size_bytes: int = 0
    model: str | None = None
    boot_partition_uuid: str | None = None
    root_partition_uuid: str | None = None


def _default_disk() -> BlockDevice:
    return BlockDevice(name="sda", dev_path="/dev/sda")


def _default_users() -> list[UserAccount]:
    return [
        UserAccount(
            name="panther",
            comment="panther's account",
            groups=["wheel", "audio", "video"],
        )
    ]


def generate_hostname(prefix: str) -> str:
    """Return ``<prefix>-`` followed by six random lowercase letters or digits."""
    suffix = "".join(secrets.choice(_HOSTNAME_SUFFIX_ALPHABET) for _ in range(6))
    return f"{prefix}-{suffix}"


@dataclass
class SystemConfig:
    """Everything needed to install and describe the target system.

    ``password`` is used only to set the user's password after installation
    and is never written into the generated system configuration.
    ``system_scm_override``, when set, replaces the rendered system.scm.
    """

    mode: Any = None
    firmware: Firmware = field(default_factory=Firmware.detect)
    hostname: str = field(
        default_factory=lambda: generate_hostname(DEFAULT_HOSTNAME_PREFIX)
    )
    timezone: str = "Europe/Berlin"
    locale: str = "en_US.utf8"
    keyboard_layout: str | None = None
    disk: BlockDevice = field(default_factory=_default_disk)
    filesystem: Filesystem = Filesystem.EXT4
    encryption: EncryptionConfig | None = None
    users: list[UserAccount] = field(default_factory=_default_users)
    desktop: DesktopEnvironment | None = None
    ssh_key: str | None = None
    swap_size_mb: int = 4096
    password: str | None = field(default=None, repr=False)
    system_scm_override: str | None = None


def validate_hostname(name: str) -> None:
    """Raise ValidationError unless ``name`` is a valid hostname."""
    if not name or len(name.encode()) > 63:
        raise ValidationError("hostname must be 1-63 characters")
    if not all(c in _LOWER or c in _DIGITS or c == "-" for c in name):
        raise ValidationError(
            "hostname must contain only lowercase letters, digits, and hyphens"
        )
    if name.startswith("-") or name.endswith("-"):
        raise ValidationError("hostname must not start or end with a hyphen")


def validate_username(name: str) -> None:
    """Raise ValidationError unless ``name`` is a valid user name."""
    if not name or len(name.encode()) > 32:
        raise ValidationError("username must be 1-32 characters")
    if not (name[0] in _LOWER or name[0] == "_"):
        raise ValidationError(
            "username must start with a lowercase letter or underscore"
        )
    if not all(c in _LOWER or c in _DIGITS or c in "_-" for c in name):
        raise ValidationError(
            "username must contain only lowercase letters, digits, "
            "underscores, and hyphens"
        )


def validate_ssh_public_key(key: str) -> None:
    """Raise ValidationError unless ``key`` is an authorized_keys-style public key.

    The base64 body must decode and begin with a length-prefixed algorithm
    name equal to the line's prefix.
    """
    parts = key.strip().split()
    if not parts:
        raise ValidationError("ssh key is empty")
    if len(parts) < 2:
        raise ValidationError("ssh key is missing the key body")
    prefix, body_b64 = parts[0], parts[1]

    try:
        blob = base64.b64decode(body_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("ssh key body is not valid base64") from exc

    if len(blob) < 4:
        raise ValidationError("ssh key body is too short")
    length = int.from_bytes(blob[:4], "big")
    inner = blob[4 : 4 + length]
    if len(inner) != length:
        raise ValidationError("ssh key length prefix is invalid")

    if inner != prefix.encode():
        raise ValidationError(
            f'ssh key prefix "{prefix}" does not match embedded algorithm name'
        )


def validate_config_id(config_id: str) -> None:
    """Raise ValidationError unless ``config_id`` is a safe configuration ID."""
    if not config_id:
        raise ValidationError("config ID must not be empty")
    if not all(c in _ALNUM or c in "-_" for c in config_id):
        raise ValidationError(
            "config ID must contain only alphanumeric characters, "
            "hyphens, and underscores"
        )