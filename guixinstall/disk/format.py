"""Commands that encrypt and format the target disk's partitions."""

from __future__ import annotations

from guixinstall.config import Filesystem, Firmware, SystemConfig
from guixinstall.disk.paths import partition_path

ROOT_LABEL = "my-root"


def encryption_commands(device: str, target: str) -> list[list[str]]:
    """Return the cryptsetup commands that set up LUKS on partition 2.

    Both commands prompt for a passphrase and are meant to run interactively.
    """
    part2 = partition_path(device, 2)
    return [
        ["cryptsetup", "luksFormat", part2],
        ["cryptsetup", "open", "--type", "luks", part2, target],
    ]


def format_root_commands(config: SystemConfig) -> list[list[str]]:
    """Return the commands that create the root filesystem.

    The mapped LUKS device is formatted when encryption is configured,
    partition 2 otherwise. For ext4 the metadata_csum_seed feature is turned
    off afterwards for GRUB compatibility.
    """
    if config.encryption is not None:
        root_device = f"/dev/mapper/{config.encryption.device_target}"
    else:
        root_device = partition_path(config.disk.dev_path, 2)

    if config.filesystem == Filesystem.EXT4:
        return [
            ["mkfs.ext4", "-q", "-L", ROOT_LABEL, root_device],
            ["tune2fs", "-O", "^metadata_csum_seed", root_device],
        ]
    return [["mkfs.btrfs", "-f", "-L", ROOT_LABEL, root_device]]


def format_efi_commands(device: str) -> list[list[str]]:
    """Return the command that formats partition 1 as FAT32 for EFI boot."""
    return [["mkfs.fat", "-I", "-F32", partition_path(device, 1)]]


def format_commands(config: SystemConfig) -> list[list[str]]:
    """Return the full sequence: encryption, EFI partition, then root."""
    cmds: list[list[str]] = []
    if config.encryption is not None:
        cmds.extend(
            encryption_commands(config.disk.dev_path, config.encryption.device_target)
        )
    if config.firmware == Firmware.EFI:
        cmds.extend(format_efi_commands(config.disk.dev_path))
    cmds.extend(format_root_commands(config))
    return cmds