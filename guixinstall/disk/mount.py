"""Actions that mount the target filesystems and set up swap."""

from __future__ import annotations

from pathlib import Path

from guixinstall.config import Firmware, SystemConfig
from guixinstall.disk.action import Action, Cmd, CreateSwapFile, Mkdir, Mount
from guixinstall.disk.paths import partition_path

TARGET_ROOT = "/mnt"
EFI_MOUNT_POINT = "/mnt/boot/efi"
GUIX_CONFIG_DIR = "/mnt/etc/guix"
SWAP_FILE = "/mnt/swapfile"


def mount_actions(config: SystemConfig) -> list[Action]:
    """Return the actions that mount the target system.

    Root is mounted by label; on EFI the boot partition is mounted as well.
    The cow-store is started and the configuration directory created.
    """
    actions: list[Action] = [Cmd.of("mount", "LABEL=my-root", TARGET_ROOT)]

    if config.firmware == Firmware.EFI:
        actions.append(Mkdir(Path(EFI_MOUNT_POINT)))
        actions.append(
            Mount(
                source=Path(partition_path(config.disk.dev_path, 1)),
                target=Path(EFI_MOUNT_POINT),
                fstype="vfat",
            )
        )

    actions.append(Cmd.of("herd", "start", "cow-store", TARGET_ROOT))
    actions.append(Mkdir(Path(GUIX_CONFIG_DIR)))
    return actions


def swap_actions(config: SystemConfig) -> list[Action]:
    """Return the actions that create and enable a swap file of the configured size."""
    size_bytes = config.swap_size_mb * 1024 * 1024
    return [
        CreateSwapFile(path=Path(SWAP_FILE), size_bytes=size_bytes),
        Cmd.of("mkswap", SWAP_FILE),
        Cmd.of("swapon", SWAP_FILE),
    ]