"""Commands that partition the target disk."""

from __future__ import annotations

from guixinstall.config import Firmware


def _bios_partition_commands(device: str) -> list[list[str]]:
    return [
        [
            "parted", "-s", device, "--", "mklabel", "gpt",
            "mkpart", "primary", "fat32", "0%", "10M",
            "mkpart", "primary", "10M", "100%",
        ],
        ["parted", "-s", device, "set", "1", "bios_grub", "on"],
    ]


def _efi_partition_commands(device: str) -> list[list[str]]:
    return [
        [
            "parted", "-s", device, "--", "mklabel", "gpt",
            "mkpart", "primary", "fat32", "0%", "200M",
            "mkpart", "primary", "200M", "100%",
        ],
        ["sgdisk", "-t", "1:ef00", device],
        ["sgdisk", "-t", "2:8300", device],
        ["parted", "-s", device, "set", "1", "esp", "on"],
    ]


def partition_commands(device: str, firmware: Firmware) -> list[list[str]]:
    """Return the commands that lay out a GPT disk for the given firmware.

    BIOS gets a 10M bios_grub partition; EFI gets a 200M EFI system
    partition. The rest of the disk becomes the root partition.
    """
    if firmware == Firmware.BIOS:
        return _bios_partition_commands(device)
    return _efi_partition_commands(device)