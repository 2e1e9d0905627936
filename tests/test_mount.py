from pathlib import Path

import pytest

from guixinstall.config import BlockDevice, Firmware, SystemConfig, UserAccount
from guixinstall.disk.action import Cmd, CreateSwapFile, Mkdir, Mount
from guixinstall.disk.mount import mount_actions, swap_actions


def make_config(dev_path="/dev/sda", dev_name="sda", firmware=Firmware.EFI):
    return SystemConfig(
        firmware=firmware,
        hostname="test-host",
        disk=BlockDevice(name=dev_name, dev_path=dev_path, size_bytes=100_000_000_000),
        users=[
            UserAccount(
                name="testuser",
                comment="testuser's account",
                groups=["wheel", "audio", "video"],
            )
        ],
    )


def test_mount_bios_sequence():
    actions = mount_actions(make_config(firmware=Firmware.BIOS))
    assert actions == [
        Cmd.of("mount", "LABEL=my-root", "/mnt"),
        Cmd.of("herd", "start", "cow-store", "/mnt"),
        Mkdir(Path("/mnt/etc/guix")),
    ]


def test_mount_efi_sequence():
    actions = mount_actions(make_config())
    assert len(actions) == 5
    assert actions[0] == Cmd.of("mount", "LABEL=my-root", "/mnt")
    assert actions[1] == Mkdir(Path("/mnt/boot/efi"))
    assert actions[2] == Mount(
        source=Path("/dev/sda1"), target=Path("/mnt/boot/efi"), fstype="vfat"
    )
    assert actions[3] == Cmd.of("herd", "start", "cow-store", "/mnt")
    assert actions[4] == Mkdir(Path("/mnt/etc/guix"))


def test_mount_efi_nvme_partition_path():
    actions = mount_actions(make_config("/dev/nvme0n1", "nvme0n1"))
    assert actions[2] == Mount(
        source=Path("/dev/nvme0n1p1"), target=Path("/mnt/boot/efi"), fstype="vfat"
    )


def test_swap_default():
    actions = swap_actions(make_config())
    assert actions == [
        CreateSwapFile(path=Path("/mnt/swapfile"), size_bytes=4096 * 1024 * 1024),
        Cmd.of("mkswap", "/mnt/swapfile"),
        Cmd.of("swapon", "/mnt/swapfile"),
    ]


@pytest.mark.parametrize("size_mb", [1024, 8192])
def test_swap_custom_size(size_mb):
    config = make_config()
    config.swap_size_mb = size_mb
    actions = swap_actions(config)
    assert actions[0] == CreateSwapFile(
        path=Path("/mnt/swapfile"), size_bytes=size_mb * 1024 * 1024
    )