"""Partition device paths and human-readable disk sizes."""

from __future__ import annotations

_GB = 1_000_000_000
_TB = 1_000_000_000_000


def partition_path(device: str, num: int) -> str:
    """Return the device path of partition ``num`` on ``device``.

    NVMe and MMC devices use a ``p`` separator (``/dev/nvme0n1p1``); others
    append the number directly (``/dev/sda1``).
    """
    if device.startswith(("/dev/nvme", "/dev/mmcblk")):
        return f"{device}p{num}"
    return f"{device}{num}"


def format_size(size_bytes: int) -> str:
    """Format a byte count in decimal GB or TB, e.g. ``120 GB`` or ``1.5 TB``."""
    if size_bytes >= _TB:
        value, unit = size_bytes / _TB, "TB"
    else:
        value, unit = size_bytes / _GB, "GB"
    if value >= 10.0:
        return f"{value:.0f} {unit}"
    return f"{value:.1f} {unit}"