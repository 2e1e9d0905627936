"""Discovery of disks that can host an installation."""

from __future__ import annotations

import json
from typing import Any

from guixinstall.commands import CommandError, run_cmd
from guixinstall.config import BlockDevice
from guixinstall.disk.paths import format_size

_MIN_SIZE = 1024 * 1024
_LSBLK_ARGS = (
    "lsblk",
    "--json",
    "--bytes",
    "--output",
    "NAME,SIZE,TYPE,MODEL,PATH",
)


def detect_block_devices() -> list[BlockDevice]:
    """Run lsblk and return the disks found on the system."""
    try:
        result = run_cmd(_LSBLK_ARGS)
    except CommandError as exc:
        raise CommandError(f"failed to run lsblk: {exc}", exc.result) from exc
    return parse_lsblk_json(result.stdout)


def _optional_str(entry: dict[str, Any], key: str) -> str | None:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"failed to parse lsblk JSON: {key!r} must be a string")
    return value


def _required_str(entry: dict[str, Any], key: str) -> str:
    value = _optional_str(entry, key)
    if value is None:
        raise ValueError(f"failed to parse lsblk JSON: missing field {key!r}")
    return value


def _size(entry: dict[str, Any]) -> int | None:
    value = entry.get("size")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError("failed to parse lsblk JSON: 'size' must be a byte count")
    return value


def _clean_model(model: str | None) -> str | None:
    if model is None:
        return None
    return model.strip() or None


def parse_lsblk_json(json_text: str) -> list[BlockDevice]:
    """Parse lsblk JSON output into the disks that can host an installation.

    Only entries of type ``disk`` are kept. Floppy drives (``fd*``) and
    devices smaller than 1 MiB are dropped. Models are trimmed and a blank
    model becomes None.
    """
    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"failed to parse lsblk JSON: {exc}") from exc
    if not isinstance(parsed, dict) or not isinstance(
        parsed.get("blockdevices"), list
    ):
        raise ValueError("failed to parse lsblk JSON: missing 'blockdevices' list")

    devices = []
    for entry in parsed["blockdevices"]:
        if not isinstance(entry, dict):
            raise ValueError("failed to parse lsblk JSON: device must be an object")
        name = _required_str(entry, "name")
        device_type = _required_str(entry, "type")
        size = _size(entry) or 0
        model = _optional_str(entry, "model")
        path = _optional_str(entry, "path")
        if device_type != "disk" or size < _MIN_SIZE or name.startswith("fd"):
            continue
        devices.append(
            BlockDevice(
                name=name,
                dev_path=path or "",
                size_bytes=size,
                model=_clean_model(model),
            )
        )
    return devices


def format_device(dev: BlockDevice) -> str:
    """Format a disk as one aligned line: path, size and model."""
    size = format_size(dev.size_bytes)
    model = dev.model if dev.model is not None else "Unknown"
    return f"{dev.dev_path:<14}{size:<9}{model}"