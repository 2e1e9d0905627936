"""Preflight check for PCI devices that need non-free firmware."""

from __future__ import annotations

import os
import string
from dataclasses import dataclass
from pathlib import Path

# Linux modules that drive PCI devices needing non-free firmware.
UNSUPPORTED_MODULES = frozenset(
    {
        # Wi-Fi.
        "brcmfmac",
        "ipw2100",
        "ipw2200",
        "iwlwifi",
        "mwl8k",
        "rtl8188ee",
        "rtl818x_pci",
        "rtl8192ce",
        "rtl8192de",
        "rtl8192ee",
        # Ethernet.
        "bnx2",
        "bnx2x",
        "liquidio",
        # Graphics.
        "amdgpu",
        "radeon",
        # Multimedia.
        "ivtv",
    }
)

_OSRELEASE_PATH = Path("/proc/sys/kernel/osrelease")
_PCI_DEVICES_PATH = Path("/sys/bus/pci/devices")
_PROC_MODULES_PATH = Path("/proc/modules")
_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class UnsupportedDevice:
    """A PCI device whose driver needs non-free firmware."""

    vendor_id: int
    device_id: int
    module: str

    def description(self) -> str:
        """Return ``vvvv:dddd (module)`` with lowercase hex IDs."""
        return f"{self.vendor_id:04x}:{self.device_id:04x} ({self.module})"


def detect_unsupported_devices() -> list[UnsupportedDevice]:
    """Scan the running system's PCI bus for devices needing non-free firmware."""
    try:
        release = _OSRELEASE_PATH.read_text().strip()
    except OSError:
        return []
    alias_file = Path("/lib/modules") / release / "modules.alias"
    return detect_unsupported_devices_at(_PCI_DEVICES_PATH, alias_file)


def uvesafb_loaded() -> bool:
    """Return True when the uvesafb kernel module is loaded."""
    return uvesafb_loaded_at(_PROC_MODULES_PATH)


def uvesafb_loaded_at(path: str | os.PathLike[str]) -> bool:
    """Return True when the modules list at ``path`` contains uvesafb."""
    try:
        content = Path(path).read_text()
    except OSError:
        return False
    return any(line.split()[:1] == ["uvesafb"] for line in content.splitlines())


def detect_unsupported_devices_at(
    pci_root: str | os.PathLike[str], alias_file: str | os.PathLike[str]
) -> list[UnsupportedDevice]:
    """Match the modalias of every device under ``pci_root`` against ``alias_file``."""
    try:
        aliases = parse_modules_alias(alias_file)
        entries = list(os.scandir(pci_root))
    except OSError:
        return []

    found = []
    for entry in entries:
        try:
            modalias = (Path(entry.path) / "modalias").read_text().strip()
        except OSError:
            continue
        module = next(
            (mod for pattern, mod in aliases if glob_match(pattern, modalias)), None
        )
        if module is None:
            continue
        vendor_id, device_id = parse_pci_modalias(modalias) or (0, 0)
        found.append(UnsupportedDevice(vendor_id, device_id, module))
    return found


def parse_modules_alias(path: str | os.PathLike[str]) -> list[tuple[str, str]]:
    """Return ``(pattern, module)`` pairs for unsupported modules in a modules.alias file.

    Raises OSError when the file cannot be read.
    """
    content = Path(path).read_text()
    out = []
    for line in content.splitlines():
        line = line.strip()
        if not line.startswith("alias "):
            continue
        parts = line[len("alias ") :].rsplit(None, 1)
        if len(parts) != 2:
            continue
        pattern, module = parts[0].strip(), parts[1].strip()
        if module in UNSUPPORTED_MODULES:
            out.append((pattern, module))
    return out


def glob_match(pattern: str, text: str) -> bool:
    """Wildcard match where ``*`` matches any run and ``?`` any single character."""
    pi = ti = 0
    star_pi: int | None = None
    star_ti = 0
    while ti < len(text):
        if pi < len(pattern) and pattern[pi] in ("?", text[ti]):
            pi += 1
            ti += 1
        elif pi < len(pattern) and pattern[pi] == "*":
            star_pi = pi
            star_ti = ti
            pi += 1
        elif star_pi is not None:
            pi = star_pi + 1
            star_ti += 1
            ti = star_ti
        else:
            return False
    while pi < len(pattern) and pattern[pi] == "*":
        pi += 1
    return pi == len(pattern)


def _parse_hex8(field: str) -> int | None:
    if len(field) < 8 or not all(c in _HEX_DIGITS for c in field[:8]):
        return None
    return int(field[:8], 16) & 0xFFFF


def parse_pci_modalias(modalias: str) -> tuple[int, int] | None:
    """Extract ``(vendor_id, device_id)`` from a PCI modalias, or None."""
    if not modalias.startswith("pci:v"):
        return None
    rest = modalias[len("pci:v") :]
    vendor = _parse_hex8(rest)
    if vendor is None:
        return None
    rest = rest[8:]
    if not rest.startswith("d"):
        return None
    device = _parse_hex8(rest[1:])
    if device is None:
        return None
    return vendor, device