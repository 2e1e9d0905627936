"""Downloading and loading of pre-built enterprise configurations."""

from __future__ import annotations

import json
import os
import shutil
import tarfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

EXTRACT_DIR = "/tmp/guix-install-config"


class EnterpriseConfigError(Exception):
    """Raised when an enterprise configuration cannot be fetched or loaded."""


@dataclass
class EnterpriseConfig:
    """The system.scm and the optional channels.scm and config.json of a config."""

    system_scm: str
    channels_scm: str | None = None
    config_json: Any = None


def _member_target(dest: Path, name: str) -> Path | None:
    parts = PurePosixPath(name).parts
    parts = tuple(p for p in parts if p not in ("/", "."))
    if not parts or ".." in parts:
        return None
    return dest.joinpath(*parts)


def _extract_stream(tar: tarfile.TarFile, dest: Path) -> None:
    # Runs as root during install: only plain files and directories are
    # written, and setuid/setgid/sticky bits are never carried over.
    for member in tar:
        target = _member_target(dest, member.name)
        if target is None:
            continue
        if member.isdir():
            target.mkdir(parents=True, exist_ok=True)
        elif member.isfile():
            target.parent.mkdir(parents=True, exist_ok=True)
            source = tar.extractfile(member)
            if source is None:
                continue
            with source, open(target, "wb") as out:
                shutil.copyfileobj(source, out)
            os.chmod(target, member.mode & 0o777)


def fetch_enterprise_config(config_id: str, config_url: str) -> EnterpriseConfig:
    """Download ``{config_url}/{config_id}.tar.gz``, extract it and load it.

    The response is decompressed and unpacked as it streams in; no tarball
    is written to disk.
    """
    url = f"{config_url}/{config_id}.tar.gz"
    dest = Path(EXTRACT_DIR)
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise EnterpriseConfigError(
            f"failed to create extract directory {dest}: {exc}"
        ) from exc

    try:
        response = urllib.request.urlopen(url)
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise EnterpriseConfigError(
            f"failed to download enterprise config from {url}: {exc}"
        ) from exc

    with response:
        try:
            with tarfile.open(fileobj=response, mode="r|gz") as tar:
                _extract_stream(tar, dest)
        except (tarfile.TarError, OSError, EOFError) as exc:
            raise EnterpriseConfigError(
                f"failed to extract config tarball from {url}: {exc}"
            ) from exc

    return load_extracted_config(str(dest))


def load_extracted_config(directory: str | os.PathLike[str]) -> EnterpriseConfig:
    """Load a configuration from an extracted directory; system.scm is required."""
    system_scm = read_config_file(directory, "system.scm")
    channels_scm = read_config_file_opt(directory, "channels.scm")
    raw_json = read_config_file_opt(directory, "config.json")
    config_json = None
    if raw_json is not None:
        try:
            config_json = json.loads(raw_json)
        except json.JSONDecodeError as exc:
            raise EnterpriseConfigError(f"failed to parse config.json: {exc}") from exc
    return EnterpriseConfig(
        system_scm=system_scm, channels_scm=channels_scm, config_json=config_json
    )


def _read(path: Path) -> str:
    try:
        return path.read_text()
    except OSError as exc:
        raise EnterpriseConfigError(f"failed to read {path}: {exc}") from exc


def read_config_file(directory: str | os.PathLike[str], name: str) -> str:
    """Read ``name`` from ``directory`` or from one of its direct subdirectories.

    The file directly in ``directory`` takes priority.
    """
    root = Path(directory)
    direct = root / name
    if direct.exists():
        return _read(direct)

    try:
        subdirs = sorted(p for p in root.iterdir() if p.is_dir())
    except OSError:
        subdirs = []
    for subdir in subdirs:
        nested = subdir / name
        if nested.exists():
            return _read(nested)

    raise EnterpriseConfigError(
        f"required file '{name}' not found in config archive at {directory}"
    )


def read_config_file_opt(directory: str | os.PathLike[str], name: str) -> str | None:
    """Like read_config_file, but return None when the file cannot be read."""
    try:
        return read_config_file(directory, name)
    except EnterpriseConfigError:
        return None


def cleanup() -> None:
    """Remove the extracted configuration files, if any."""
    shutil.rmtree(EXTRACT_DIR, ignore_errors=True)