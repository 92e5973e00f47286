"""
Package publishing functionality.

This module provides publish backends that turn a package directory into a
content-addressed package and return its hash: a local content store and
the gx command line tool.
"""

from __future__ import annotations

import hashlib
import re
import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import Protocol

from .errors import PublishError
from .types import PackageManifest

# Directories never included in published content
EXCLUDED_DIRS = frozenset({".git"})


class Backend(Enum):
    """
    Supported publish backends.

    Attributes:
        STORE: Local content-addressed store directory
        GX: The gx command line tool ("gx publish")
    """

    STORE = "store"
    GX = "gx"


class PublishBackend(Protocol):
    def publish(self, location: Path, manifest: PackageManifest) -> str: ...


def _iter_package_files(location: Path) -> list[Path]:
    return sorted(
        path
        for path in location.rglob("*")
        if path.is_file()
        and not any(part in EXCLUDED_DIRS for part in path.relative_to(location).parts)
    )


def compute_content_hash(location: Path) -> str:
    """
    Compute the content hash of a package directory.

    The hash covers the relative path and the bytes of every file below the
    directory, in sorted path order, so it changes whenever any file,
    including the manifest, changes.

    Args:
        location: Package directory

    Returns:
        Hex-encoded SHA-256 digest
    """
    location = Path(location)
    digest = hashlib.sha256()
    for path in _iter_package_files(location):
        relative = path.relative_to(location).as_posix().encode("utf-8")
        content = path.read_bytes()
        digest.update(len(relative).to_bytes(8, "big"))
        digest.update(relative)
        digest.update(len(content).to_bytes(8, "big"))
        digest.update(content)
    return digest.hexdigest()


class ContentStoreBackend:
    """
    Publishes packages into a local content-addressed store.

    A package with hash H and name N is stored at <store_dir>/H/N, which
    mirrors the "<hash>/<name>" import paths written by the rewriter.

    Attributes:
        store_dir: Root directory of the store
    """

    def __init__(self, store_dir: Path) -> None:
        self.store_dir = Path(store_dir)

    def publish(self, location: Path, manifest: PackageManifest) -> str:
        """
        Copy a package directory into the store.

        Publishing the same content twice is a no-op.

        Args:
            location: Package directory
            manifest: Manifest of the package

        Returns:
            Content hash of the package

        Raises:
            PublishError: If the package has no name or cannot be copied
        """
        location = Path(location)
        if not manifest.name:
            raise PublishError(f"Package at {location} has no name")

        content_hash = compute_content_hash(location)
        target = self.store_dir / content_hash / manifest.name
        if target.exists():
            return content_hash

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(location, target, ignore=shutil.ignore_patterns(*EXCLUDED_DIRS))
        except OSError as e:
            raise PublishError(f"Could not copy {location} to {target}: {e}") from e

        return content_hash


class GxCommandBackend:
    """
    Publishes packages with "gx publish".

    Attributes:
        command: gx executable to invoke
        timeout: Seconds to wait for the command, or None to wait indefinitely
    """

    def __init__(self, command: str = "gx", timeout: float | None = None) -> None:
        self.command = command
        self.timeout = timeout

    def _check_gx_installed(self) -> bool:
        """Check if gx is installed."""
        try:
            subprocess.run([self.command, "--version"], capture_output=True, check=True)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    @staticmethod
    def parse_hash(output: str) -> str | None:
        """Extract the published hash from gx output."""
        match = re.search(r"published with hash:?\s*(\S+)", output)
        if match:
            return match.group(1)

        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if not lines:
            return None
        return lines[-1].split()[-1]

    def publish(self, location: Path, manifest: PackageManifest) -> str:
        """
        Run "gx publish" in a package directory.

        Args:
            location: Package directory
            manifest: Manifest of the package (already saved to location)

        Returns:
            Hash reported by gx

        Raises:
            PublishError: If gx is missing, fails, times out or prints no hash
        """
        if not self._check_gx_installed():
            raise PublishError(f"{self.command} is required for publishing with the gx backend")

        try:
            result = subprocess.run(
                [self.command, "publish"],
                cwd=location,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise PublishError(f"gx publish timed out after {self.timeout}s") from e

        if result.returncode != 0:
            output = (result.stdout + result.stderr).strip()
            raise PublishError(f"gx publish failed for {manifest.name}: {output}")

        content_hash = self.parse_hash(result.stdout)
        if not content_hash:
            raise PublishError(f"gx publish printed no hash for {manifest.name}")
        return content_hash


def create_backend(
    backend: Backend | str,
    store_dir: Path | None = None,
    gx_command: str = "gx",
    timeout: float | None = None,
) -> PublishBackend:
    """
    Create a publish backend by name.

    Args:
        backend: Backend enum or its string value
        store_dir: Store directory (required for the store backend)
        gx_command: gx executable for the gx backend
        timeout: Command timeout for the gx backend

    Raises:
        ValueError: If the backend name is unknown or store_dir is missing
    """
    if isinstance(backend, str):
        try:
            backend = Backend(backend.lower())
        except ValueError as err:
            valid = ", ".join(b.value for b in Backend)
            raise ValueError(f"Invalid backend: {backend}. Must be one of: {valid}") from err

    if backend == Backend.STORE:
        if store_dir is None:
            raise ValueError("store_dir is required for the store backend")
        return ContentStoreBackend(store_dir)
    return GxCommandBackend(gx_command, timeout=timeout)
