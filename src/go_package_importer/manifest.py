"""
Manifest management functionality.

This module provides utilities for loading, saving and creating the
package.json manifest of a package directory.
"""

from __future__ import annotations

import json
from pathlib import Path

from .errors import ManifestError, ManifestNotFoundError
from .types import PackageManifest

PKG_FILE_NAME = "package.json"
DEFAULT_VERSION = "0.0.0"


class ManifestStore:
    """
    Reads and writes package manifests.

    A manifest lives in a file named package.json at the root of the
    package directory.
    """

    def manifest_path(self, location: Path) -> Path:
        return Path(location) / PKG_FILE_NAME

    def load(self, location: Path) -> PackageManifest:
        """
        Load the manifest of a package directory.

        Args:
            location: Package directory

        Returns:
            The parsed manifest

        Raises:
            ManifestNotFoundError: If the directory has no package.json
            ManifestError: If the file is not a valid manifest
        """
        path = self.manifest_path(location)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ManifestNotFoundError(f"Manifest not found: {path}") from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid manifest {path}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"Invalid manifest {path}: expected a JSON object")

        return PackageManifest.from_dict(data)

    def save(self, manifest: PackageManifest, location: Path) -> None:
        """
        Write a manifest to a package directory, replacing any existing one.

        Args:
            manifest: Manifest to write
            location: Package directory
        """
        path = self.manifest_path(location)
        path.write_text(json.dumps(manifest.to_dict(), indent=2) + "\n", encoding="utf-8")

    def init(
        self,
        location: Path,
        name: str,
        language: str,
        author: str = "",
        dvcs_import: str | None = None,
    ) -> None:
        """
        Create a new manifest in a package directory.

        Args:
            location: Package directory
            name: Package name
            language: Source language of the package
            author: Package author
            dvcs_import: Import path the package was imported from

        Raises:
            ManifestError: If the directory already has a manifest
            FileNotFoundError: If the directory does not exist
        """
        path = self.manifest_path(location)
        if path.exists():
            raise ManifestError(f"Package file already exists: {path}")
        if not Path(location).is_dir():
            raise FileNotFoundError(f"Package directory not found: {location}")

        manifest = PackageManifest(
            name=name,
            version=DEFAULT_VERSION,
            language=language,
            author=author,
            license="",
            dvcs_import=dvcs_import,
        )
        self.save(manifest, location)
