"""
Type definitions for the package.

This module contains the core data structures used throughout the package
for representing import statements, published dependency handles and
package manifests.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any


@dataclass
class ImportInfo:
    """
    Information about a detected import spec.

    This class represents a single import spec found in a Go source file.

    Attributes:
        import_path: The imported path (e.g., "fmt", "github.com/user/repo/sub")
        alias: Explicit package name given to the import ("_", "." or an identifier), if any
        line_number: Line number where the import path literal appears
        file_path: Path to the file containing this import
        start: Offset of the opening quote of the path literal in the file content
        end: Offset just past the closing quote of the path literal
    """

    import_path: str
    alias: str | None = None
    line_number: int = 0
    file_path: Path | None = None
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Dependency:
    """
    Published identity of a package.

    Attributes:
        hash: Content hash returned by the publish backend
        name: Package name from the manifest
        version: Package version from the manifest
        extra: Other keys of a loaded gxDependencies entry, written back unchanged
    """

    hash: str
    name: str
    version: str
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {"hash": self.hash, "name": self.name, "version": self.version, **self.extra}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dependency:
        return cls(
            hash=data["hash"],
            name=data["name"],
            version=data.get("version", ""),
            extra={k: v for k, v in data.items() if k not in ("hash", "name", "version")},
        )

    @property
    def import_path(self) -> str:
        """Import path that refers to this published package."""
        return f"{self.hash}/{self.name}"


# Manifest keys handled explicitly; everything else is kept in PackageManifest.extra
_KNOWN_KEYS = {
    "name",
    "version",
    "language",
    "author",
    "license",
    "description",
    "gx",
    "gxDependencies",
}


@dataclass
class PackageManifest:
    """
    The package.json record of one logical package.

    Loaded from (or initialized on) disk at the start of processing an import
    path, extended with the handles of its dependencies, then saved and
    handed to the publish backend.

    Attributes:
        name: Package name
        version: Package version
        language: Source language of the package (always "go" for imported packages)
        author: Package author (None leaves the key out of the saved manifest)
        license: License identifier (None leaves the key out of the saved manifest)
        description: Free-form description
        dvcs_import: Import path the package was imported from (``gx.dvcsimport``)
        dependencies: Handles of published dependencies, in the order they were added
        gx_extra: Keys of the ``gx`` table other than ``dvcsimport``
        extra: Unrecognized manifest keys, preserved when the manifest is saved
    """

    name: str
    version: str = "0.0.0"
    language: str = "go"
    author: str | None = None
    license: str | None = None
    description: str = ""
    dvcs_import: str | None = None
    dependencies: list[Dependency] = field(default_factory=list)
    gx_extra: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def set_dependency(self, dep: Dependency) -> None:
        """Add a dependency handle, replacing any existing entry with the same name."""
        for index, existing in enumerate(self.dependencies):
            if existing.name == dep.name:
                self.dependencies[index] = replace(dep, extra={**existing.extra, **dep.extra})
                return
        self.dependencies.append(dep)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PackageManifest:
        gx = data.get("gx") or {}
        return cls(
            name=data.get("name", ""),
            version=data.get("version", ""),
            language=data.get("language", ""),
            author=data.get("author"),
            license=data.get("license"),
            description=data.get("description", ""),
            dvcs_import=gx.get("dvcsimport"),
            dependencies=[Dependency.from_dict(d) for d in data.get("gxDependencies") or []],
            gx_extra={k: v for k, v in gx.items() if k != "dvcsimport"},
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.author is not None:
            data["author"] = self.author
        data["version"] = self.version
        if self.description:
            data["description"] = self.description

        gx = dict(self.gx_extra)
        if self.dvcs_import:
            gx = {"dvcsimport": self.dvcs_import, **gx}
        if gx:
            data["gx"] = gx

        if self.dependencies:
            data["gxDependencies"] = [d.to_dict() for d in self.dependencies]
        data["language"] = self.language
        if self.license is not None:
            data["license"] = self.license
        data.update(self.extra)
        return data
