"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from go_package_importer import (
    ContentStoreBackend,
    Importer,
    LocalFetcher,
    PackageManifest,
)


def write_go_file(directory: Path, imports: list[str], name: str = "main.go") -> Path:
    """Write a Go file with the given imports, creating the directory if needed."""
    directory.mkdir(parents=True, exist_ok=True)
    package = directory.name.replace("-", "_").replace(".", "_")
    lines = [f"package {package}", ""]
    if imports:
        lines.append("import (")
        lines.extend(f'\t"{imp}"' for imp in imports)
        lines.append(")")
        lines.append("")
    lines.append("func Hello() {}")
    file_path = directory / name
    file_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return file_path


class RecordingBackend:
    """Publish backend returning predictable hashes and remembering every call."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.published: list[str] = []
        self.manifests: dict[str, PackageManifest] = {}
        self.fail_for = fail_for or set()

    def publish(self, location: Path, manifest: PackageManifest) -> str:
        if manifest.name in self.fail_for:
            raise RuntimeError(f"backend refused {manifest.name}")
        self.published.append(manifest.name)
        self.manifests[manifest.name] = manifest
        return f"H_{manifest.name}"


@pytest.fixture
def gopath(tmp_path: Path) -> Path:
    """Create an empty GOPATH workspace."""
    workspace = tmp_path / "gopath"
    (workspace / "src").mkdir(parents=True)
    return workspace


@pytest.fixture
def make_go_package(gopath: Path):
    """Return a helper that writes a Go package into the workspace."""

    def _make(import_path: str, imports: list[str] | None = None, name: str = "main.go") -> Path:
        return write_go_file(gopath / "src" / import_path, imports or [], name=name)

    return _make


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def importer(gopath: Path, backend: RecordingBackend) -> Importer:
    """Importer working on the local workspace only, without prompts."""
    return Importer(gopath, LocalFetcher(gopath), backend, yes_all=True)


@pytest.fixture
def store_importer(gopath: Path, tmp_path: Path) -> Importer:
    """Importer publishing into a real content store."""
    return Importer(
        gopath,
        LocalFetcher(gopath),
        ContentStoreBackend(tmp_path / "store"),
        yes_all=True,
    )


@pytest.fixture
def go_file():
    """Return the helper that writes a Go file into any directory."""
    return write_go_file


@pytest.fixture
def make_backend():
    """Return the RecordingBackend class for tests that need their own instance."""
    return RecordingBackend
