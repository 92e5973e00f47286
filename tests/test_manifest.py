"""Tests for manifest management."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from go_package_importer import Dependency, ManifestStore, PackageManifest
from go_package_importer.errors import ManifestError, ManifestNotFoundError


@pytest.fixture
def store() -> ManifestStore:
    return ManifestStore()


class TestPackageManifest:
    """Tests for PackageManifest serialization."""

    def test_from_dict_reads_gx_fields(self) -> None:
        manifest = PackageManifest.from_dict(
            {
                "name": "foo",
                "version": "1.0.0",
                "language": "go",
                "gx": {"dvcsimport": "example.org/foo"},
                "gxDependencies": [{"hash": "QmBar", "name": "bar", "version": "0.1.0"}],
                "releaseCmd": "git commit -a",
            }
        )

        assert manifest.dvcs_import == "example.org/foo"
        assert manifest.dependencies == [Dependency("QmBar", "bar", "0.1.0")]
        assert manifest.extra == {"releaseCmd": "git commit -a"}

    def test_to_dict_omits_empty_optional_fields(self) -> None:
        data = PackageManifest(name="foo").to_dict()

        assert data == {"name": "foo", "version": "0.0.0", "language": "go"}

    def test_gx_table_and_dependency_fields_kept(self) -> None:
        data = {
            "name": "foo",
            "version": "1.0.0",
            "language": "go",
            "gx": {"dvcsimport": "example.org/foo", "goversion": "1.5"},
            "gxDependencies": [
                {"author": "someone", "hash": "QmBar", "name": "bar", "version": "0.1.0"}
            ],
        }

        assert PackageManifest.from_dict(data).to_dict() == data

    def test_absent_author_and_license_stay_absent(self) -> None:
        data = PackageManifest.from_dict({"name": "foo", "version": "1.0.0"}).to_dict()

        assert "author" not in data
        assert "license" not in data

    def test_empty_author_and_license_are_kept(self) -> None:
        data = PackageManifest.from_dict({"name": "foo", "author": "", "license": ""}).to_dict()

        assert data["author"] == ""
        assert data["license"] == ""

    def test_set_dependency_replaces_entry_with_same_name(self) -> None:
        manifest = PackageManifest.from_dict(
            {
                "name": "foo",
                "gxDependencies": [
                    {"hash": "QmOld", "name": "bar", "version": "0.1.0", "author": "someone"},
                    {"hash": "QmZed", "name": "zed", "version": "0.1.0"},
                ],
            }
        )

        manifest.set_dependency(Dependency("QmNew", "bar", "0.2.0"))
        manifest.set_dependency(Dependency("QmBaz", "baz", "0.0.0"))

        assert [d.hash for d in manifest.dependencies] == ["QmNew", "QmZed", "QmBaz"]
        assert manifest.dependencies[0].to_dict() == {
            "hash": "QmNew",
            "name": "bar",
            "version": "0.2.0",
            "author": "someone",
        }


class TestManifestStore:
    """Tests for ManifestStore."""

    def test_init_creates_manifest(self, store: ManifestStore, tmp_path: Path) -> None:
        store.init(tmp_path, "foo", "go", author="dev", dvcs_import="example.org/foo")

        data = json.loads((tmp_path / "package.json").read_text())
        assert data["name"] == "foo"
        assert data["version"] == "0.0.0"
        assert data["author"] == "dev"
        assert data["language"] == "go"
        assert data["gx"] == {"dvcsimport": "example.org/foo"}

    def test_init_refuses_to_overwrite(self, store: ManifestStore, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}")

        with pytest.raises(ManifestError, match="already exists"):
            store.init(tmp_path, "foo", "go")

    def test_init_missing_directory(self, store: ManifestStore, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            store.init(tmp_path / "missing", "foo", "go")

    def test_load_missing(self, store: ManifestStore, tmp_path: Path) -> None:
        with pytest.raises(ManifestNotFoundError):
            store.load(tmp_path)

    def test_missing_manifest_is_a_file_not_found_error(
        self, store: ManifestStore, tmp_path: Path
    ) -> None:
        with pytest.raises(FileNotFoundError):
            store.load(tmp_path)

    def test_load_invalid_json(self, store: ManifestStore, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")

        with pytest.raises(ManifestError, match="Invalid manifest"):
            store.load(tmp_path)

    def test_load_non_object(self, store: ManifestStore, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("[]")

        with pytest.raises(ManifestError, match="expected a JSON object"):
            store.load(tmp_path)

    def test_save_and_load_keep_dependencies_and_unknown_keys(
        self, store: ManifestStore, tmp_path: Path
    ) -> None:
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "foo", "version": "0.2.0", "bugs": {"url": "https://x"}})
        )
        manifest = store.load(tmp_path)
        manifest.dependencies.append(Dependency("QmBar", "bar", "0.0.0"))

        store.save(manifest, tmp_path)
        reloaded = store.load(tmp_path)

        assert reloaded.dependencies == [Dependency("QmBar", "bar", "0.0.0")]
        assert reloaded.extra == {"bugs": {"url": "https://x"}}
        assert reloaded.version == "0.2.0"
