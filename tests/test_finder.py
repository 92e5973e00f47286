"""Tests for dependency discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from go_package_importer import DependencyWalker
from go_package_importer.errors import SourceParseError
from go_package_importer.utils import is_foreign

ROOT = "example.org/foo"


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    return tmp_path / "src" / ROOT


class TestCollectDependencies:
    """Tests for DependencyWalker.collect_dependencies."""

    def test_excludes_stdlib_and_self_references(self, package_dir: Path, go_file) -> None:
        go_file(
            package_dir,
            ["fmt", "net/http", "example.org/bar", "example.org/foo/internal", ROOT],
        )

        deps = DependencyWalker().collect_dependencies(ROOT, package_dir)

        assert deps == {"example.org/bar"}

    def test_collects_from_subdirectories(self, package_dir: Path, go_file) -> None:
        go_file(package_dir, ["example.org/bar"])
        go_file(package_dir / "sub", ["example.org/baz", "example.org/bar"])
        go_file(package_dir / "sub" / "deeper", ["github.com/x/y/z"])

        deps = DependencyWalker().collect_dependencies(ROOT, package_dir)

        assert deps == {"example.org/bar", "example.org/baz", "github.com/x/y/z"}

    def test_root_without_go_files_still_walks_subdirectories(
        self, package_dir: Path, go_file
    ) -> None:
        package_dir.mkdir(parents=True)
        (package_dir / "README.md").write_text("docs")
        go_file(package_dir / "cmd" / "tool", ["example.org/bar/util"])

        deps = DependencyWalker().collect_dependencies(ROOT, package_dir)

        assert deps == {"example.org/bar/util"}

    def test_no_go_code_anywhere(self, package_dir: Path) -> None:
        (package_dir / "docs").mkdir(parents=True)

        assert DependencyWalker().collect_dependencies(ROOT, package_dir) == set()

    def test_skips_vendor_godeps_and_git(self, package_dir: Path, go_file) -> None:
        go_file(package_dir, [])
        go_file(package_dir / "vendor" / "x", ["example.org/vendored"])
        go_file(package_dir / "Godeps" / "_workspace", ["example.org/godeps"])
        go_file(package_dir / ".git" / "hooks", ["example.org/git"])

        assert DependencyWalker().collect_dependencies(ROOT, package_dir) == set()

    def test_extra_excluded_directories(self, package_dir: Path, go_file) -> None:
        go_file(package_dir, [])
        go_file(package_dir / "testdata", ["example.org/fixture"])

        walker = DependencyWalker(exclude_dirs=["testdata"])

        assert walker.collect_dependencies(ROOT, package_dir) == set()

    def test_pluggable_stdlib_filter(self, package_dir: Path, go_file) -> None:
        go_file(package_dir, ["example.org/bar", "internal.corp/lib"])

        def registry(path: str) -> bool:
            return is_foreign(path) and not path.startswith("internal.corp/")

        deps = DependencyWalker(is_foreign=registry).collect_dependencies(ROOT, package_dir)

        assert deps == {"example.org/bar"}

    def test_missing_directory_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            DependencyWalker().collect_dependencies(ROOT, tmp_path / "missing")

    def test_parse_errors_propagate(self, package_dir: Path, go_file) -> None:
        package_dir.mkdir(parents=True)
        (package_dir / "broken.go").write_text("package foo\nimport (\n")

        with pytest.raises(SourceParseError):
            DependencyWalker().collect_dependencies(ROOT, package_dir)
