"""
Dependency discovery functionality.

This module provides the DependencyWalker class which collects the external
import paths referenced by a logical package, including the ones referenced
from its nested subdirectories.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .analyzer import GoSourceAnalyzer
from .errors import NoBuildableSourceError
from .utils import is_foreign, is_subpath

# Build metadata, vendored copies and version control data
SKIP_DIRS = frozenset({"Godeps", "vendor", ".git"})


class UnitParser(Protocol):
    def parse_unit(self, directory: Path) -> set[str]: ...


class DependencyWalker:
    """
    Finds the foreign dependencies of a logical package.

    A logical package spans its root directory and every subdirectory below
    it, so the walk descends into all subdirectories except build metadata,
    vendored code and version control directories.

    Attributes:
        parser: Unit parser returning the imports of one directory
        is_foreign: Predicate telling external import paths from standard library ones
        skip_dirs: Directory names that are never descended into
    """

    def __init__(
        self,
        parser: UnitParser | None = None,
        is_foreign: Callable[[str], bool] = is_foreign,
        exclude_dirs: list[str] | None = None,
    ) -> None:
        """
        Initialize the dependency walker.

        Args:
            parser: Unit parser (default: GoSourceAnalyzer)
            is_foreign: Standard library filter (default: dot in the first path segment)
            exclude_dirs: Additional directory names to skip
        """
        self.parser = parser or GoSourceAnalyzer()
        self.is_foreign = is_foreign
        self.skip_dirs = SKIP_DIRS | set(exclude_dirs or [])

    def collect_dependencies(self, root: str, location: Path) -> set[str]:
        """
        Collect the foreign import paths referenced below a directory.

        Imports of root itself or of any path below it are left out, as are
        standard library imports.

        Args:
            root: Grouped import path of the logical package
            location: Directory to examine

        Returns:
            Set of distinct foreign import paths

        Raises:
            SourceParseError: If a Go file cannot be parsed
            OSError: If a directory cannot be read
        """
        deps: set[str] = set()

        try:
            imports = self.parser.parse_unit(location)
        except NoBuildableSourceError:
            # No Go code here, but subdirectories may still have some
            imports = set()

        for child in imports:
            if self.is_foreign(child) and not is_subpath(child, root):
                deps.add(child)

        for entry in sorted(Path(location).iterdir()):
            if not entry.is_dir() or entry.name in self.skip_dirs:
                continue
            deps |= self.collect_dependencies(root, entry)

        return deps
