"""
Import rewriting functionality.

This module rewrites the import paths of Go source files in place. It is
used to point a package at the published identities of its dependencies
and to move imports from one path to another.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

from .analyzer import GoSourceAnalyzer


def go_source_filter(relative_path: str) -> bool:
    """Accept .go files outside vendored and version control directories."""
    return (
        not relative_path.startswith("vendor")
        and not relative_path.startswith(".git")
        and relative_path.endswith(".go")
    )


def rewrite_file(
    file_path: Path,
    substitute: Callable[[str], str],
    analyzer: GoSourceAnalyzer | None = None,
) -> bool:
    """
    Rewrite the import paths of one Go file.

    Args:
        file_path: Go file to rewrite
        substitute: Function mapping an import path to its replacement
        analyzer: Analyzer used to locate import specs

    Returns:
        True if the file was modified
    """
    analyzer = analyzer or GoSourceAnalyzer()
    content = file_path.read_text(encoding="utf-8")
    imports = analyzer.scan_imports(content, file_path)

    new_content = content
    # Replace from the end so earlier offsets stay valid
    for imp in sorted(imports, key=lambda i: i.start, reverse=True):
        replacement = substitute(imp.import_path)
        if replacement == imp.import_path:
            continue
        new_content = new_content[: imp.start] + f'"{replacement}"' + new_content[imp.end :]

    if new_content == content:
        return False

    file_path.write_text(new_content, encoding="utf-8")
    return True


def rewrite_imports(
    root: Path,
    substitute: Callable[[str], str],
    file_filter: Callable[[str], bool] = go_source_filter,
) -> list[Path]:
    """
    Rewrite the import paths of every matching file below a directory.

    Args:
        root: Directory to walk
        substitute: Function mapping an import path to its replacement
        file_filter: Predicate on the file path relative to root (posix separators)

    Returns:
        List of files that were modified

    Raises:
        SourceParseError: If a matched file cannot be parsed
        OSError: If a file cannot be read or written
    """
    root = Path(root)
    analyzer = GoSourceAnalyzer()
    modified: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            file_path = Path(dirpath) / filename
            relative = file_path.relative_to(root).as_posix()
            if not file_filter(relative):
                continue
            if rewrite_file(file_path, substitute, analyzer):
                modified.append(file_path)
                print(f"Rewrote imports in: {file_path}")

    return modified


def update_imports(root: Path, old_import: str, new_import: str) -> list[Path]:
    """
    Move imports of one package path to another in every Go file below root.

    The first occurrence of "<old_import>/" in each import path is replaced
    with "<new_import>/"; an import equal to old_import is replaced as a whole.

    Args:
        root: Directory to walk
        old_import: Import path to replace
        new_import: Replacement import path

    Returns:
        List of files that were modified
    """
    if not old_import or not new_import:
        raise ValueError("Both the old and the new import path are required")

    def substitute(import_path: str) -> str:
        replaced = (import_path + "/").replace(old_import + "/", new_import + "/", 1)
        return replaced[:-1]

    def is_go_file(relative_path: str) -> bool:
        return relative_path.endswith(".go")

    modified = rewrite_imports(root, substitute, is_go_file)
    if not modified:
        print(f"No imports of {old_import} found under {root}", file=sys.stderr)
    return modified
