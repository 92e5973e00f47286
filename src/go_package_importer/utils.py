"""
Utility functions for import path handling and configuration discovery.
"""

from __future__ import annotations

from pathlib import Path

CONFIG_FILE_NAME = "gx-import.toml"

# Namespaces whose repositories sit one level deeper than host/org/repo
WIDE_NAMESPACES = {("golang.org", "x")}


def is_foreign(import_path: str) -> bool:
    """
    Check whether an import path points outside the Go standard library.

    The first path segment of a non-standard import is a domain name, so it
    contains a dot ("github.com/user/repo"), while standard library paths
    never do ("fmt", "net/http").

    Args:
        import_path: Slash-delimited Go import path

    Returns:
        True if the path looks like it belongs to an external repository
    """
    first = import_path.split("/")[0]
    return "." in first


def group_root(import_path: str) -> str:
    """
    Map an import path to the root path of the repository that owns it.

    Subdirectories of a repository are published as one logical package, so
    "github.com/user/repo/sub/pkg" groups to "github.com/user/repo". Paths
    under golang.org/x keep one extra segment.

    Args:
        import_path: Slash-delimited Go import path

    Returns:
        The grouped root path, or the input unchanged if it is already short enough
    """
    parts = import_path.split("/")
    if len(parts) < 2:
        return import_path

    depth = 3
    if (parts[0], parts[1]) in WIDE_NAMESPACES:
        depth = 4

    if len(parts) > depth:
        return "/".join(parts[:depth])
    return import_path


def is_subpath(import_path: str, root: str) -> bool:
    """Return True if import_path is root itself or lies below it."""
    return import_path == root or import_path.startswith(root + "/")


def find_config_file(start_path: Path | None = None) -> Path | None:
    """
    Find the importer configuration file by searching parent directories.

    Starts from the given path (or current directory) and walks up the directory
    tree until it finds a directory containing gx-import.toml.

    Args:
        start_path: Starting directory for the search (default: current directory)

    Returns:
        Path to the configuration file, or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()

    # Walk up the directory tree
    while current != current.parent:
        config_path = current / CONFIG_FILE_NAME
        if config_path.is_file():
            return config_path
        current = current.parent

    # Check the root directory itself
    if (current / CONFIG_FILE_NAME).is_file():
        return current / CONFIG_FILE_NAME

    return None


def prompt(message: str, default: str) -> str:
    """
    Ask the user for a value on the terminal.

    Args:
        message: Question to display
        default: Value used when the answer is empty

    Returns:
        The answer, stripped of surrounding whitespace, or the default
    """
    answer = input(f"{message} ({default}): ").strip()
    return answer or default
