"""
Importer configuration.

Settings come from, in increasing order of precedence: built-in defaults,
a gx-import.toml file, environment variables and command-line options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .errors import ConfigurationError
from .publisher import Backend
from .utils import find_config_file

DEFAULT_STORE_DIR = Path.home() / ".gx-import" / "store"

_PATH_KEYS = {"gopath", "store_dir", "journal"}
_BOOL_KEYS = {"rewrite", "yes"}
_STR_KEYS = {"backend", "go_command", "gx_command", "author"}


@dataclass
class ImporterConfig:
    """
    Settings for one import run.

    Attributes:
        gopath: Workspace root; sources live in <gopath>/src
        store_dir: Directory of the local content store
        backend: Publish backend name ("store" or "gx")
        go_command: Go executable used to fetch sources
        gx_command: gx executable used by the gx backend
        author: Author written into newly created manifests
        rewrite: Rewrite imports to the published dependency paths
        yes: Accept default package names without prompting
        fetch: Download sources with go get (False uses the workspace only)
        journal: Optional journal file of published packages
        timeout: Seconds to wait for external commands, None for no limit
        exclude_dirs: Extra directory names skipped when collecting dependencies
    """

    gopath: Path | None = None
    store_dir: Path = DEFAULT_STORE_DIR
    backend: str = Backend.STORE.value
    go_command: str = "go"
    gx_command: str = "gx"
    author: str = ""
    rewrite: bool = False
    yes: bool = False
    fetch: bool = True
    journal: Path | None = None
    timeout: float | None = None
    exclude_dirs: list[str] = field(default_factory=list)

    def update(self, values: dict[str, Any], source: str = "configuration") -> None:
        """
        Apply settings from a mapping, ignoring keys whose value is None.

        Raises:
            ConfigurationError: If a key is unknown or has the wrong type
        """
        for key, value in values.items():
            if value is None:
                continue
            if key in _PATH_KEYS:
                value = Path(value).expanduser()
            elif key in _BOOL_KEYS or key == "fetch":
                if not isinstance(value, bool):
                    raise ConfigurationError(f"{source}: '{key}' must be true or false")
            elif key in _STR_KEYS:
                if not isinstance(value, str):
                    raise ConfigurationError(f"{source}: '{key}' must be a string")
            elif key == "timeout":
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigurationError(f"{source}: 'timeout' must be a number")
                value = float(value)
            elif key == "exclude_dirs":
                if not isinstance(value, list):
                    raise ConfigurationError(f"{source}: 'exclude_dirs' must be a list")
                value = [str(v) for v in value]
            else:
                raise ConfigurationError(f"{source}: unknown setting '{key}'")
            setattr(self, key, value)

    def require_gopath(self) -> Path:
        """
        Return the workspace root.

        Raises:
            ConfigurationError: If no GOPATH is configured
        """
        if self.gopath is None:
            raise ConfigurationError(
                "gopath not set. Set the GOPATH environment variable or use --gopath"
            )
        return self.gopath


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Read settings from a TOML file.

    Settings may be given at the top level or under an [importer] table.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Could not read configuration file {path}: {e}") from e

    table = data.get("importer", data)
    if not isinstance(table, dict):
        raise ConfigurationError(f"{path}: [importer] must be a table")
    return table


def load_config(
    config_file: Path | None = None,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
    search_from: Path | None = None,
) -> ImporterConfig:
    """
    Build the configuration for a run.

    Args:
        config_file: Explicit configuration file (default: gx-import.toml found from search_from)
        overrides: Command-line values; None values are ignored
        environ: Environment variables (default: os.environ)
        search_from: Directory where the configuration file search starts (default: cwd)

    Returns:
        The merged configuration
    """
    environ = os.environ if environ is None else environ
    config = ImporterConfig()

    if config_file is None:
        config_file = find_config_file(search_from)
    elif not Path(config_file).is_file():
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    if config_file is not None:
        config.update(read_config_file(config_file), source=str(config_file))

    config.update(
        {
            # Only the first workspace of a GOPATH list receives downloads
            "gopath": environ.get("GOPATH", "").split(os.pathsep)[0] or None,
            "store_dir": environ.get("GX_IMPORT_STORE") or None,
        },
        source="environment",
    )
    config.update(overrides or {}, source="command line")
    return config
