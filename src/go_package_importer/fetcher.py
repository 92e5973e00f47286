"""
Source fetching functionality.

This module provides fetchers that make the source of an import path
available under the workspace (GOPATH) source directory.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Protocol

from .errors import FetchError


class Fetcher(Protocol):
    def fetch(self, import_path: str) -> None: ...


def package_location(gopath: Path, import_path: str) -> Path:
    """Directory holding the source of an import path inside a GOPATH workspace."""
    return Path(gopath) / "src" / import_path


class GoGetFetcher:
    """
    Downloads packages with "go get".

    The command runs in GOPATH mode so sources land in <gopath>/src/<import path>.

    Attributes:
        gopath: Workspace root
        go_command: Go executable to invoke
        timeout: Seconds to wait for the command, or None to wait indefinitely
    """

    def __init__(self, gopath: Path, go_command: str = "go", timeout: float | None = None) -> None:
        self.gopath = Path(gopath)
        self.go_command = go_command
        self.timeout = timeout

    def fetch(self, import_path: str) -> None:
        """
        Download the source of an import path.

        Args:
            import_path: Import path to download

        Raises:
            FetchError: If go is not installed, times out, or reports a failure
        """
        env = dict(os.environ, GOPATH=str(self.gopath), GO111MODULE="off")
        cmd = [self.go_command, "get", "-d", import_path]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                env=env,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise FetchError(f"go get failed: {self.go_command} not found") from e
        except subprocess.TimeoutExpired as e:
            raise FetchError(f"go get failed: timed out after {self.timeout}s") from e

        if result.returncode != 0:
            output = (result.stdout + result.stderr).strip()
            raise FetchError(f"go get failed: {output} - exit status {result.returncode}")


class LocalFetcher:
    """
    Uses packages already present in the workspace without downloading anything.

    Attributes:
        gopath: Workspace root
    """

    def __init__(self, gopath: Path) -> None:
        self.gopath = Path(gopath)

    def fetch(self, import_path: str) -> None:
        location = package_location(self.gopath, import_path)
        if not location.is_dir():
            raise FetchError(f"package {import_path} not found in workspace: {location}")
