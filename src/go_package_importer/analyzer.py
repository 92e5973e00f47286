"""
Import analysis functionality.

This module provides the GoSourceAnalyzer class which is responsible for:
- Finding the Go source files of a package directory
- Extracting import specs from the header of each Go file
- Computing the set of import paths referenced by a buildable package
"""

from __future__ import annotations

import re
from pathlib import Path

from .errors import NoBuildableSourceError, SourceParseError
from .types import ImportInfo

BYTE_ORDER_MARK = "\ufeff"

_IDENTIFIER = re.compile(r"[^\W\d]\w*")
_INTERPRETED_STRING = re.compile(r'"(?:[^"\\\n]|\\.)*"')
_RAW_STRING = re.compile(r"`[^`]*`")
_IGNORE_CONSTRAINT = re.compile(r"^\ufeff?//(?:go:build|\s*\+build)\s+ignore\s*$", re.MULTILINE)


class _HeaderScanner:
    """
    Reads the package clause and import declarations at the top of a Go file.

    Only the file header is scanned: scanning stops at the first top-level
    declaration that is not an import, which is where Go requires imports to end.
    """

    def __init__(self, content: str, file_path: Path | None = None) -> None:
        self.content = content
        self.file_path = file_path
        self.pos = 0
        self.package_pos = -1

    def _error(self, message: str) -> SourceParseError:
        line = self.content.count("\n", 0, self.pos) + 1
        return SourceParseError(f"{self.file_path or '<source>'}:{line}: {message}")

    def _skip(self) -> None:
        """Skip whitespace, semicolons and comments."""
        content = self.content
        while self.pos < len(content):
            char = content[self.pos]
            if char.isspace() or char == ";":
                self.pos += 1
            elif content.startswith("//", self.pos):
                end = content.find("\n", self.pos)
                self.pos = len(content) if end == -1 else end + 1
            elif content.startswith("/*", self.pos):
                end = content.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error("comment not terminated")
                self.pos = end + 2
            else:
                return

    def _peek_identifier(self) -> str | None:
        match = _IDENTIFIER.match(self.content, self.pos)
        return match.group(0) if match else None

    def _read_identifier(self) -> str:
        name = self._peek_identifier()
        if name is None:
            raise self._error("expected identifier")
        self.pos += len(name)
        return name

    def _read_spec(self) -> ImportInfo:
        # "_" matches the identifier pattern, "." has to be checked separately
        alias = None
        if self.content.startswith(".", self.pos):
            alias = "."
            self.pos += 1
        elif self._peek_identifier() is not None:
            alias = self._read_identifier()
        self._skip()

        match = _INTERPRETED_STRING.match(self.content, self.pos) or _RAW_STRING.match(
            self.content, self.pos
        )
        if match is None:
            raise self._error("missing import path")

        start, end = match.span()
        import_path = match.group(0)[1:-1]
        if not import_path:
            raise self._error("invalid import path: empty string")
        self.pos = end
        return ImportInfo(
            import_path=import_path,
            alias=alias,
            line_number=self.content.count("\n", 0, start) + 1,
            file_path=self.file_path,
            start=start,
            end=end,
        )

    def scan(self) -> list[ImportInfo]:
        if self.content.startswith(BYTE_ORDER_MARK):
            self.pos = len(BYTE_ORDER_MARK)
        self._skip()
        if self._peek_identifier() != "package":
            raise self._error("expected 'package'")
        self.package_pos = self.pos
        self.pos += len("package")
        self._skip()
        self._read_identifier()

        imports: list[ImportInfo] = []
        while True:
            self._skip()
            if self._peek_identifier() != "import":
                return imports
            self.pos += len("import")
            self._skip()

            if not self.content.startswith("(", self.pos):
                imports.append(self._read_spec())
                continue

            self.pos += 1
            while True:
                self._skip()
                if self.pos >= len(self.content):
                    raise self._error("import group not terminated")
                if self.content.startswith(")", self.pos):
                    self.pos += 1
                    break
                imports.append(self._read_spec())


class GoSourceAnalyzer:
    """
    Analyzes Go source files to extract their import paths.

    A directory is one Go package. Its imports are the union of the imports
    of its buildable files; test files and files excluded with an "ignore"
    build constraint do not contribute.
    """

    def find_go_files(self, directory: Path) -> list[Path]:
        """
        Find the Go source files directly inside a directory.

        Files whose names start with "_" or "." are ignored, like the go tool does.

        Args:
            directory: Package directory

        Returns:
            Sorted list of .go files

        Raises:
            OSError: If the directory cannot be read
        """
        return sorted(
            path
            for path in Path(directory).iterdir()
            if path.suffix == ".go" and path.is_file() and not path.name.startswith(("_", "."))
        )

    def _read_source(self, file_path: Path) -> str:
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SourceParseError(f"Could not decode {file_path}: {e}") from e

    def scan_imports(self, content: str, file_path: Path | None = None) -> list[ImportInfo]:
        """
        Extract all import specs from Go source text.

        Args:
            content: Source text of one Go file
            file_path: Path reported in ImportInfo objects and error messages

        Returns:
            List of ImportInfo objects in source order

        Raises:
            SourceParseError: If the package clause or an import declaration is malformed
        """
        return _HeaderScanner(content, file_path).scan()

    def extract_imports(self, file_path: Path) -> list[ImportInfo]:
        """
        Extract all import specs from a Go file.

        Args:
            file_path: Path to the Go file to analyze

        Returns:
            List of ImportInfo objects representing all imports found in the file
        """
        return self.scan_imports(self._read_source(file_path), file_path)

    @staticmethod
    def has_ignore_constraint(content: str) -> bool:
        """Check for a "//go:build ignore" or "// +build ignore" line before the package clause."""
        package = re.search(r"^\ufeff?\s*package\b", content, re.MULTILINE)
        header = content[: package.start()] if package else content
        return _IGNORE_CONSTRAINT.search(header) is not None

    def parse_unit(self, directory: Path) -> set[str]:
        """
        Compute the import paths referenced by the Go package in a directory.

        Args:
            directory: Package directory

        Returns:
            Set of distinct import paths used by the buildable files

        Raises:
            NoBuildableSourceError: If the directory holds no buildable Go files
            SourceParseError: If a Go file cannot be parsed
            OSError: If the directory cannot be read
        """
        imports: set[str] = set()
        buildable = False
        has_tests = False

        for file_path in self.find_go_files(directory):
            if file_path.name.endswith("_test.go"):
                has_tests = True
                continue

            content = self._read_source(file_path)
            if self.has_ignore_constraint(content):
                continue

            buildable = True
            imports.update(imp.import_path for imp in self.scan_imports(content, file_path))

        if not buildable and not has_tests:
            raise NoBuildableSourceError(directory)
        return imports
