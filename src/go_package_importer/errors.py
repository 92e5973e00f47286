"""
Exception types raised while importing packages.

Errors fall into a few groups: environment problems (configuration),
tolerated absence of Go source (parse or fetch reports nothing to build),
manifest and backend failures, and dependency cycles between packages.
Plain I/O failures are left as the builtin OSError subclasses.
"""

from __future__ import annotations

NO_BUILDABLE_SOURCE_MESSAGE = "no buildable Go source files"


class ImporterError(Exception):
    """Base class for all errors raised by go_package_importer."""


class ConfigurationError(ImporterError):
    """The environment or configuration file is missing or invalid."""


class NoBuildableSourceError(ImporterError):
    """A directory contains no Go source files to parse."""

    def __init__(self, directory: object) -> None:
        super().__init__(f"{NO_BUILDABLE_SOURCE_MESSAGE} in {directory}")
        self.directory = directory


class SourceParseError(ImporterError):
    """A Go source file has a malformed import declaration."""


class FetchError(ImporterError):
    """Fetching the source of an import path failed."""

    @property
    def no_buildable_source(self) -> bool:
        """True when the failure only reports that there is no Go code to build."""
        return NO_BUILDABLE_SOURCE_MESSAGE in str(self)


class ManifestError(ImporterError):
    """A package manifest could not be read, written or created."""


class ManifestNotFoundError(ManifestError, FileNotFoundError):
    """No package manifest exists at the given location."""


class PublishError(ImporterError):
    """The publish backend failed to publish a package."""


class DependencyCycleError(ImporterError):
    """Two or more packages depend on each other."""

    def __init__(self, chain: list[str]) -> None:
        super().__init__("dependency cycle detected: " + " -> ".join(chain))
        self.chain = chain
