"""
Import management functionality.

This module provides the Importer class which orchestrates the whole import
process: fetching a package, creating its manifest, publishing every
dependency it references, rewriting its imports and publishing it.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .config import ImporterConfig
from .errors import DependencyCycleError, FetchError, ManifestNotFoundError
from .fetcher import Fetcher, GoGetFetcher, LocalFetcher, package_location
from .finder import DependencyWalker
from .journal import PublishJournal
from .manifest import ManifestStore
from .publisher import PublishBackend, create_backend
from .rewriter import go_source_filter, rewrite_imports
from .types import Dependency, PackageManifest
from .utils import group_root, is_foreign, is_subpath, prompt


@dataclass
class PublishContext:
    """
    State shared by all publish calls of one run.

    Attributes:
        resolved: Published handle of every grouped import path seen so far
        in_progress: Grouped import paths currently being published, outermost first
        journal: Optional journal that receives every newly published package
    """

    resolved: dict[str, Dependency] = field(default_factory=dict)
    in_progress: list[str] = field(default_factory=list)
    journal: PublishJournal | None = None

    def remember(self, root: str, dep: Dependency) -> None:
        self.resolved[root] = dep
        if self.journal is not None:
            self.journal.record(root, dep)


class Importer:
    """
    Publishes Go packages and their dependencies as content-addressed packages.

    This is the main class for using the package. Publishing is depth-first:
    every dependency of a package is published, and its handle added to the
    package manifest, before the package itself is published. Each grouped
    import path is published at most once per run.

    Attributes:
        gopath: Workspace root; package sources live in <gopath>/src/<import path>
        fetcher: Makes package sources available in the workspace
        backend: Publishes a package directory and returns its hash
        manifests: Loads, saves and creates package manifests
        walker: Collects the dependencies of a package
        rewrite: Rewrite imports to published dependency paths before publishing
        yes_all: Use default package names without prompting
        author: Author written into newly created manifests
        context: Run state used when publish() is called without one
    """

    def __init__(
        self,
        gopath: Path,
        fetcher: Fetcher,
        backend: PublishBackend,
        manifests: ManifestStore | None = None,
        walker: DependencyWalker | None = None,
        rewrite: bool = False,
        yes_all: bool = False,
        prompter: Callable[[str, str], str] = prompt,
        author: str = "",
        journal: PublishJournal | None = None,
        is_foreign: Callable[[str], bool] = is_foreign,
    ) -> None:
        """
        Initialize the importer.

        Args:
            gopath: Workspace root
            fetcher: Source fetcher
            backend: Publish backend
            manifests: Manifest store (default: ManifestStore())
            walker: Dependency walker (default: DependencyWalker(is_foreign=is_foreign))
            rewrite: Rewrite imports before publishing
            yes_all: Never prompt for package names
            prompter: Function asking the user for a value, given a message and a default
            author: Author for newly created manifests
            journal: Journal of published packages used to seed and extend each run
            is_foreign: Predicate selecting the imports that are dependencies, used by the
                default walker
        """
        self.gopath = Path(gopath)
        self.fetcher = fetcher
        self.backend = backend
        self.manifests = manifests or ManifestStore()
        self.walker = walker or DependencyWalker(is_foreign=is_foreign)
        self.rewrite = rewrite
        self.yes_all = yes_all
        self.prompter = prompter
        self.author = author
        self.journal = journal
        self.context = self.new_context()

    @classmethod
    def from_config(cls, config: ImporterConfig) -> Importer:
        """
        Create an importer from a configuration.

        Raises:
            ConfigurationError: If no GOPATH is configured
        """
        gopath = config.require_gopath()
        if config.fetch:
            fetcher: Fetcher = GoGetFetcher(gopath, config.go_command, timeout=config.timeout)
        else:
            fetcher = LocalFetcher(gopath)

        backend = create_backend(
            config.backend,
            store_dir=config.store_dir,
            gx_command=config.gx_command,
            timeout=config.timeout,
        )
        return cls(
            gopath,
            fetcher,
            backend,
            walker=DependencyWalker(exclude_dirs=config.exclude_dirs),
            rewrite=config.rewrite,
            yes_all=config.yes,
            author=config.author,
            journal=PublishJournal(config.journal) if config.journal else None,
        )

    def new_context(self) -> PublishContext:
        """Create the state for a new run, seeded from the journal if there is one."""
        context = PublishContext(journal=self.journal)
        if self.journal is not None:
            context.resolved.update(self.journal.load())
        return context

    def package_location(self, import_path: str) -> Path:
        return package_location(self.gopath, import_path)

    def publish(self, import_path: str, context: PublishContext | None = None) -> Dependency:
        """
        Publish the logical package owning an import path, dependencies first.

        Steps:
        1. Group the path to its repository root; return the cached handle if
           the root was already published in this run
        2. Fetch the sources (a fetch that finds no Go files is tolerated)
        3. Load the manifest, creating it if missing
        4. Publish every dependency and append its handle to the manifest
        5. Save the manifest
        6. Rewrite imports to the published dependency paths (if enabled)
        7. Publish the package and cache its handle

        Any failure, including one in a dependency, aborts the call before the
        package itself is published. Dependencies published before the failure
        stay published.

        Args:
            import_path: Import path of the package or of any directory inside it
            context: Run state (default: the importer's own context)

        Returns:
            Handle of the published package

        Raises:
            DependencyCycleError: If the package transitively depends on itself
            FetchError: If fetching fails
            ManifestError: If a manifest cannot be read or created
            PublishError: If the backend fails
            OSError: If the workspace cannot be read or written
        """
        if context is None:
            context = self.context

        root = group_root(import_path)
        if root in context.resolved:
            return context.resolved[root]
        if root in context.in_progress:
            cycle_start = context.in_progress.index(root)
            raise DependencyCycleError(context.in_progress[cycle_start:] + [root])

        context.in_progress.append(root)
        try:
            dep = self._publish_root(root, context)
        finally:
            context.in_progress.pop()

        context.remember(root, dep)
        return dep

    def _publish_root(self, root: str, context: PublishContext) -> Dependency:
        # sources must be in the workspace before they are parsed
        try:
            self.fetcher.fetch(root)
        except FetchError as e:
            if not e.no_buildable_source:
                raise

        location = self.package_location(root)
        manifest = self._load_or_init_manifest(root, location)

        deps = sorted(self.walker.collect_dependencies(root, location))
        for n, child in enumerate(deps, start=1):
            print(f"- processing dep {child} for {root} [{n} / {len(deps)}]")
            if is_subpath(child, root):
                continue
            child_dep = self.publish(child, context)
            manifest.set_dependency(child_dep)

        self.manifests.save(manifest, location)

        if self.rewrite:
            self._rewrite_imports(location.resolve(), context)

        content_hash = self.backend.publish(location, manifest)
        print(f"published {root} as {content_hash}")

        return Dependency(hash=content_hash, name=manifest.name, version=manifest.version)

    def _load_or_init_manifest(self, root: str, location: Path) -> PackageManifest:
        try:
            return self.manifests.load(location)
        except ManifestNotFoundError:
            pass

        name = root.split("/")[-1]
        if not self.yes_all:
            name = self.prompter(f"enter name for import '{root}'", name)

        self.manifests.init(location, name, "go", author=self.author, dvcs_import=root)
        return self.manifests.load(location)

    def _rewrite_imports(self, location: Path, context: PublishContext) -> None:
        def substitute(import_path: str) -> str:
            dep = context.resolved.get(import_path)
            if dep is None:
                return import_path
            return dep.import_path

        rewrite_imports(location, substitute, go_source_filter)

    def import_packages(self, import_paths: Iterable[str]) -> list[tuple[str, Dependency]]:
        """
        Publish several packages within one run.

        Args:
            import_paths: Import paths to publish

        Returns:
            List of (import path, handle) pairs in input order
        """
        results = []
        for import_path in import_paths:
            try:
                dep = self.publish(import_path)
            except Exception as e:
                print(f"Error importing {import_path}: {e}", file=sys.stderr)
                raise
            results.append((import_path, dep))
        return results
