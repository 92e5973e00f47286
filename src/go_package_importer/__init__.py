"""Go package importer - Publish Go packages and their dependencies as content-addressed packages."""

from .analyzer import GoSourceAnalyzer
from .config import ImporterConfig, load_config
from .fetcher import GoGetFetcher, LocalFetcher
from .finder import DependencyWalker
from .journal import PublishJournal
from .manager import Importer, PublishContext
from .manifest import ManifestStore
from .publisher import ContentStoreBackend, GxCommandBackend
from .rewriter import rewrite_imports, update_imports
from .types import Dependency, ImportInfo, PackageManifest
from .utils import group_root, is_foreign

__all__ = (
    "ContentStoreBackend",
    "Dependency",
    "DependencyWalker",
    "GoGetFetcher",
    "GoSourceAnalyzer",
    "GxCommandBackend",
    "ImportInfo",
    "Importer",
    "ImporterConfig",
    "LocalFetcher",
    "ManifestStore",
    "PackageManifest",
    "PublishContext",
    "PublishJournal",
    "group_root",
    "is_foreign",
    "load_config",
    "rewrite_imports",
    "update_imports",
)
