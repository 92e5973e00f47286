"""
Main entry point for the go-package-importer package.

This module provides the command-line interface for the package.
It can be invoked via:
- The `go-package-importer` command (after installation)
- `python -m go_package_importer`
- Direct import and call to main()
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .manager import Importer
from .publisher import Backend
from .rewriter import update_imports


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import Go packages and their dependencies as content-addressed packages"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser(
        "import",
        help="Publish Go packages and all of their dependencies",
    )
    import_parser.add_argument(
        "import_paths",
        nargs="+",
        metavar="PATH",
        help="Go import path to publish (e.g., github.com/user/repo)",
    )
    import_parser.add_argument(
        "--rewrite",
        action="store_true",
        default=None,
        help="Rewrite imports to the published paths of their dependencies",
    )
    import_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        default=None,
        help="Use default package names without prompting",
    )
    import_parser.add_argument(
        "--gopath",
        type=Path,
        help="Workspace root (default: $GOPATH)",
    )
    import_parser.add_argument(
        "--store-dir",
        type=Path,
        help="Directory of the local content store (default: ~/.gx-import/store)",
    )
    import_parser.add_argument(
        "--backend",
        choices=[b.value for b in Backend],
        help="Publish backend (default: store)",
    )
    import_parser.add_argument(
        "--no-fetch",
        dest="fetch",
        action="store_false",
        default=None,
        help="Use packages already in the workspace instead of running go get",
    )
    import_parser.add_argument(
        "--journal",
        type=Path,
        help="Journal file of published packages; packages recorded there are not published again",
    )
    import_parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for go get and gx commands",
    )
    import_parser.add_argument(
        "--exclude-dir",
        action="append",
        dest="exclude_dirs",
        help="Additional directory name to skip when collecting dependencies. Can be specified multiple times.",
    )
    import_parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (default: gx-import.toml in the current or a parent directory)",
    )

    update_parser = subparsers.add_parser(
        "update",
        help="Change the import path of a dependency in all Go files of a directory",
    )
    update_parser.add_argument("old_import", metavar="OLD", help="Import path to replace")
    update_parser.add_argument("new_import", metavar="NEW", help="Replacement import path")
    update_parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Directory to update (default: current directory)",
    )

    return parser


def run_import(args: argparse.Namespace) -> int:
    overrides = {
        "gopath": args.gopath,
        "store_dir": args.store_dir,
        "backend": args.backend,
        "rewrite": args.rewrite,
        "yes": args.yes,
        "fetch": args.fetch,
        "journal": args.journal,
        "timeout": args.timeout,
        "exclude_dirs": args.exclude_dirs,
    }
    config = load_config(config_file=args.config, overrides=overrides)
    importer = Importer.from_config(config)

    for import_path, dep in importer.import_packages(args.import_paths):
        print(f"{import_path} -> {dep.hash}")
    return 0


def run_update(args: argparse.Namespace) -> int:
    root = (args.dir or Path.cwd()).resolve()
    modified = update_imports(root, args.old_import, args.new_import)
    print(f"Updated imports in {len(modified)} files")
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the importer.

    Parses command-line arguments and runs the selected command.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "import":
            return run_import(args)
        return run_update(args)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
