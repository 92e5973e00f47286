"""
Allow running the package as a module.

This module enables running the package with:
    python -m go_package_importer

It simply delegates to the main() function from go_package_importer.py.
"""

import sys

from .go_package_importer import main

if __name__ == "__main__":
    sys.exit(main())
