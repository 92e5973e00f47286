"""
Record of published packages that survives between runs.

A journal is a JSON-lines file with one record per published root. Seeding
a run from it lets a rerun after a failure skip the packages that were
already published.
"""

from __future__ import annotations

import json
from pathlib import Path

from .errors import ImporterError
from .types import Dependency


class PublishJournal:
    """
    Append-only log of published import paths.

    Attributes:
        path: Location of the journal file
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Dependency]:
        """
        Read all records from the journal.

        Later records for the same root replace earlier ones.

        Returns:
            Mapping of grouped import path to its published handle (empty if the file is missing)

        Raises:
            ImporterError: If a record is malformed
        """
        if not self.path.exists():
            return {}

        entries: dict[str, Dependency] = {}
        with self.path.open(encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                    root = record.pop("root")
                    entries[root] = Dependency.from_dict(record)
                except (json.JSONDecodeError, AttributeError, KeyError, TypeError) as e:
                    raise ImporterError(
                        f"Invalid journal record at {self.path}:{line_number}: {e}"
                    ) from e
        return entries

    def record(self, root: str, dep: Dependency) -> None:
        """Append a published package to the journal."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps({"root": root, **dep.to_dict()}) + "\n")
