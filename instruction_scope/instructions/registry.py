"""Load instruction documents from a directory tree into snapshots."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from instruction_scope.constants import DEFAULT_DOCUMENT_SUFFIX, REGISTRY_IGNORED_DIRS
from instruction_scope.errors import InstructionFileError, InvalidPatternError, RegistryLoadError
from instruction_scope.instructions.models import InstructionDocument, InstructionSnapshot
from instruction_scope.instructions.parser import document_id, parse_instruction

logger = logging.getLogger(__name__)


def discover_documents(root: Path, suffix: str = DEFAULT_DOCUMENT_SUFFIX) -> list[Path]:
    """Return document paths under ``root`` in lexicographic id order."""
    found: list[Path] = []
    for current, dir_names, file_names in os.walk(str(root), topdown=True):
        dir_names[:] = [name for name in dir_names if not name.startswith(".") and name not in REGISTRY_IGNORED_DIRS]
        for file_name in file_names:
            if file_name.startswith(".") or not file_name.endswith(suffix):
                continue
            found.append(Path(current) / file_name)
    return sorted(found, key=lambda path: document_id(path, root, suffix))


def load(root: Path, suffix: str = DEFAULT_DOCUMENT_SUFFIX) -> InstructionSnapshot:
    """Load every document under ``root``.

    Every file is attempted. If any fail, :class:`RegistryLoadError` is raised
    with one entry per failing file and nothing is returned.
    """
    if not root.exists():
        logger.warning("Instruction root does not exist: %s", root)
        return InstructionSnapshot(root=root)
    if not root.is_dir():
        raise RegistryLoadError(root, [InstructionFileError(root, "Instruction root is not a directory")])

    documents: list[InstructionDocument] = []
    failures: list[InstructionFileError | InvalidPatternError] = []
    for path in discover_documents(root, suffix):
        logger.debug("Parsing instruction document %s", path)
        try:
            document = parse_instruction(path, root, suffix)
        except (InstructionFileError, InvalidPatternError) as exc:
            logger.debug("Failed to parse %s: %s", path, exc)
            failures.append(exc)
            continue
        except OSError as exc:
            failures.append(InstructionFileError(path, f"Cannot read document ({exc.strerror})"))
            continue
        if not document.metadata.active_patterns:
            logger.warning("Instruction document %s has an empty applyTo and matches nothing", document.id)
        documents.append(document)

    if failures:
        raise RegistryLoadError(root, failures)

    logger.info("Loaded %d instruction document(s) from %s", len(documents), root)
    return InstructionSnapshot(root=root, documents=tuple(documents))


class InstructionRegistry:
    """Holds the current snapshot for one instruction root.

    ``reload`` builds a complete snapshot before publishing it, so readers
    holding ``snapshot`` never observe a partially loaded set.
    """

    def __init__(self, root: Path, suffix: str = DEFAULT_DOCUMENT_SUFFIX) -> None:
        self._root = root
        self._suffix = suffix
        self._lock = threading.Lock()
        self._snapshot: Optional[InstructionSnapshot] = None

    @property
    def snapshot(self) -> InstructionSnapshot:
        current = self._snapshot
        if current is None:
            return self.reload()
        return current

    def reload(self) -> InstructionSnapshot:
        fresh = load(self._root, self._suffix)
        with self._lock:
            self._snapshot = fresh
        return fresh
