"""Decide which instruction documents apply to a file path."""

from __future__ import annotations

import re
from typing import Iterable

from instruction_scope.instructions.models import InstructionDocument
from instruction_scope.matching.glob import pattern_matches

_DUPLICATE_SLASHES_RE = re.compile(r"/{2,}")


def normalize_target_path(path: str) -> str:
    normalized = _DUPLICATE_SLASHES_RE.sub("/", path.replace("\\", "/"))
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def explain(document: InstructionDocument, target_path: str) -> tuple[str, ...]:
    """Return the patterns of ``document`` that match ``target_path``."""
    path = normalize_target_path(target_path)
    if not path:
        return ()
    return tuple(pattern for pattern in document.metadata.apply_to if pattern_matches(pattern, path))


def match(documents: Iterable[InstructionDocument], target_path: str) -> tuple[InstructionDocument, ...]:
    """Return the documents applicable to ``target_path`` in their given order."""
    path = normalize_target_path(target_path)
    if not path:
        return ()
    return tuple(
        document
        for document in documents
        if any(pattern_matches(pattern, path) for pattern in document.metadata.apply_to)
    )
