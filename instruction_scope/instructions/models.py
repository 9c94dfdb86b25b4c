"""Instruction document data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional


@dataclass(frozen=True)
class InstructionMetadata:
    apply_to: tuple[str, ...] = ()
    description: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def active_patterns(self) -> tuple[str, ...]:
        return tuple(pattern for pattern in self.apply_to if pattern)


@dataclass(frozen=True)
class InstructionDocument:
    id: str
    source_path: Path
    metadata: InstructionMetadata
    body: str

    @property
    def description(self) -> str:
        return self.metadata.description

    @property
    def apply_to(self) -> tuple[str, ...]:
        return self.metadata.apply_to


@dataclass(frozen=True)
class InstructionSnapshot:
    """Immutable, ordered set of documents loaded from one root."""

    root: Path
    documents: tuple[InstructionDocument, ...] = ()

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[InstructionDocument]:
        return iter(self.documents)

    def ids(self) -> list[str]:
        return [document.id for document in self.documents]

    def get(self, document_id: str) -> Optional[InstructionDocument]:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None
