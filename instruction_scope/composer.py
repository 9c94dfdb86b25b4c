"""Compose matched instruction documents into a context blob."""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Sequence

from instruction_scope.constants import SECTION_SEPARATOR
from instruction_scope.instructions.models import InstructionDocument

_LEADING_BLANK_LINES_RE = re.compile(r"\A(?:[ \t]*\r?\n)+")


class IContextComposer(ABC):
    @abstractmethod
    def compose(self, documents: Sequence[InstructionDocument], target_path: str = "") -> str:
        """Return the context text for ``documents``."""


class MarkdownContextComposer(IContextComposer):
    """One ``## <id>`` section per document, separated by horizontal rules."""

    def compose(self, documents: Sequence[InstructionDocument], target_path: str = "") -> str:
        if not documents:
            return ""
        sections = [self._render_section(document) for document in documents]
        return SECTION_SEPARATOR.join(sections) + "\n"

    @staticmethod
    def _render_section(document: InstructionDocument) -> str:
        # Leading blank lines are dropped; indentation of the first line is content.
        body = _LEADING_BLANK_LINES_RE.sub("", document.body)
        return f"## {document.id}\n\n{body}".rstrip()


class JsonContextComposer(IContextComposer):
    """Machine readable payload for tooling that injects context itself."""

    def compose(self, documents: Sequence[InstructionDocument], target_path: str = "") -> str:
        payload = {
            "path": target_path,
            "instructions": [
                {
                    "id": document.id,
                    "description": document.description,
                    "applyTo": list(document.apply_to),
                    "body": document.body,
                }
                for document in documents
            ],
        }
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def compose(documents: Sequence[InstructionDocument]) -> str:
    return MarkdownContextComposer().compose(documents)
