"""Parse instruction documents with YAML frontmatter."""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from instruction_scope.constants import APPLY_TO_KEY, DEFAULT_DOCUMENT_SUFFIX, DESCRIPTION_KEY
from instruction_scope.errors import InvalidPatternError, MalformedDocumentError
from instruction_scope.instructions.models import InstructionDocument, InstructionMetadata
from instruction_scope.matching.glob import split_pattern_list, validate_pattern
from instruction_scope.utils import format_schema_error

_FRONTMATTER_RE = re.compile(r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

FRONTMATTER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": [APPLY_TO_KEY],
    "properties": {
        APPLY_TO_KEY: {
            "oneOf": [
                {"type": "string"},
                {"type": "null"},
                {"type": "array", "items": {"type": "string"}},
            ]
        },
        DESCRIPTION_KEY: {"type": ["string", "null"]},
    },
    "additionalProperties": True,
}

_VALIDATOR = Draft202012Validator(FRONTMATTER_SCHEMA)


def document_id(path: Path, root: Path, suffix: str = DEFAULT_DOCUMENT_SUFFIX) -> str:
    relative = path.relative_to(root).as_posix()
    if suffix and relative.endswith(suffix) and len(relative) > len(suffix):
        return relative[: -len(suffix)]
    return relative[: -len(path.suffix)] if path.suffix else relative


def parse_apply_to(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return split_pattern_list(value)
    patterns: list[str] = []
    for item in value:
        patterns.extend(split_pattern_list(str(item)))
    return tuple(patterns)


def split_frontmatter(path: Path, text: str) -> tuple[dict[str, Any], str]:
    """Return the parsed header mapping and the remaining body."""
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        raise MalformedDocumentError(path, "missing '---' metadata header")

    try:
        raw = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as exc:
        problem = getattr(exc, "problem", None) or str(exc)
        raise MalformedDocumentError(path, f"invalid metadata block: {problem}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise MalformedDocumentError(path, "metadata block must be a mapping of key: value pairs")

    errors = sorted(_VALIDATOR.iter_errors(raw), key=lambda error: list(error.path))
    if errors:
        raise MalformedDocumentError(path, format_schema_error(errors[0]))
    return raw, text[match.end() :]


def parse_instruction(path: Path, root: Path, suffix: str = DEFAULT_DOCUMENT_SUFFIX) -> InstructionDocument:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(path, f"not valid UTF-8 ({exc.reason})") from exc

    raw, body = split_frontmatter(path, text)
    apply_to = parse_apply_to(raw.get(APPLY_TO_KEY))
    for pattern in apply_to:
        try:
            validate_pattern(pattern)
        except InvalidPatternError as exc:
            raise exc.bind(path) from exc

    extra = MappingProxyType(
        {str(key): value for key, value in raw.items() if key not in (APPLY_TO_KEY, DESCRIPTION_KEY)}
    )
    metadata = InstructionMetadata(
        apply_to=apply_to,
        description=str(raw.get(DESCRIPTION_KEY) or ""),
        extra=extra,
    )
    return InstructionDocument(
        id=document_id(path, root, suffix),
        source_path=path,
        metadata=metadata,
        body=body,
    )
