"""Compile ``applyTo`` glob patterns into regular expressions.

Supported syntax:

- ``*`` matches any run of characters except ``/``
- ``**`` matches any run of characters including ``/``; as a full path
  segment it stands for zero or more segments (``**/`` and a trailing ``/**``
  may match nothing)
- ``?`` matches exactly one character except ``/``
- ``{a,b}`` matches any one alternative, groups may nest
- ``[abc]``, ``[a-z]`` and ``[!abc]`` character classes
- ``\\`` escapes the next character

A pattern that is exactly ``*`` or ``**`` matches every path. Matching is
case-sensitive and anchored to the whole path.
"""

from __future__ import annotations

import functools
import re

from instruction_scope.errors import InvalidPatternError

MAX_BRACE_DEPTH = 10

_MATCH_ALL = re.compile(r".*", re.DOTALL)
_MATCH_ALL_PATTERNS = frozenset({"*", "**"})


def split_pattern_list(value: str) -> tuple[str, ...]:
    """Split a comma separated ``applyTo`` value.

    Commas inside brace groups and character classes belong to the pattern.

    Entries are whitespace trimmed. Empty entries are kept so callers can see
    them; they never match anything.
    """
    patterns: list[str] = []
    depth = 0
    current: list[str] = []
    escaped = False
    in_class = False
    class_start = False
    class_members = 0
    for char in value:
        if escaped:
            current.append(char)
            escaped = False
            class_start = False
            class_members += 1
            continue
        if char == "\\":
            current.append(char)
            escaped = True
            continue
        if in_class:
            # Same rules as _translate_class: a leading "]" is a member.
            if class_start and char in "!^":
                class_start = False
            elif char == "]" and class_members > 0:
                in_class = False
            else:
                class_start = False
                class_members += 1
            current.append(char)
            continue
        if char == "[":
            in_class = True
            class_start = True
            class_members = 0
        elif char == "{":
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
        elif char == "," and depth == 0:
            patterns.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    patterns.append("".join(current).strip())
    return tuple(patterns)


def _is_segment_start(pattern: str, index: int) -> bool:
    return index == 0 or pattern[index - 1] in "/{,"


def _is_segment_end(pattern: str, index: int) -> bool:
    return index >= len(pattern) or pattern[index] in "/},"


def _trailing_globstar_end(pattern: str, index: int, depth: int) -> int | None:
    """Return the index past a "/**" at ``index`` that ends an alternative."""
    end = index + 1
    while end < len(pattern) and pattern[end] == "*":
        end += 1
    if end - index - 1 < 2:
        return None
    if end >= len(pattern) or (depth > 0 and pattern[end] in ",}"):
        return end
    return None


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    index = start + 1
    negate = False
    if index < len(pattern) and pattern[index] in "!^":
        negate = True
        index += 1
    members: list[str] = []
    # A leading ']' is a literal member.
    if index < len(pattern) and pattern[index] == "]":
        members.append(r"\]")
        index += 1
    while index < len(pattern) and pattern[index] != "]":
        char = pattern[index]
        if char == "\\" and index + 1 < len(pattern):
            members.append(re.escape(pattern[index + 1]))
            index += 2
            continue
        if char == "-" and members and index + 1 < len(pattern) and pattern[index + 1] != "]":
            members.append("-")
        else:
            members.append(re.escape(char))
        index += 1
    if index >= len(pattern):
        raise InvalidPatternError(pattern, "unterminated character class")
    body = "".join(members)
    if negate:
        return f"[^/{body}]", index + 1
    return f"[{body}]", index + 1


def translate(pattern: str) -> str:
    """Return the regular expression source for ``pattern``."""
    parts: list[str] = []
    depth = 0
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "*":
            if index + 1 < length and pattern[index + 1] == "*":
                end = index + 2
                while end < length and pattern[end] == "*":
                    end += 1
                if _is_segment_start(pattern, index) and _is_segment_end(pattern, end):
                    if end < length and pattern[end] == "/":
                        parts.append("(?:.*/)?")
                        index = end + 1
                        continue
                parts.append(".*")
                index = end
                continue
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            fragment, index = _translate_class(pattern, index)
            parts.append(fragment)
            continue
        elif char == "{":
            depth += 1
            if depth > MAX_BRACE_DEPTH:
                raise InvalidPatternError(pattern, f"brace groups nested deeper than {MAX_BRACE_DEPTH}")
            parts.append("(?:")
        elif char == "}":
            if depth == 0:
                raise InvalidPatternError(pattern, "unbalanced '}'")
            depth -= 1
            parts.append(")")
        elif char == "," and depth > 0:
            parts.append("|")
        elif char == "/":
            end = _trailing_globstar_end(pattern, index, depth)
            if end is None:
                parts.append("/")
            else:
                # Trailing "/**" also matches the directory path itself.
                parts.append("(?:/.*)?")
                index = end
                continue
        elif char == "\\":
            if index + 1 >= length:
                raise InvalidPatternError(pattern, "dangling escape")
            parts.append(re.escape(pattern[index + 1]))
            index += 2
            continue
        else:
            parts.append(re.escape(char))
        index += 1
    if depth > 0:
        raise InvalidPatternError(pattern, "unterminated brace group")
    return "".join(parts)


@functools.lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile ``pattern``; return ``None`` for an empty pattern.

    Raises :class:`InvalidPatternError` for syntax the matcher cannot compile.
    """
    if not pattern:
        return None
    if pattern in _MATCH_ALL_PATTERNS:
        return _MATCH_ALL
    try:
        return re.compile(translate(pattern), re.DOTALL)
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


def validate_pattern(pattern: str) -> None:
    compile_pattern(pattern)


def pattern_matches(pattern: str, path: str) -> bool:
    compiled = compile_pattern(pattern)
    if compiled is None:
        return False
    return compiled.fullmatch(path) is not None
