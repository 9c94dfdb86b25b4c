from pathlib import Path
from typing import Optional, Sequence


class InstructionScopeError(Exception):
    """Base user-facing application error."""


class InstructionFileError(InstructionScopeError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MalformedDocumentError(InstructionFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Malformed instruction document ({detail})")


class InvalidPatternError(InstructionScopeError):
    def __init__(self, pattern: str, detail: str, path: Optional[Path] = None) -> None:
        self.pattern = pattern
        self.detail = detail
        self.path = path
        text = f"Invalid applyTo pattern {pattern!r} ({detail})"
        if path is not None:
            text = f"{text}: {path}"
        super().__init__(text)

    def bind(self, path: Path) -> "InvalidPatternError":
        return InvalidPatternError(self.pattern, self.detail, path=path)


class RegistryLoadError(InstructionScopeError):
    def __init__(self, root: Path, failures: Sequence[InstructionScopeError]) -> None:
        self.root = root
        self.failures = list(failures)
        lines = [f"{len(self.failures)} instruction document(s) failed to load from {root}"]
        lines.extend(f"- {failure}" for failure in self.failures)
        super().__init__("\n".join(lines))


class ConfigFileError(InstructionScopeError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidJsonFormatError(ConfigFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(ConfigFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")
