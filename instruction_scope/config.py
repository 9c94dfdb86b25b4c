import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft202012Validator

from instruction_scope.constants import (
    APP_NAME,
    CONFIG_FILENAME,
    DEFAULT_DOCUMENT_SUFFIX,
    DEFAULT_INSTRUCTIONS_DIR,
    DEFAULT_LOG_LEVEL,
)
from instruction_scope.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from instruction_scope.utils import format_schema_error, read_json


CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "instructionsDir": {"type": "string", "minLength": 1},
        "suffix": {"type": "string", "minLength": 1},
        "logLevel": {"enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Settings:
    instructions_dir: str = DEFAULT_INSTRUCTIONS_DIR
    suffix: str = DEFAULT_DOCUMENT_SUFFIX
    log_level: str = DEFAULT_LOG_LEVEL

    def resolve_root(self, workspace: Path) -> Path:
        root = Path(self.instructions_dir).expanduser()
        if root.is_absolute():
            return root
        return workspace / root

    def as_dict(self) -> dict[str, str]:
        return {
            "instructionsDir": self.instructions_dir,
            "suffix": self.suffix,
            "logLevel": self.log_level,
        }


class ConfigRepository:
    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or (Path.home() / ".config" / APP_NAME)
        self._validator = Draft202012Validator(CONFIG_SCHEMA)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    def load_settings(self) -> Settings:
        path = self.config_path
        if not path.exists() or path.stat().st_size == 0:
            return Settings()
        try:
            payload = read_json(path)
        except json.JSONDecodeError as exc:
            raise InvalidJsonFormatError(path, exc.msg) from exc

        errors = sorted(self._validator.iter_errors(payload), key=lambda error: list(error.path))
        if errors:
            raise InvalidConfigSchemaError(path, format_schema_error(errors[0]))

        return Settings(
            instructions_dir=payload.get("instructionsDir", DEFAULT_INSTRUCTIONS_DIR),
            suffix=payload.get("suffix", DEFAULT_DOCUMENT_SUFFIX),
            log_level=payload.get("logLevel", DEFAULT_LOG_LEVEL),
        )
