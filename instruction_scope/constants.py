from typing import Final


APP_NAME: Final[str] = "instruction-scope"
CONFIG_FILENAME: Final[str] = "config.json"

DEFAULT_INSTRUCTIONS_DIR: Final[str] = ".github/instructions"
DEFAULT_DOCUMENT_SUFFIX: Final[str] = ".instructions.md"
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"

APPLY_TO_KEY: Final[str] = "applyTo"
DESCRIPTION_KEY: Final[str] = "description"

SECTION_SEPARATOR: Final[str] = "\n\n---\n\n"

REGISTRY_IGNORED_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    ".venv",
)
