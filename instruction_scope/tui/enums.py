from enum import Enum


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"


class OutputFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    IDS = "ids"
