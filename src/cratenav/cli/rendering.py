from enum import Enum

import typer


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_LEVEL_ORDER = {
    "debug": 0,
    "info": 1,
    "success": 2,
    "warning": 3,
    "error": 4,
}


class CliRenderer:
    """
    Renders bus messages to the terminal, dropping those below `loglevel`.
    """

    def __init__(self, loglevel: LogLevel = LogLevel.INFO):
        self.threshold = _LEVEL_ORDER[loglevel.value]

    def render(self, message: str, level: str) -> None:
        if _LEVEL_ORDER.get(level, 1) < self.threshold:
            return

        color = None
        if level == "success":
            color = typer.colors.GREEN
        elif level == "warning":
            color = typer.colors.YELLOW
        elif level == "error":
            color = typer.colors.RED
        elif level == "debug":
            color = typer.colors.BRIGHT_BLACK

        typer.secho(message, fg=color)
