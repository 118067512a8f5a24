"""
Console output with an indent for continuation lines and a log level filter.
"""

import rich.console

from textengine.config import Config
from textengine.errors import TextEngineError

ERROR = 1
WARNING = 2
INFO = 3

styles = {
    WARNING: "yellow",
    INFO: "dim",
}


class Console:
    def __init__(self, config: Config | None = None, console: rich.console.Console | None = None):
        self.config = config or Config()
        self.console = console or rich.console.Console(highlight=False)

    def out(self, first, *rest, style: str | None = None):
        """
        Print the first argument as is and every following one on its own line,
        prefixed with the configured indent.
        """
        text = "\n".join([str(first)] + [f"{self.config.output_indent}{arg}" for arg in rest])
        self.console.print(text, style=style, markup=False, highlight=False)

    def log(self, level: int, first, *rest):
        """
        Log to the console. Level 1 always raises, level 2 is a warning, level 3 is info.
        Warnings and info are dropped when above the configured log level.
        """
        if level == ERROR:
            raise TextEngineError(str(first))
        if level < ERROR or level > self.config.log_level:
            return
        self.out(first, *rest, style=styles.get(level))

    def warning(self, first, *rest):
        self.log(WARNING, first, *rest)

    def info(self, first, *rest):
        self.log(INFO, first, *rest)
