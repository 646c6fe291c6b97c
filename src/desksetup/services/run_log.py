"""Session logging for desksetup: coloured console lines plus a plain log file."""

import logging
from typing import Optional

from rich.console import Console
from rich.text import Text

_TAG_BY_LEVELNAME = {
    "WARNING": "WARN",
    "ERROR": "ERR",
    "CRITICAL": "ERR",
}


class TaggedFormatter(logging.Formatter):
    """Renders records as ``[HH:MM:SS] [TAG] message``."""

    def __init__(self):
        super().__init__("[%(asctime)s] [%(tag)s] %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, "tag"):
            return super().format(record)
        # Untagged records must stay untagged for SkipTaggedRecords.
        record.tag = _TAG_BY_LEVELNAME.get(record.levelname, record.levelname)
        try:
            return super().format(record)
        finally:
            del record.tag


class SkipTaggedRecords(logging.Filter):
    """Keeps records already printed by RunLogger off the console handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not hasattr(record, "tag")


class RunLogger:
    """Mirrors tagged run messages to the console and the session log."""

    STYLES = {
        "INFO": "blue",
        "OK": "green",
        "WARN": "yellow",
        "ERR": "red",
        "DRY": "yellow",
    }
    LABELS = {
        "INFO": "INFO",
        "OK": "OK",
        "WARN": "WARN",
        "ERR": "ERROR",
        "DRY": "DRY-RUN",
    }
    LEVELS = {
        "INFO": logging.INFO,
        "OK": logging.INFO,
        "WARN": logging.WARNING,
        "ERR": logging.ERROR,
        "DRY": logging.INFO,
    }

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def log(self, level: str, message: str, *args):
        if args:
            message = message % args
        if level not in self.STYLES:
            level = "INFO"

        self.console.print(Text(f"[{self.LABELS[level]}] {message}", style=self.STYLES[level]))
        self.logger.log(self.LEVELS[level], message, extra={"tag": level})

    def debug(self, message: str, *args):
        self.logger.debug(message, *args)

    def info(self, message: str, *args):
        self.log("INFO", message, *args)

    def ok(self, message: str, *args):
        self.log("OK", message, *args)

    def warning(self, message: str, *args):
        self.log("WARN", message, *args)

    def error(self, message: str, *args):
        self.log("ERR", message, *args)

    def dry(self, message: str, *args):
        self.log("DRY", message, *args)


def attach_log_file(logger: logging.Logger, path: str, verbose: bool = False) -> logging.FileHandler:
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    file_handler.setFormatter(TaggedFormatter())
    logger.addHandler(file_handler)
    return file_handler


def detach_log_file(logger: logging.Logger, handler: Optional[logging.Handler]):
    if handler is None:
        return
    logger.removeHandler(handler)
    handler.close()
