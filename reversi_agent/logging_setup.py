"""Logging configuration for the CLI and the referee adapter."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RefereeCommentHandler(logging.StreamHandler):
    """Writes each record as a referee comment line: 'C <message>'.

    The referee treats any other stdout line as a move, so while playing
    against it every log line must go through here.
    """

    def __init__(self, stream=None):
        super().__init__(stream if stream is not None else sys.stdout)
        self.setFormatter(logging.Formatter("C %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            for line in self.format(record).splitlines() or ["C"]:
                self.stream.write(line if line.startswith("C ") else f"C {line}")
                self.stream.write(self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def configure_logging(enabled: bool = True, referee: bool = False,
                      level: int = logging.INFO, stream=None) -> logging.Handler:
    """Install one handler on the package logger and return it."""
    root = logging.getLogger("reversi_agent")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    if referee:
        handler = RefereeCommentHandler(stream)
    else:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level if enabled else logging.CRITICAL + 1)
    root.propagate = False
    return handler
