"""Initiate logging for pipealign."""

from __future__ import annotations

import logging
import logging.config
import sys
import textwrap
from pathlib import Path
from typing import TYPE_CHECKING

from prompt_toolkit.formatted_text.base import FormattedText
from prompt_toolkit.formatted_text.pygments import PygmentsTokens
from prompt_toolkit.formatted_text.utils import to_formatted_text
from prompt_toolkit.output.defaults import create_output
from prompt_toolkit.shortcuts.utils import print_formatted_text
from pygments.lexers.python import PythonTracebackLexer

from pipealign.core.style import build_style

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Any, TextIO

    from prompt_toolkit.formatted_text.base import StyleAndTextTuples
    from prompt_toolkit.styles.base import BaseStyle

    from pipealign.core.config import Config

log = logging.getLogger(__name__)


def dict_merge(target_dict: dict, input_dict: dict) -> None:
    """Merge the second dictionary onto the first."""
    for k in input_dict:
        if k in target_dict:
            if isinstance(target_dict[k], dict) and isinstance(input_dict[k], dict):
                dict_merge(target_dict[k], input_dict[k])
            elif isinstance(target_dict[k], list) and isinstance(input_dict[k], list):
                target_dict[k] = [*target_dict[k], *input_dict[k]]
            else:
                target_dict[k] = input_dict[k]
        else:
            target_dict[k] = input_dict[k]


class BufferedLogs(logging.Handler):
    """A handler that collects log records and replays them on exit."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize the collector.

        Args:
            logger: Logger to collect from and replay to. If None, uses root logger.
        """
        super().__init__()
        self.records: list[logging.LogRecord] = []
        self._logger = logger or logging.getLogger()
        self._original_handlers: list[logging.Handler] = []

    def emit(self, record: logging.LogRecord) -> None:
        """Store the log record."""
        self.records.append(record)

    def replay(self) -> None:
        """Replay collected logs through the original logger."""
        for record in self.records:
            self._logger.handle(record)

    def __enter__(self) -> BufferedLogs:
        """Store and replace the log handlers."""
        self._original_handlers = self._logger.handlers[:]
        self._logger.handlers.clear()
        self._logger.addHandler(self)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_traceback: TracebackType | None,
    ) -> None:
        """Restore the original handlers and replay the collected records."""
        self._logger.removeHandler(self)
        self._logger.handlers = self._original_handlers
        self.replay()


class FtFormatter(logging.Formatter):
    """Base class for formatted text logging formatter."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Create a new formatter instance."""
        super().__init__(*args, **kwargs)
        self.datefmt = self.datefmt or "%H:%M:%S"

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        """Format certain attributes on the log record."""
        record.asctime = self.formatTime(record, self.datefmt)
        record.message = record.getMessage()
        record.exc_text = ""
        if record.exc_info:
            record.exc_text = self.formatException(record.exc_info)
        return record

    def format_traceback(self, tb: str) -> StyleAndTextTuples:
        """Format a traceback string using pygments."""
        return to_formatted_text(
            PygmentsTokens(list(PythonTracebackLexer().get_tokens(tb)))
        )

    def ft_format(
        self, record: logging.LogRecord, width: int | None = None
    ) -> FormattedText:
        """Format a log record as :py:class:`FormattedText`."""
        return FormattedText([])


class StdoutFormatter(FtFormatter):
    """A log formatter for formatting log entries for display on the standard output."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Create a new formatter instance."""
        super().__init__(*args, **kwargs)
        self.last_date: str | None = None

    def ft_format(
        self, record: logging.LogRecord, width: int | None = None
    ) -> FormattedText:
        """Format log records for display on the standard output."""
        width = width or 80
        record = self.prepare(record)

        date = f"{record.asctime}"
        if date == self.last_date:
            date = " " * len(date)
        else:
            self.last_date = date
        ref = f"{record.name}.{record.funcName}:{record.lineno}"

        msg_pad = len(date) + 10
        msg_pad_1st_line = msg_pad + 1 + len(ref)

        msg_lines = "\n".join(
            textwrap.wrap(
                record.message,
                width=max(width, msg_pad_1st_line + 1),
                initial_indent=" " * msg_pad_1st_line,
                replace_whitespace=False,
            )
        ).split("\n")
        subsequent_indent = " " * msg_pad
        for i in range(1, len(msg_lines)):
            msg_lines[i] = f"{subsequent_indent}{msg_lines[i]}"

        output: StyleAndTextTuples = [
            ("class:log.date", date),
            ("", " " * (9 - len(record.levelname))),
            (f"class:log.level.{record.levelname}", record.levelname),
            ("", " "),
            ("", msg_lines[0].strip().ljust(width - msg_pad_1st_line)),
            ("", " "),
            ("class:log.ref", ref),
        ]
        for line in msg_lines[1:]:
            output += [("", "\n"), ("class:log.msg", line)]
        if record.exc_text:
            output += [("", "\n"), *self.format_traceback(record.exc_text)]
        output += [("", "\n")]
        return FormattedText(output)


class FormattedTextHandler(logging.StreamHandler):
    """Format log records for display on the standard output."""

    formatter: FtFormatter

    def __init__(
        self,
        stream: TextIO | None = None,
        style: BaseStyle | None = None,
    ) -> None:
        """Create a new log handler instance."""
        super().__init__(stream)
        self._style = style
        self.output = create_output(stdout=self.stream)

    @property
    def style(self) -> BaseStyle:
        """Calculate the style when accessed."""
        if self._style is None:
            self._style = build_style()
        return self._style

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a formatted record."""
        try:
            msg = self.formatter.ft_format(record, width=self.output.get_size()[1])
            print_formatted_text(
                msg,
                end="",
                style=self.style,
                output=self.output,
                include_default_pygments_style=False,
            )
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def handle_exception(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: TracebackType | None,
) -> Any:
    """Log unhandled exceptions and their tracebacks in the log.

    Args:
        exc_type: The type of the exception
        exc_value: The exception instance
        exc_traceback: The associated traceback
    """
    # Check the exception is not a keyboard interrupt (Ctrl+C) - if so, so not log it
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    log.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def setup_logs(config: Config | None = None) -> None:
    """Configure the logger for pipealign."""
    log_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "file_format": {
                "format": "{asctime}.{msecs:03.0f} {levelname:<7} [{name}.{funcName}:{lineno}] {message}",
                "style": "{",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "stdout_format": {
                "()": StdoutFormatter,
            },
        },
        "handlers": {
            "stdout": {
                "level": "INFO",
                "()": FormattedTextHandler,
                "formatter": "stdout_format",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "pipealign": {
                "level": "INFO",
                "handlers": ["stdout"],
                "propagate": False,
            },
        },
    }

    if config is not None:
        log_file = config.log_file or ""
        log_file_is_stdout = log_file in {"-", "/dev/stdout"}
        log_level = config.log_level.upper()

        # Configure file handler
        if log_file and not log_file_is_stdout:
            log_config["handlers"]["file"] = {
                "level": log_level,
                "class": "logging.FileHandler",
                "filename": Path(config.log_file).expanduser(),
                "formatter": "file_format",
            }
            log_config["loggers"]["pipealign"]["handlers"].append("file")

        # Configure stdout handler
        if log_file_is_stdout:
            stdout_level = log_level
        else:
            stdout_level = config.log_level_stdout.upper()
        log_config["handlers"]["stdout"]["level"] = stdout_level

        log_config["loggers"]["pipealign"]["level"] = log_level

        # Update log_config based on additional config dict provided
        if config.log_config:
            dict_merge(log_config, config.log_config)

    logging.config.dictConfig(log_config)

    # Capture warnings so they show up in the logs
    logging.captureWarnings(True)

    # Log uncaught exceptions
    sys.excepthook = handle_exception
