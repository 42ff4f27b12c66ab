"""Named log sinks writing to the console, a log file and installed hooks."""

from __future__ import annotations

import inspect
import sys
import threading
import time
import traceback
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from types import FrameType
from typing import Callable, Optional

from .flags import LogFlags

MAIN_LOG_NAME = "Main-Log"
MAX_LOG_FILES = 256
SOURCE_ROOT = Path(__file__).resolve().parent.parent.as_posix() + "/"


class LogLevel(Enum):
    """Severity of a log message."""

    INFORMATION = auto()
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()
    FATAL = auto()


_PREFIXES = {
    LogLevel.INFORMATION: " [INFO]",
    LogLevel.DEBUG: "[DEBUG]",
    LogLevel.WARNING: " [WARN]",
    LogLevel.ERROR: "[ERROR]",
    LogLevel.FATAL: "[FATAL]",
}


@dataclass
class DetailInformation:
    """Where and when a message was logged."""

    time: int
    file: str
    line: int
    column: int
    function: str
    thread: str
    stack_trace: list[str] = field(default_factory=list)


LogHook = Callable[[DetailInformation, LogLevel, str], None]

_instances: dict[str, "Log"] = {}
_instances_lock = threading.Lock()

_thread_names: dict[int, str] = {}
_thread_names_lock = threading.Lock()


def _create_log_file(log_dir: Path):
    if log_dir.exists() and not log_dir.is_dir():
        log_dir.unlink()
    log_dir.mkdir(parents=True, exist_ok=True)

    existing = sorted(
        (child for child in log_dir.iterdir() if child.is_file()),
        key=lambda child: child.stat().st_mtime,
    )
    for stale in existing[: max(0, len(existing) - MAX_LOG_FILES)]:
        stale.unlink()

    file_name = time.strftime("%Y-%m-%d_%H-%M-%S", time.localtime()) + ".log"
    return open(log_dir / file_name, "w", encoding="utf-8")


class Log:
    """A named log sink; may be used from any thread."""

    def __init__(self, flags: int, name: str, log_dir: str | Path = "logs") -> None:
        self._name = name
        self._flags = LogFlags(flags)
        self._lock = threading.Lock()
        self._hooks: list[tuple[int, LogHook]] = []
        self._file = None
        self._closed = False

        log_info("Constructing log sink '{}'!", name)

        if self._flags & LogFlags.File:
            self._file = _create_log_file(Path(log_dir))

        with _instances_lock:
            if name in _instances:
                if self._file is not None:
                    self._file.close()
                    self._file = None
                self._closed = True
                raise ValueError("Log-Name Redefinition")
            _instances[name] = self

    @property
    def name(self) -> str:
        return self._name

    @property
    def flags(self) -> LogFlags:
        return self._flags

    def __enter__(self) -> "Log":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def get_instance(name: str) -> Optional["Log"]:
        """Return the registered log of that name, or None."""
        with _instances_lock:
            return _instances.get(name)

    @staticmethod
    def register_thread_name(thread_name: str) -> bool:
        """Name the calling thread; False if it already has a name."""
        ident = threading.get_ident()
        with _thread_names_lock:
            if ident in _thread_names:
                return False
            _thread_names[ident] = thread_name
            return True

    @staticmethod
    def get_thread_name(thread_id: int) -> str:
        """Return the registered name of a thread, or 'Unregistered'."""
        with _thread_names_lock:
            return _thread_names.get(thread_id, "Unregistered")

    def install_hook(self, hook: LogHook) -> int:
        """Install a callback receiving every message; returns its id."""
        with self._lock:
            hook_id = len(self._hooks) + 1
            self._hooks.append((hook_id, hook))
            return hook_id

    def uninstall_hook(self, hook_id: int) -> None:
        """Remove the first hook installed under ``hook_id``."""
        with self._lock:
            for position, (installed_id, _) in enumerate(self._hooks):
                if installed_id == hook_id:
                    del self._hooks[position]
                    return

    def stacktrace_enabled(self, level: LogLevel) -> bool:
        """Whether messages of this level carry a stack trace."""
        return (level is LogLevel.ERROR and bool(self._flags & LogFlags.DetailErrorStacktrace)) or (
            level is LogLevel.FATAL and bool(self._flags & LogFlags.DetailFatalStacktrace)
        )

    def format_message(self, detail_info: DetailInformation, level: LogLevel, message: str) -> str:
        """Render a message the way it is written to console and file."""
        parts: list[str] = []
        if message.startswith("\n"):
            parts.append("\n")
            message = message[1:]

        parts.append(_PREFIXES[level])

        detail_bits = self._flags & LogFlags.DetailAll
        if detail_bits:
            highest = 1 << (int(detail_bits).bit_length() - 1)

            fields: list[tuple[LogFlags, str]] = []
            if detail_bits & LogFlags.DetailTime:
                fields.append((LogFlags.DetailTime, str(detail_info.time)))
            if detail_bits & LogFlags.DetailFile:
                file_name = detail_info.file
                if file_name.startswith(SOURCE_ROOT):
                    file_name = file_name[len(SOURCE_ROOT):]
                fields.append((LogFlags.DetailFile, file_name))
            if detail_bits & LogFlags.DetailLine:
                if (detail_bits & LogFlags.DetailColumn) == LogFlags.DetailColumn:
                    fields.append(
                        (LogFlags.DetailColumn, f"{detail_info.line}:{detail_info.column}")
                    )
                else:
                    fields.append((LogFlags.DetailLine, str(detail_info.line)))
            if detail_bits & LogFlags.DetailFunction:
                fields.append((LogFlags.DetailFunction, detail_info.function))
            if detail_bits & LogFlags.DetailThread:
                fields.append((LogFlags.DetailThread, detail_info.thread))

            rendered = "".join(
                text + ("" if flag & highest else "; ") for flag, text in fields
            )
            parts.append("<" + rendered + ">")

        parts.append(": ")
        parts.append(message + "\n")

        if self.stacktrace_enabled(level):
            if detail_info.stack_trace:
                parts.append("Stacktrace:\n")
                parts.extend(element + "\n" for element in detail_info.stack_trace)
            else:
                parts.append("[[Stacktrace not available]]\n")

        return "".join(parts)

    def print(self, detail_info: DetailInformation, level: LogLevel, message: str) -> None:
        """Write an already formatted message to every destination of this log."""
        text = self.format_message(detail_info, level, message)
        hook_message = message[1:] if message.startswith("\n") else message

        with self._lock:
            if self._flags & LogFlags.Console:
                sys.stderr.write(text)
                sys.stderr.flush()
            if self._file is not None:
                self._file.write(text)
                self._file.flush()
            hooks = [hook for _, hook in self._hooks]

        for hook in hooks:
            hook(detail_info, level, hook_message)

        if self._flags & LogFlags.FatalQuit and level is LogLevel.FATAL:
            sys.exit(-1)

    def close(self) -> None:
        """Unregister the log and close its file."""
        if self._closed:
            return
        log_info("Destroying log sink '{}'!", self._name)
        self._closed = True
        with _instances_lock:
            if _instances.get(self._name) is self:
                del _instances[self._name]
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


def _caller_frame() -> Optional[FrameType]:
    frame = inspect.currentframe()
    while frame is not None and frame.f_code.co_filename == __file__:
        frame = frame.f_back
    return frame


def _stack_trace(frame: FrameType) -> list[str]:
    lines = []
    for summary in reversed(traceback.extract_stack(frame)):
        if summary.filename:
            lines.append(f"  {summary.name:<64} @ {summary.filename}:{summary.lineno}")
        else:
            lines.append(f"  {summary.name}")
    if lines:
        lines[0] = ">" + lines[0][1:]
    return lines


def log_message(log_name: str, level: LogLevel, message: str, *args) -> None:
    """Format ``message`` with ``args`` and send it to the named log, if it exists."""
    sink = Log.get_instance(log_name)
    if sink is None:
        return

    caller = _caller_frame()
    if caller is not None:
        summary = traceback.extract_stack(caller, limit=1)[-1]
        file_name = summary.filename.replace("\\", "/")
        line = summary.lineno or 0
        column = getattr(summary, "colno", None) or 0
        function = summary.name
    else:
        file_name, line, column, function = "", 0, 0, ""

    detail_info = DetailInformation(
        time=int(time.time()),
        file=file_name,
        line=line,
        column=column,
        function=function,
        thread=Log.get_thread_name(threading.get_ident()),
    )
    if caller is not None and sink.stacktrace_enabled(level):
        detail_info.stack_trace = _stack_trace(caller)

    sink.print(detail_info, level, message.format(*args))


def log_info(message: str, *args) -> None:
    """Log an informational message to the main log."""
    log_message(MAIN_LOG_NAME, LogLevel.INFORMATION, message, *args)


def log_debug(message: str, *args) -> None:
    """Log a debug message to the main log."""
    log_message(MAIN_LOG_NAME, LogLevel.DEBUG, message, *args)


def log_warning(message: str, *args) -> None:
    """Log a warning to the main log."""
    log_message(MAIN_LOG_NAME, LogLevel.WARNING, message, *args)


def log_error(message: str, *args) -> None:
    """Log an error to the main log."""
    log_message(MAIN_LOG_NAME, LogLevel.ERROR, message, *args)


def log_fatal(message: str, *args) -> None:
    """Log a fatal error to the main log."""
    log_message(MAIN_LOG_NAME, LogLevel.FATAL, message, *args)