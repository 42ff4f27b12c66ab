import os
import threading

import pytest

from proxyprint.flags import LogFlags
from proxyprint.log import (
    MAIN_LOG_NAME,
    MAX_LOG_FILES,
    SOURCE_ROOT,
    DetailInformation,
    Log,
    LogLevel,
    log_error,
    log_fatal,
    log_info,
    log_message,
    log_warning,
)


def _detail(**overrides):
    values = dict(time=123, file="a.py", line=10, column=4, function="fn", thread="worker")
    values.update(overrides)
    return DetailInformation(**values)


@pytest.fixture
def make_log(tmp_path):
    created = []

    def factory(flags=0, name=None):
        log = Log(flags, name or f"test-log-{len(created)}-{id(created)}", tmp_path / "logs")
        created.append(log)
        return log

    yield factory
    for log in created:
        log.close()


def test_plain_info_message(make_log):
    log = make_log()
    assert log.format_message(_detail(), LogLevel.INFORMATION, "hello") == " [INFO]: hello\n"


@pytest.mark.parametrize(
    "level, prefix",
    [
        (LogLevel.INFORMATION, " [INFO]"),
        (LogLevel.DEBUG, "[DEBUG]"),
        (LogLevel.WARNING, " [WARN]"),
        (LogLevel.ERROR, "[ERROR]"),
        (LogLevel.FATAL, "[FATAL]"),
    ],
)
def test_level_prefixes(make_log, level, prefix):
    log = make_log()
    assert log.format_message(_detail(), level, "msg") == prefix + ": msg\n"


def test_leading_newline_moves_before_prefix(make_log):
    log = make_log()
    text = log.format_message(_detail(), LogLevel.ERROR, "\nboom")
    assert text.startswith("\n[ERROR]")
    assert text.endswith(": boom\n")


def test_time_and_thread_details(make_log):
    log = make_log(LogFlags.DetailTime | LogFlags.DetailThread)
    text = log.format_message(_detail(), LogLevel.INFORMATION, "x")
    assert text == " [INFO]<123; worker>: x\n"


def test_line_and_column_detail(make_log):
    log = make_log(LogFlags.DetailColumn)
    text = log.format_message(_detail(), LogLevel.INFORMATION, "x")
    assert "<10:4>" in text


def test_line_only_detail(make_log):
    log = make_log(LogFlags.DetailLine)
    text = log.format_message(_detail(), LogLevel.INFORMATION, "x")
    assert "<10>" in text


def test_source_root_is_stripped(make_log):
    log = make_log(LogFlags.DetailFile)
    detail = _detail(file=SOURCE_ROOT + "proxyprint/thing.py")
    text = log.format_message(detail, LogLevel.INFORMATION, "x")
    assert "<proxyprint/thing.py>" in text


def test_stacktrace_not_available(make_log):
    log = make_log(LogFlags.DetailErrorStacktrace)
    text = log.format_message(_detail(), LogLevel.ERROR, "x")
    assert text.endswith("[[Stacktrace not available]]\n")


def test_stacktrace_lines_appended(make_log):
    log = make_log(LogFlags.DetailErrorStacktrace)
    detail = _detail(stack_trace=["> first", "  second"])
    text = log.format_message(detail, LogLevel.ERROR, "x")
    assert text.endswith("Stacktrace:\n> first\n  second\n")


def test_stacktrace_enabled_per_level(make_log):
    error_only = make_log(LogFlags.DetailErrorStacktrace)
    both = make_log(LogFlags.DetailStacktrace)
    assert error_only.stacktrace_enabled(LogLevel.ERROR)
    assert not error_only.stacktrace_enabled(LogLevel.FATAL)
    assert both.stacktrace_enabled(LogLevel.FATAL)
    assert not both.stacktrace_enabled(LogLevel.WARNING)


def test_registry_and_duplicate_name(make_log):
    log = make_log(name="registry-check")
    assert Log.get_instance("registry-check") is log
    with pytest.raises(ValueError):
        Log(0, "registry-check")
    assert Log.get_instance("registry-check") is log
    log.close()
    assert Log.get_instance("registry-check") is None


def test_hooks_receive_messages_until_uninstalled(make_log):
    log = make_log(name="hooked")
    received = []
    first = log.install_hook(lambda d, lvl, msg: received.append((lvl, msg)))
    second = log.install_hook(lambda d, lvl, msg: None)
    assert (first, second) == (1, 2)

    log_message("hooked", LogLevel.WARNING, "value {} of {}", 3, "x")
    assert received == [(LogLevel.WARNING, "value 3 of x")]

    log.uninstall_hook(first)
    log_message("hooked", LogLevel.WARNING, "again")
    assert len(received) == 1


def test_hook_gets_message_without_leading_newline(make_log):
    log = make_log()
    received = []
    log.install_hook(lambda d, lvl, msg: received.append(msg))
    log.print(_detail(), LogLevel.INFORMATION, "\nline")
    assert received == ["line"]


def test_main_log_helpers_carry_caller_location(make_log):
    main = make_log(name=MAIN_LOG_NAME)
    received = []
    main.install_hook(lambda d, lvl, msg: received.append((d, lvl, msg)))

    log_info("hello {}", "world")
    log_warning("careful")

    detail, level, message = received[0]
    assert (level, message) == (LogLevel.INFORMATION, "hello world")
    assert detail.function == "test_main_log_helpers_carry_caller_location"
    assert detail.file.endswith("test_log.py")
    assert detail.line > 0
    assert received[1][1] is LogLevel.WARNING


def test_error_captures_stack_trace(make_log):
    main = make_log(LogFlags.DetailErrorStacktrace, name=MAIN_LOG_NAME)
    received = []
    main.install_hook(lambda d, lvl, msg: received.append(d))
    log_error("bad")
    trace = received[0].stack_trace
    assert trace[0].startswith(">")
    assert "test_error_captures_stack_trace" in trace[0]


def test_fatal_quit_exits(make_log):
    make_log(LogFlags.FatalQuit, name=MAIN_LOG_NAME)
    with pytest.raises(SystemExit):
        log_fatal("the end")


def test_console_output_goes_to_stderr(make_log, capsys):
    log = make_log(LogFlags.Console)
    log.print(_detail(), LogLevel.DEBUG, "to console")
    assert capsys.readouterr().err.endswith("[DEBUG]: to console\n")


def test_file_output(tmp_path):
    log_dir = tmp_path / "file-logs"
    with Log(LogFlags.File, "file-sink", log_dir) as log:
        log.print(_detail(), LogLevel.INFORMATION, "into the file")
    files = list(log_dir.iterdir())
    assert len(files) == 1
    assert files[0].suffix == ".log"
    assert files[0].read_text(encoding="utf-8") == " [INFO]: into the file\n"


def test_log_dir_that_is_a_file_is_replaced(tmp_path):
    log_dir = tmp_path / "logs"
    log_dir.write_text("not a directory")
    with Log(LogFlags.File, "replace-sink", log_dir):
        assert log_dir.is_dir()


def test_old_log_files_are_pruned(tmp_path):
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    total = MAX_LOG_FILES + 2
    for index in range(total):
        path = log_dir / f"old_{index:04d}.log"
        path.write_text("")
        os.utime(path, (1_000_000 + index, 1_000_000 + index))

    with Log(LogFlags.File, "prune-sink", log_dir):
        old = sorted(p.name for p in log_dir.iterdir() if p.name.startswith("old_"))
    assert len(old) == MAX_LOG_FILES
    assert "old_0000.log" not in old
    assert "old_0001.log" not in old
    assert "old_0002.log" in old


def test_thread_names():
    results = {}

    def worker():
        results["first"] = Log.register_thread_name("worker-a")
        results["second"] = Log.register_thread_name("worker-b")
        results["ident"] = threading.get_ident()
        results["name"] = Log.get_thread_name(threading.get_ident())

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert results["first"] is True
    assert results["second"] is False
    assert results["name"] == "worker-a"
    assert Log.get_thread_name(results["ident"]) == "worker-a"


def test_unregistered_thread_name():
    name = Log.get_thread_name(-424242)
    assert name == "Unregistered"