"""
xml_store - Logging Module
Provides centralized logging for the store, the watcher and the archive manager.
"""
import sys
import threading
from datetime import datetime

from . import conf

_first_line = True
_write_lock = threading.Lock()


def store_log(message: str) -> None:
    """Append log message to the store log if logging is enabled."""
    global _first_line
    if not conf.LOG_ENABLED:
        return
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    lines = []
    if _first_line:
        _first_line = False
        lines.append(f"[{timestamp}] --- New xml_store Session ---\n")
    lines.append(f"[{timestamp}] {message}\n")
    # The watcher thread logs too; keep lines from interleaving.
    with _write_lock:
        if conf.LOG_TO_STDERR:
            sys.stderr.writelines(lines)
        conf.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(conf.LOG_FILE, "a", encoding="utf-8") as f:
            f.writelines(lines)


def store_log_print() -> None:
    """Print the contents of the log file to stdout."""
    if conf.LOG_FILE.exists():
        log_contents = conf.LOG_FILE.read_text(encoding="utf-8")
        if log_contents:
            print(log_contents, end="")
        else:
            print("[xml_store log is empty]")
    else:
        print("[xml_store log file does not exist]")


def store_log_clear() -> None:
    """Delete the log file."""
    global _first_line
    conf.LOG_FILE.unlink(missing_ok=True)
    _first_line = True
