"""
Logging helper module for terminal-first logging.
All output goes to stdout with formatted prefixes, and also to a log file.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO


def _default_log_dir(project_root: Path) -> Path:
    """logs/ beside a source checkout; a per-user directory when installed read-only."""
    if project_root.name != "site-packages" and os.access(project_root, os.W_OK):
        return project_root / "logs"
    return Path(os.environ.get("SYLLABUSCAL_HOME") or Path.home() / ".syllabuscal") / "logs"


# Get project root directory
_project_root = Path(__file__).parent.parent
_log_dir = Path(os.environ.get("SYLLABUSCAL_LOG_DIR") or _default_log_dir(_project_root))

# Log file name is fixed at import; the file itself is opened on first write
_log_file_path = _log_dir / f"syllabuscal_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
_log_file: Optional[TextIO] = None


def _open_log_file() -> Optional[TextIO]:
    global _log_file
    if _log_file is None:
        try:
            _log_dir.mkdir(parents=True, exist_ok=True)
            _log_file = open(_log_file_path, 'a', encoding='utf-8')
        except OSError as err:
            print(f"[WARN] Log file unavailable ({_log_file_path}): {err}")
            return None
    return _log_file


def _log(message: str):
    """Write message to both stdout and log file."""
    print(message)
    log_file = _open_log_file()
    if log_file is not None:
        log_file.write(message + '\n')
        log_file.flush()


class Log:
    """Simple logging class that outputs to stdout and log file with formatted prefixes."""

    @staticmethod
    def section(title: str):
        """Print a section header: blank line + '===== TITLE ====='"""
        _log("")
        _log(f"===== {title} =====")

    @staticmethod
    def info(message: str):
        """Print an info message: '[INFO] message'"""
        _log(f"[INFO] {message}")

    @staticmethod
    def warn(message: str):
        """Print a warning message: '[WARN] message'"""
        _log(f"[WARN] {message}")

    @staticmethod
    def error(message: str):
        """Print an error message: '[ERROR] message'"""
        _log(f"[ERROR] {message}")

    @staticmethod
    def kv(pairs: dict):
        """
        Print key-value pairs: '[KV] key=value | key2=value2'

        Args:
            pairs: Dictionary of key-value pairs to print
        """
        kv_string = " | ".join([f"{k}={v}" for k, v in pairs.items()])
        _log(f"[KV] {kv_string}")

    @staticmethod
    def get_log_path() -> str:
        """Get the path to the current log file."""
        return str(_log_file_path)
