# ─── Log Scopes ───────────────────────────────────────────────────────────────
import contextvars
import sys
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger as _loguru

# Names of the scopes entered so far, outermost first, e.g. ["build", "walk"].
_scopes = contextvars.ContextVar("_scopes", default=[])


@contextmanager
def log_func(name: str):
    """
    Enter a named scope. Records logged inside it carry "outer.inner" in
    extra['func'], which the console and file formats print.
    """
    token = _scopes.set(_scopes.get() + [name])
    try:
        yield
    finally:
        _scopes.reset(token)


def _with_scope(record):
    scopes = _scopes.get()
    record["extra"]["func"] = ".".join(scopes) if scopes else record["name"]


# ─── Logger Setup ─────────────────────────────────────────────────────────────

class Logger:
    """
    Decides where propwalk's log records go.

    Modules never hold a logger of their own: they log through the global
    `from loguru import logger as log`. Logger configures that global once per
    process, with a console sink on stderr and a per-session file sink named
    after the start time and a session id.
    """

    FORMAT = (
        "<green>{time:HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[func]}</cyan> | "
        "{message}"
    )

    _configured = False
    _session = None
    _log_path = None
    _sinks = {}

    @staticmethod
    def init_logger(
            log_dir: Path = Path("logs"),
            label: Optional[str] = None,
            serialize: bool = False,
            pretty_console: bool = True,
            level: str = "INFO",
            to_file: bool = True,
    ):
        """
        Configure the global loguru logger. Later calls return it unchanged.

        Args:
            log_dir (Path): Where the session file goes. Created if missing.
            label (str, optional): File name suffix. Defaults to the session id.
            serialize (bool): JSON records in the file instead of formatted lines.
            pretty_console (bool): Colorized stderr output.
            level (str): Minimum level for every sink.
            to_file (bool): Whether to write a session file at all.

        Returns:
            The loguru logger.
        """
        if Logger._configured:
            return _loguru

        Logger._session = uuid.uuid4().hex[:12]
        _loguru.remove()
        _loguru.configure(patcher=_with_scope)

        if pretty_console:
            Logger._sinks["console"] = _loguru.add(sys.stderr, level=level, colorize=True, format=Logger.FORMAT)

        if to_file:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            started = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
            Logger._log_path = log_dir / f"{started}__{label or Logger._session}.log"
            Logger._sinks["file"] = _loguru.add(
                str(Logger._log_path), level=level, serialize=serialize, format=Logger.FORMAT
            )

        Logger._configured = True
        _loguru.debug("[Logger] Session {} logging to {}", Logger._session, Logger._log_path or "stderr only")
        return _loguru

    @staticmethod
    def from_settings(settings: dict, level: Optional[str] = None, to_file: bool = True):
        """Configure from loaded settings; `level` overrides settings['log_level']."""
        return Logger.init_logger(
            log_dir=Path(settings["log_dir"]),
            level=(level or settings["log_level"]).upper(),
            to_file=to_file,
        )

    @staticmethod
    def log_path() -> Optional[Path]:
        return Logger._log_path

    @staticmethod
    def get_loguru():
        if not Logger._configured:
            raise RuntimeError("Logger has not been initialized.")
        return _loguru

    @staticmethod
    def reset():
        """Drop every sink and forget the session. Used between tests."""
        _loguru.remove()
        Logger._configured = False
        Logger._session = None
        Logger._log_path = None
        Logger._sinks = {}
