# cloudlocker/logutil.py
from __future__ import annotations
import json, logging, os, time
from logging.handlers import RotatingFileHandler
from contextlib import contextmanager

from colorama import Fore, Style, just_fix_windows_console

from . import config

_STD_KEYS = {
    "name","msg","args","levelname","levelno","pathname","filename","module",
    "exc_info","exc_text","stack_info","lineno","funcName","created","msecs",
    "relativeCreated","thread","threadName","processName","process","asctime",
    "taskName",
}

_LEVEL_COLORS = {
    "DEBUG": Fore.CYAN,
    "INFO": Fore.GREEN,
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "CRITICAL": Style.BRIGHT + Fore.RED,
}

_ROOT = "cloudlocker"


def _extras(record: logging.LogRecord) -> dict:
    return {k: v for k, v in record.__dict__.items()
            if k not in _STD_KEYS and not k.startswith("_")}


class JSONLFormatter(logging.Formatter):
    """One compact JSON object per line, extras included."""
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": int(record.created * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for k, v in _extras(record).items():
            try:
                json.dumps(v)
                base[k] = v
            except (TypeError, ValueError):
                base[k] = repr(v)
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return json.dumps(base, separators=(",", ":"), default=str)


class ConsoleFormatter(logging.Formatter):
    """Short timestamp, colored level, compact extras."""
    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        ts = time.strftime("%H:%M:%S", time.localtime(record.created))
        lvl = record.levelname.ljust(7)
        if self.color:
            lvl = f"{_LEVEL_COLORS.get(record.levelname, '')}{lvl}{Style.RESET_ALL}"
        extras = " ".join(f"{k}={safe_preview(v, limit=160)}" for k, v in _extras(record).items())
        line = f"{ts} {lvl} [{record.name}] {record.getMessage()}"
        if extras:
            line += " " + extras
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(*, log_dir: str | None = None, console: bool = True) -> logging.Logger:
    """
    Configure the package logger once. Children created through get_logger()
    propagate into it.
    Environment: LOG_LEVEL, LOG_LEVEL_CONSOLE, LOG_LEVEL_FILE, LOG_DIR,
    LOG_MAX_BYTES, LOG_BACKUP_COUNT.
    """
    root = logging.getLogger(_ROOT)
    if getattr(root, "_logutil_configured", False):
        return root

    root.setLevel(os.getenv("LOG_LEVEL", "DEBUG"))

    if console:
        just_fix_windows_console()
        ch = logging.StreamHandler()
        ch.setLevel(os.getenv("LOG_LEVEL_CONSOLE", "INFO"))
        ch.setFormatter(ConsoleFormatter())
        root.addHandler(ch)

    log_dir = log_dir or os.getenv("LOG_DIR", os.path.join(config.STATE_DIR, "logs"))
    try:
        os.makedirs(log_dir, exist_ok=True)
        fh = RotatingFileHandler(
            os.path.join(log_dir, "client.log"),
            maxBytes=int(os.getenv("LOG_MAX_BYTES", "10485760")),
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
    except OSError:
        root.warning("file logging disabled", extra={"log_dir": log_dir})
    else:
        fh.setLevel(os.getenv("LOG_LEVEL_FILE", "DEBUG"))
        fh.setFormatter(JSONLFormatter())
        root.addHandler(fh)

    root.propagate = False
    root._logutil_configured = True  # type: ignore[attr-defined]
    return root


def get_logger(name: str | None = None) -> logging.Logger:
    """Package logger or a child of it (``get_logger("auth")`` -> cloudlocker.auth)."""
    if not name or name == _ROOT:
        return logging.getLogger(_ROOT)
    if name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")


class ContextAdapter(logging.LoggerAdapter):
    """Binds persistent context (file_id, user...) onto every record."""
    def process(self, msg, kwargs):
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def bind(logger: logging.Logger, **ctx) -> ContextAdapter:
    return ContextAdapter(logger, ctx)


def safe_preview(val, *, limit: int = 256) -> str:
    s = str(val)
    return s if len(s) <= limit else (s[:limit] + "…")


def redacts(s: str | None, show: int = 4) -> str:
    if not s:
        return ""
    if len(s) <= show:
        return "*" * len(s)
    return s[:show] + "…" + "*" * max(0, len(s) - show - 1)


@contextmanager
def span(logger: logging.Logger | ContextAdapter, event: str, **fields):
    """Log begin/end (and duration ms) around a block."""
    t0 = time.perf_counter()
    logger.debug(f"{event}.begin", extra=fields)
    try:
        yield
    except Exception:
        dur_ms = int((time.perf_counter() - t0) * 1000)
        logger.warning(f"{event}.error", extra={**fields, "dur_ms": dur_ms}, exc_info=True)
        raise
    dur_ms = int((time.perf_counter() - t0) * 1000)
    logger.info(f"{event}.end", extra={**fields, "dur_ms": dur_ms})
