import json
import logging
import sys
from logging.handlers import RotatingFileHandler

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with the provider name when one is attached."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        provider = getattr(record, "provider", None)
        if provider:
            data["provider"] = provider
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        # Vietnamese report text stays readable in the log file
        return json.dumps(data, ensure_ascii=False)


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _build_handlers(
    log_file: str | None, max_bytes: int, backup_count: int
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if not log_file:
        return handlers
    if max_bytes > 0:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )
    else:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    return handlers


def configure_logging(
    *,
    level: str | int = logging.INFO,
    fmt: str | None = None,
    log_file: str | None = None,
    json_format: bool = False,
    max_bytes: int = 0,
    backup_count: int = 0,
) -> None:
    """Attach stdout and optional file handlers to the root logger.

    Does nothing when the root logger already has handlers, so the API
    startup hook and the CLI can both call it.

    Parameters
    ----------
    level:
        Level name (case-insensitive) or numeric constant.
    fmt:
        Format string for plain-text records.
    log_file:
        Also write records to this path.
    json_format:
        Emit records through ``JsonFormatter``.
    max_bytes:
        Rotate ``log_file`` at this size. ``0`` keeps a single file.
    backup_count:
        Rotated files to keep.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    if json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    root.setLevel(_resolve_level(level))
    for handler in _build_handlers(log_file, max_bytes, backup_count):
        handler.setFormatter(formatter)
        root.addHandler(handler)
