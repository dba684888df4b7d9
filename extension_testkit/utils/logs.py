import datetime
import sys
import typing
from pathlib import Path

import loguru
from loguru import logger

from extension_testkit.config.settings import TEST_LOG_PATH

FANCY_FORMAT = "{time:HH:mm:ss.SSS} |<level>{level: <7}</level>| <cyan>{name}:{function}:{line}</cyan><green>{extra[formatted_context]}</green> - <level>{message}</level>"

LOG_EXTENSION = "jsonl"
ZIPPED_LOG_EXTENSION = "gz"

# loguru accepts sizes ("0.1 GB"), intervals, times of day or callables for rotation
RotationPolicy = int | datetime.time | datetime.timedelta | str | typing.Callable[..., bool] | None


def setup_default_test_logging() -> None:
    setup_loggers(log_file=TEST_LOG_PATH / "logs.jsonl", level="TRACE")


def setup_loggers(
    log_file: Path,
    level: str,
    format: str = FANCY_FORMAT,
    is_rotation_enabled: bool = True,
    rotation: RotationPolicy = "0.1 GB",
    retention: int | datetime.timedelta | str | None = 10,
    compression: str | None = ZIPPED_LOG_EXTENSION,
) -> None:
    """
    Log to stderr at `level` and to a serialized `.jsonl` file at TRACE.

    Only loguru's default handler is removed, so sinks added by the caller survive repeated setups.
    """
    assert log_file.suffix == f".{LOG_EXTENSION}", f"log file must end with .{LOG_EXTENSION}"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    stderr_level = logger.level(level).no
    logger.configure(
        patcher=_patch_log_context_in_place,
        extra={"program": "extension_testkit", "formatted_context": ""},
    )
    # pyre-ignore[16]: handler 0 is the one loguru installs on import
    if 0 in logger._core.handlers:
        logger.remove(0)

    logger.add(sys.__stderr__, level=stderr_level, format=format, diagnose=False)  # type: ignore
    logger.add(
        log_file,
        level="TRACE",
        format=format,
        serialize=True,
        diagnose=False,
        rotation=rotation if is_rotation_enabled else None,
        retention=retention if is_rotation_enabled else None,
        compression=compression if is_rotation_enabled else None,
    )


def _patch_log_context_in_place(record: "loguru.Record") -> None:
    # fixtures bind their workspace name so that interleaved test logs stay readable
    workspace: str | None = record["extra"].get("workspace", None)
    record["extra"]["formatted_context"] = f" [{workspace}]" if workspace else ""
