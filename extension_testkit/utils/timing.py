import time
from contextlib import contextmanager
from typing import Generator

from loguru import logger


@contextmanager
def log_runtime(function_name: str) -> Generator[None, None, None]:
    start_time = time.monotonic()
    try:
        yield
    finally:
        duration = time.monotonic() - start_time
        logger.debug("TIMING LOG: {} took {}s to run", function_name, duration)
