"""Utility functions for formforge"""

import logging
import time
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Callable, Literal, Optional, Tuple, Type
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


BackoffStrategy = Literal["exponential", "fixed"]


def canonicalify(p: Path | str) -> Path:
    return Path(p).expanduser().resolve()


def ensure_path(p: Path | str) -> Path:
    path = canonicalify(p)
    path.mkdir(parents=True, exist_ok=True)
    return path


def retry(
    times: int,
    initial_delay: float = 1,
    backoff: BackoffStrategy = "exponential",
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[tuple, dict, Exception, int], None]] = None,
):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            delay = initial_delay

            for attempt in range(times):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    is_last_attempt = attempt == times - 1
                    error_msg = str(e)[:100]

                    if is_last_attempt:
                        logger.error(f"Operation failed, max retries ({times}) reached")
                        raise

                    logger.warning(
                        f"Operation failed (attempt {attempt + 1}/{times}), "
                        f"retrying in {delay}s. Error: {error_msg}"
                    )

                    if on_retry:
                        on_retry(args, kwargs, e, attempt + 1)

                    time.sleep(delay)

                    if backoff == "exponential":
                        delay *= 2

        return wrapper

    return decorator


def format_datetime(dt, timezone: ZoneInfo | None = None) -> str:
    if dt is None:
        return ""
    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt)
        except ValueError:
            return dt
    if isinstance(dt, datetime):
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=ZoneInfo("UTC"))
        if timezone is not None:
            dt = dt.astimezone(timezone)
        return dt.isoformat()
    return str(dt)
