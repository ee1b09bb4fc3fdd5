"""Subscriber that records every invocation it wraps."""

from __future__ import annotations

import logging
import time
from typing import Any

from chainwire.core.logging import log_value
from chainwire.core.models import NO_RESULT

LOGGER = logging.getLogger(__name__)


class LogSubscriber:
    """Log arguments, result and elapsed time around the rest of the chain."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def subscribe(self, next: Any, *args: Any) -> Any:
        service_name = getattr(next, "service_name", "") or "<unknown>"
        started = time.perf_counter()
        try:
            result = next()
        except Exception:
            LOGGER.exception("Service %s raised", service_name)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        log_value(
            service_name,
            {
                "args": args,
                "result": None if result is NO_RESULT else result,
                "elapsed_ms": round(elapsed_ms, 3),
            },
            level=self._level,
        )
        return result


__all__ = ["LogSubscriber"]
