"""Elapsed-time logging for the slow steps of an analysis."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional


logger = logging.getLogger(__name__)


@contextmanager
def timed(label: str, log: Optional[logging.Logger] = None) -> Iterator[None]:
    """Log ``label`` before and after the wrapped block, with its duration."""

    log = log or logger
    log.info("start: %s...", label)
    start = time.perf_counter()
    yield
    log.info("end: finished %s, with elapsed time: %.3fs", label, time.perf_counter() - start)
