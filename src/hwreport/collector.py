"""Run every hardware collector concurrently and gather the results."""

from __future__ import annotations

import concurrent.futures
import logging
import time
from typing import Any, Dict

from .metrics import Metrics
from .utils import to_jsonable

logger = logging.getLogger(__name__)


def collect(metrics: Metrics, max_workers: int | None = None) -> Dict[str, Any]:
    collectors = metrics.collectors()
    results: Dict[str, Any] = {}
    start = time.monotonic()
    with concurrent.futures.ThreadPoolExecutor(
        max_workers=max_workers or len(collectors)
    ) as pool:
        futures = {pool.submit(func): name for name, func in collectors.items()}
        for future in concurrent.futures.as_completed(futures):
            name = futures[future]
            results[name] = to_jsonable(future.result())
            logger.debug("collected %s", name)
    logger.debug("collection finished in %.3fs", time.monotonic() - start)
    return {name: results[name] for name in collectors}
