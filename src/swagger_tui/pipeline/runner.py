"""Background task runners used by the fetch and execution pipelines."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

logger = logging.getLogger(__name__)


class BackgroundRunner:
    """Runs pipeline tasks on a small thread pool.

    Task failures are logged and never propagate to the foreground loop.
    """

    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="swagger-tui")

    def submit(self, task: Callable[[], None], name: str = "task") -> Future:
        future = self._executor.submit(task)
        future.add_done_callback(lambda f: _log_failure(f, name))
        return future

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)


class ImmediateRunner:
    """Runs tasks inline on submit. Used by tests and scripted sessions."""

    def __init__(self):
        self.submitted: list[str] = []

    def submit(self, task: Callable[[], None], name: str = "task") -> Future:
        self.submitted.append(name)
        future: Future = Future()
        try:
            task()
        except Exception as e:
            logger.exception("Background %s failed", name)
            future.set_exception(e)
        else:
            future.set_result(None)
        return future

    def shutdown(self, wait: bool = False) -> None:
        pass


def _log_failure(future: Future, name: str) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error("Background %s failed: %s", name, error, exc_info=error)
