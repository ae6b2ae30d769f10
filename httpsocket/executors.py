from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

from httpsocket.config import UNBOUNDED_MAX_WORKERS
from httpsocket.errors import ContextClosedError
from httpsocket.log import get_logger

logger = get_logger(__name__)


class Executors:
    """
    Holds the worker pool used to run handshakes off the caller's thread.

    The queue is unbounded and threads are started on demand up to
    max_workers. dispose() never cancels queued or running work.
    """

    def __init__(self, max_workers: int = UNBOUNDED_MAX_WORKERS, thread_name_prefix: str = "httpsocket") -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=thread_name_prefix)
        self._lock = threading.Lock()
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def submit(self, task: Callable[[], None]) -> Future:
        """
        Queue a task for execution on the pool.

        Raises:
            ContextClosedError: after dispose()
        """
        with self._lock:
            if self._disposed:
                raise ContextClosedError("Executors already disposed")
            future = self._executor.submit(task)
        future.add_done_callback(self._log_uncaught)
        return future

    @staticmethod
    def _log_uncaught(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.critical("Uncaught exception in pool task", exc_info=exc)

    def dispose(self, wait: bool = False) -> None:
        """
        Release the pool. Queued and in-flight tasks still run.

        Safe to call again; a later call with wait=True blocks until the
        remaining tasks have finished.
        """
        with self._lock:
            first = not self._disposed
            self._disposed = True
        if first:
            logger.debug("Disposing executors")
        self._executor.shutdown(wait=wait, cancel_futures=False)
