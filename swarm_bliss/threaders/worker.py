from concurrent.futures import Future
import queue
import threading
from typing import Any

from loguru import logger


class RequestWorker(threading.Thread):
    """Single owner of a resource that other threads reach through a queue.

    Jobs are executed one at a time in submission order, so the owned
    resource is never used by two callers at once and callers never take a
    lock on it themselves. Each job gets a ``Future`` carrying its result or
    the exception raised while handling it.

    Parameters
    ----------
    name : str
        Thread name, used in log messages.

    Attributes
    ----------
    jobs : queue.Queue
        Pending ``(job, future)`` pairs, ``None`` marks shutdown.
    running : bool
        False once ``stop`` has been called.
    handled : int
        Number of jobs executed so far.
    """

    def __init__(self, name: str):
        super().__init__(name=name, daemon=True)
        self.jobs: queue.Queue = queue.Queue()
        self.running = True
        self.handled = 0
        self._stopping = threading.Event()
        self._submit_lock = threading.Lock()

    def handle(self, job: Any) -> Any:
        raise NotImplementedError

    def rejected(self, job: Any) -> Exception:
        """Exception given to jobs that arrive after shutdown."""
        return RuntimeError(f"{self.name} is stopped")

    def submit(self, job: Any) -> Future:
        """Queue a job and return the future of its result."""
        future: Future = Future()
        with self._submit_lock:
            if not self.running:
                future.set_exception(self.rejected(job))
                return future
            self.jobs.put((job, future))
        return future

    def run(self) -> None:
        """Main thread loop, executes queued jobs until the shutdown marker."""
        logger.debug(f"{self.name} started")
        while True:
            item = self.jobs.get()
            if item is None:
                break

            job, future = item
            if not self.running:
                future.set_exception(self.rejected(job))
                continue
            if not future.set_running_or_notify_cancel():
                continue

            try:
                result = self.handle(job)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(result)
            finally:
                self.handled += 1

        logger.debug(f"{self.name} stopped after {self.handled} jobs")

    def stop(self) -> None:
        """Reject further jobs and end the loop once the queue is drained."""
        with self._submit_lock:
            if not self.running:
                return
            self.running = False
            self._stopping.set()
            self.jobs.put(None)
