# gitclient/process/executor.py

"""Runs a batch of git invocations, optionally on a thread pool."""

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
import logging
from typing import Any

from ..core.exceptions import GitException


class GitCommandsExecutor:
    """
    Executes independent git commands with a bounded number of threads.

    With one thread the commands run directly on the calling thread, in
    order. With more, they run on a pool of ``threads`` workers. The first
    failure stops the batch: commands that have not started are cancelled
    and the failure is raised once the pool has shut down.
    """

    def __init__(self, threads: int = 1, logger: logging.Logger | None = None) -> None:
        self.threads = max(1, threads or 1)
        self.logger = logger or logging.getLogger(__name__)

    def invoke_all(self, commands: Iterable[Callable[[], Any]]) -> list[Any]:
        """
        Run every command and return their results in submission order.

        Raises:
            GitException: The first failure; other exceptions are wrapped.
        """
        commands = list(commands)
        if self.threads == 1:
            results = []
            for command in commands:
                try:
                    results.append(command())
                except GitException:
                    raise
                except Exception as e:
                    raise GitException(str(e), original_error=e) from e
            return results

        executor = ThreadPoolExecutor(
            max_workers=self.threads, thread_name_prefix=self.__class__.__name__
        )
        try:
            futures = [executor.submit(command) for command in commands]
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future in done and future.exception() is not None:
                    for pending in futures:
                        pending.cancel()
                    error = future.exception()
                    if isinstance(error, GitException):
                        raise error
                    raise GitException(str(error), original_error=error) from error
            return [future.result() for future in futures]
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
