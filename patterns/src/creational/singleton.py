"""Thread-safe lazily created singleton.

The instance is created on first use under double-checked locking. A second
lock guards the counter so increments issued from a thread pool are not lost.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

import structlog

from patterns.src.config import get_config
from patterns.src.registry import register_demo

logger = structlog.get_logger(__name__)


class Singleton:
    """Process-wide counter with a single shared instance."""

    _instance: Optional["Singleton"] = None
    _instance_lock = threading.Lock()

    def __init__(self):
        self._count = 0
        self._count_lock = threading.Lock()

    @classmethod
    def get_instance(cls, echo: Callable[[str], None] = print) -> "Singleton":
        """
        Return the shared instance, creating it on first call.

        Args:
            echo: Sink told about the creation, only called once

        Returns:
            The single instance
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
                    logger.debug("singleton_created")
                    echo("Singleton instance created.")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance."""
        with cls._instance_lock:
            cls._instance = None

    def increment(self) -> int:
        with self._count_lock:
            self._count += 1
            return self._count

    @property
    def count(self) -> int:
        return self._count


def increment_in_parallel(instance: Singleton, times: int, workers: int) -> None:
    """Call ``instance.increment`` ``times`` times from a thread pool."""
    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(lambda _: instance.increment(), range(times)))


@register_demo("singleton", "Double-checked locking singleton with parallel increments")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append
    config = get_config().singleton

    Singleton.reset()

    first = Singleton.get_instance(echo)
    first.increment()
    first.increment()
    echo(f"Count: {first.count}")

    increment_in_parallel(first, config.parallel_increments, config.workers)
    echo(f"Count: {first.count}")

    second = Singleton.get_instance(echo)
    echo(f"Are both instances the same object? {first is second}")

    return lines
