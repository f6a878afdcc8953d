"""Custom event raised when a running total reaches a threshold."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List

from patterns.src.registry import register_demo


@dataclass(frozen=True)
class ThresholdReached:
    threshold: int
    time_reached: datetime


ThresholdHandler = Callable[["Counter", ThresholdReached], None]


class Counter:
    """
    Running total that notifies handlers once it reaches ``threshold``.

    Every ``add`` that leaves the total at or above the threshold raises the
    event again.
    """

    def __init__(self, threshold: int, clock: Callable[[], datetime] = datetime.now):
        self.threshold = threshold
        self.total = 0
        self._clock = clock
        self._handlers: List[ThresholdHandler] = []

    def on_threshold_reached(self, handler: ThresholdHandler) -> None:
        self._handlers.append(handler)

    def add(self, x: int) -> None:
        self.total += x
        if self.total >= self.threshold:
            self._raise(ThresholdReached(threshold=self.threshold, time_reached=self._clock()))

    def _raise(self, event: ThresholdReached) -> None:
        for handler in list(self._handlers):
            handler(self, event)


@register_demo("events", "Counter raising an event when its threshold is reached")
def run_demo() -> List[str]:
    lines: List[str] = []
    reached: List[ThresholdReached] = []

    def report(sender: Counter, event: ThresholdReached) -> None:
        lines.append(f"The threshold of {event.threshold} was reached at {event.time_reached:%Y-%m-%d %H:%M:%S}.")
        reached.append(event)

    counter = Counter(3)
    counter.on_threshold_reached(report)
    while not reached:
        lines.append("adding one")
        counter.add(1)

    return lines
