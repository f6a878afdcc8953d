"""Registry of runnable demos.

Each demo module decorates a zero-argument function returning its
transcript lines with ``register_demo``. ``load_demos`` imports every demo
module so the registry is complete before it is queried.
"""

import importlib
from dataclasses import dataclass
from typing import Callable, Dict, List

import structlog

logger = structlog.get_logger(__name__)

DemoFunc = Callable[[], List[str]]

DEMO_MODULES = (
    "patterns.src.creational.factory",
    "patterns.src.creational.singleton",
    "patterns.src.structural.adapter",
    "patterns.src.structural.decorator",
    "patterns.src.structural.facade",
    "patterns.src.structural.proxy",
    "patterns.src.behavioral.strategy",
    "patterns.src.behavioral.observer",
    "patterns.src.behavioral.command",
    "patterns.src.behavioral.template_method",
    "patterns.src.behavioral.rules",
    "patterns.src.behavioral.events",
    "patterns.src.idioms.records",
    "patterns.src.idioms.iterators",
    "patterns.src.idioms.delegates",
    "patterns.src.idioms.matching",
    "patterns.src.idioms.slicing",
    "patterns.src.idioms.sorting",
)


@dataclass(frozen=True)
class Demo:
    """A registered demo."""

    name: str
    summary: str
    func: DemoFunc
    module: str

    def run(self) -> List[str]:
        """Run the demo and return its transcript."""
        logger.info("demo_started", demo=self.name)
        lines = self.func()
        logger.info("demo_finished", demo=self.name, lines=len(lines))
        return lines


_REGISTRY: Dict[str, Demo] = {}


def register_demo(name: str, summary: str) -> Callable[[DemoFunc], DemoFunc]:
    """Register the decorated function as the demo called ``name``.

    Args:
        name: Unique demo name used on the command line
        summary: One-line description shown by ``list``

    Returns:
        Decorator returning the function unchanged

    Raises:
        ValueError: If another function already uses the name
    """

    def decorator(func: DemoFunc) -> DemoFunc:
        existing = _REGISTRY.get(name)
        if existing is not None and existing.module != func.__module__:
            raise ValueError(f"Demo '{name}' is already registered by {existing.module}")

        _REGISTRY[name] = Demo(name=name, summary=summary, func=func, module=func.__module__)
        return func

    return decorator


def load_demos() -> None:
    """Import every demo module."""
    for module in DEMO_MODULES:
        importlib.import_module(module)


def get_demo(name: str) -> Demo:
    """Look up a demo by name.

    Raises:
        KeyError: If no demo has that name; the message lists valid names
    """
    load_demos()
    try:
        return _REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown demo '{name}'. Available demos: {available}") from None


def list_demos() -> List[Demo]:
    """All registered demos sorted by name."""
    load_demos()
    return [_REGISTRY[name] for name in sorted(_REGISTRY)]
