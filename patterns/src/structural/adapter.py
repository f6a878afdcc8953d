"""Object adapter exposing an incompatible class through the expected interface."""

from typing import List

from patterns.src.registry import register_demo


class Target:
    """Interface the client works against."""

    def get_request(self) -> str:
        return "Target: The default target's behavior."


class Adaptee:
    """Existing class with an incompatible method name."""

    def get_specific_request(self) -> str:
        return "Specific request."


class Adapter(Target):
    """Wraps an ``Adaptee`` so it can be used as a ``Target``."""

    def __init__(self, adaptee: Adaptee):
        self._adaptee = adaptee

    def get_request(self) -> str:
        return f"Adapter: {self._adaptee.get_specific_request()}"


def client_code(target: Target) -> str:
    return target.get_request()


@register_demo("adapter", "Adapter wrapping an incompatible interface")
def run_demo() -> List[str]:
    return [client_code(Adapter(Adaptee()))]
