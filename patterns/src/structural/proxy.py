"""Protection proxy with lazy creation of the real subject."""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from patterns.src.registry import register_demo
from shared.logging import LoggerMixin

Echo = Callable[[str], None]


class Subject(ABC):
    @abstractmethod
    def request(self) -> None:
        ...


class RealSubject(Subject):
    def __init__(self, echo: Echo = print):
        self._echo = echo

    def request(self) -> None:
        self._echo("RealSubject: Handling Request.")


class Proxy(Subject, LoggerMixin):
    """
    Guards a ``RealSubject``.

    Only the ``Admin`` role gets through. The real subject is created on the
    first allowed request and reused afterwards.
    """

    ALLOWED_ROLE = "Admin"

    def __init__(self, user_role: str, echo: Echo = print):
        self._user_role = user_role
        self._echo = echo
        self._real_subject: Optional[RealSubject] = None

    def request(self) -> None:
        if not self._check_access():
            self._echo("Proxy: Access denied.")
            self.logger.info("proxy_access_denied", role=self._user_role)
            return

        if self._real_subject is None:
            self._echo("Proxy: Creating RealSubject instance.")
            self._real_subject = RealSubject(self._echo)

        self._echo("Proxy: Logging before request.")
        self._real_subject.request()
        self._echo("Proxy: Logging after request.")

    def _check_access(self) -> bool:
        self._echo("Proxy: Checking access prior to firing a real request.")
        return self._user_role == self.ALLOWED_ROLE


@register_demo("proxy", "Protection proxy allowing only the Admin role")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append

    echo("Client: Attempting to access with Admin role:")
    Proxy("Admin", echo).request()

    echo("Client: Attempting to access with User role:")
    Proxy("User", echo).request()

    return lines
