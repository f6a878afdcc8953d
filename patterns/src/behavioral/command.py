"""Command pattern: a remote control driving lights with undo history."""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from patterns.src.registry import register_demo

Echo = Callable[[str], None]


class Light:
    """Receiver."""

    def __init__(self, location: str, echo: Echo = print):
        self.location = location
        self.is_on = False
        self._echo = echo

    def turn_on(self) -> None:
        self.is_on = True
        self._echo(f"{self.location} light is now ON")

    def turn_off(self) -> None:
        self.is_on = False
        self._echo(f"{self.location} light is now OFF")


class Command(ABC):
    @abstractmethod
    def execute(self) -> None:
        ...

    @abstractmethod
    def undo(self) -> None:
        ...


class LightOnCommand(Command):
    def __init__(self, light: Light):
        self._light = light

    def execute(self) -> None:
        self._light.turn_on()

    def undo(self) -> None:
        self._light.turn_off()


class LightOffCommand(Command):
    def __init__(self, light: Light):
        self._light = light

    def execute(self) -> None:
        self._light.turn_off()

    def undo(self) -> None:
        self._light.turn_on()


class RemoteControl:
    """Invoker with a LIFO history of executed commands."""

    def __init__(self, echo: Echo = print):
        self._command: Optional[Command] = None
        self._history: List[Command] = []
        self._echo = echo

    def set_command(self, command: Command) -> None:
        self._command = command

    def press_button(self) -> None:
        """
        Execute the current command and remember it.

        Raises:
            RuntimeError: If no command has been set
        """
        if self._command is None:
            raise RuntimeError("No command set")

        self._command.execute()
        self._history.append(self._command)

    def press_undo(self) -> None:
        if not self._history:
            self._echo("No commands to undo")
            return

        self._history.pop().undo()


@register_demo("command", "Remote control executing and undoing light commands")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append

    echo("Command Pattern Demo: Smart Home Lighting")
    living_room = Light("Living Room", echo)
    kitchen = Light("Kitchen", echo)
    remote = RemoteControl(echo)

    for command in (LightOnCommand(living_room), LightOnCommand(kitchen), LightOffCommand(living_room)):
        remote.set_command(command)
        remote.press_button()

    echo("Undo last action")
    remote.press_undo()
    echo("Undo another action")
    remote.press_undo()

    return lines
