"""Template method: fixed beverage recipe with overridable steps and a hook."""

from abc import ABC, abstractmethod
from typing import Callable, List

from patterns.src.config import get_config
from patterns.src.registry import register_demo

Echo = Callable[[str], None]
AnswerProvider = Callable[[str], str]


class Beverage(ABC):
    """Boil, brew, pour, then add condiments when the hook agrees."""

    def __init__(self, echo: Echo = print):
        self._echo = echo

    def prepare(self) -> None:
        self._boil_water()
        self.brew()
        self._pour_in_cup()
        if self.wants_condiments():
            self.add_condiments()

    @abstractmethod
    def brew(self) -> None:
        ...

    @abstractmethod
    def add_condiments(self) -> None:
        ...

    def wants_condiments(self) -> bool:
        return True

    def _boil_water(self) -> None:
        self._echo("Boiling water")

    def _pour_in_cup(self) -> None:
        self._echo("Pouring into cup")


class Tea(Beverage):
    def brew(self) -> None:
        self._echo("Steeping the tea")

    def add_condiments(self) -> None:
        self._echo("Adding lemon")


class Coffee(Beverage):
    """Asks before adding condiments."""

    PROMPT = "Would you like milk and sugar with your coffee (y/n)? "

    def __init__(self, echo: Echo = print, ask: AnswerProvider = input):
        super().__init__(echo)
        self._ask = ask

    def brew(self) -> None:
        self._echo("Dripping coffee through filter")

    def add_condiments(self) -> None:
        self._echo("Adding sugar and milk")

    def wants_condiments(self) -> bool:
        answer = self._ask(self.PROMPT) or ""
        return answer.strip().lower().startswith("y")


@register_demo("template-method", "Beverage recipe with brew and condiment steps filled in by subclasses")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append
    answer = get_config().coffee_condiments_answer

    def scripted_answer(prompt: str) -> str:
        echo(f"{prompt}{answer}")
        return answer

    echo("Preparing tea...")
    Tea(echo).prepare()

    echo("Preparing coffee...")
    Coffee(echo, scripted_answer).prepare()

    return lines
