"""Callables as values: validator chains, multicast logging and higher-order helpers."""

from collections import Counter
from statistics import mean
from typing import Callable, Iterable, List, Sequence

from patterns.src.config import get_config
from patterns.src.registry import register_demo

Validation = Callable[[str], bool]
LogFunc = Callable[[str], None]


class RegistrationValidator:
    """All registered validations must accept the input."""

    def __init__(self):
        self._validations: List[Validation] = []

    def add_validation(self, validation: Validation) -> None:
        self._validations.append(validation)

    def validate(self, value: str) -> bool:
        """True when every validation passes; stops at the first failure."""
        return all(validation(value) for validation in self._validations)


class LogChain:
    """
    Multicast callable.

    ``LogChain(a) + b`` returns a new chain calling ``a`` then ``b``.
    """

    def __init__(self, *handlers: LogFunc):
        self._handlers = tuple(handlers)

    def __add__(self, other: LogFunc) -> "LogChain":
        if isinstance(other, LogChain):
            return LogChain(*self._handlers, *other._handlers)
        return LogChain(*self._handlers, other)

    def __call__(self, text: str) -> None:
        for handler in self._handlers:
            handler(text)

    def __len__(self) -> int:
        return len(self._handlers)


class ScreenLog:
    def __init__(self, echo: LogFunc = print):
        self._echo = echo

    def log_text(self, text: str) -> None:
        self._echo(f"-- {text}")

    def log_text_indented(self, text: str) -> None:
        self._echo(f"--- {text}")


def perform_operation(a: int, b: int, operation: Callable[[int, int], int]) -> int:
    return operation(a, b)


def process_string(text: str, processor: Callable[[str], None]) -> None:
    processor(text)


def process_numbers(operation: Callable[[Sequence[int]], float], *numbers: int) -> float:
    return operation(numbers)


def process_strings(operation: Callable[[List[str]], str], strings: Iterable[str]) -> str:
    return operation(list(strings))


def average_of_evens(numbers: Sequence[int]) -> float:
    evens = [n for n in numbers if n % 2 == 0]
    return mean(evens) if evens else 0


def most_common_length(words: List[str]) -> str:
    """Describe the most frequent word length; ties go to the length seen first."""
    counts = Counter(len(word) for word in words)
    length = max(counts, key=counts.__getitem__)
    matching = ", ".join(word for word in words if len(word) == length)
    return f"Most common length: {length}, Words: {matching}"


@register_demo("delegates", "Functions passed as values, multicast chains and validators")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append

    echo(f"Addition: {perform_operation(5, 3, lambda x, y: x + y)}")
    echo(f"Multiplication: {perform_operation(5, 3, lambda x, y: x * y)}")
    echo(f"Subtraction: {perform_operation(5, 3, lambda x, y: x - y)}")

    process_string("Hello, World!", lambda s: echo(s.upper()))
    process_string("Hello, World!", lambda s: echo(s.lower()))
    process_string("Hello, World!", lambda s: echo(str(len(s))))

    log = ScreenLog(echo)
    chain = LogChain(log.log_text) + log.log_text_indented
    chain(get_config().log_chain_text)

    validator = RegistrationValidator()
    validator.add_validation(lambda value: bool(value))
    validator.add_validation(lambda value: len(value) >= 8)
    validator.add_validation(lambda value: any(c.isupper() for c in value))
    echo(str(validator.validate("Password123")))

    echo(f"Result: {process_numbers(mean, 1, 2, 3, 4, 5):g}")
    echo(f"Result: {process_numbers(max, 10, 20, 30):g}")
    echo(f"Result: {process_numbers(average_of_evens, 1, 2, 3, 4, 5, 6):g}")

    echo(f"Result: {process_strings(lambda strs: ', '.join(sorted(strs)), ['apple', 'banana', 'cherry', 'date'])}")
    echo(f"Result: {process_strings(lambda strs: next((s for s in strs if len(s) > 4), 'Not found'), ['red', 'green', 'blue', 'yellow'])}")
    echo(f"Result: {process_strings(most_common_length, ['cat', 'dog', 'elephant', 'lion', 'tiger', 'bear'])}")

    return lines
