"""Structural pattern matching on values, types, tuples and objects."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, List

from patterns.src.config import get_config
from patterns.src.registry import register_demo

Echo = Callable[[str], None]


class Weekday(IntEnum):
    """Same numbering as ``datetime.weekday()``."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


@dataclass(frozen=True)
class Person:
    name: str
    age: int


def day_type(day: Weekday) -> str:
    match day:
        case Weekday.SATURDAY | Weekday.SUNDAY:
            return "Weekend"
        case _:
            return "Weekday"


def classify(obj: Any) -> str:
    # bool is an int subclass but is not treated as a number here
    match obj:
        case str() if len(obj) == 0:
            return "Empty string"
        case str():
            return f"String of length {len(obj)}"
        case bool():
            return "Unknown type"
        case int() if obj < 0:
            return "Negative integer"
        case int():
            return f"Positive integer: {obj}"
        case None:
            return "Null object"
        case _:
            return "Unknown type"


def classify_point(x: int, y: int) -> str:
    match (x, y):
        case (0, 0):
            return "Origin"
        case (a, b) if a == b:
            return "On diagonal"
        case (_, b) if b > 0:
            return "Above X-axis"
        case (_, b) if b < 0:
            return "Below X-axis"
        case _:
            return "On X-axis"


def describe(person: Person) -> str:
    match person:
        case Person(age=age) if age < 0:
            return "Invalid age"
        case Person(age=age) if age < 18:
            return "Minor"
        case Person(age=age) if age < 65:
            return "Adult"
        case _:
            return "Senior"


def draw_shape(name: str, echo: Echo = print) -> bool:
    """Draw a known shape; returns False for anything else."""
    match name.strip().lower():
        case "circle":
            echo("Drawing a circle...")
        case "square":
            echo("Drawing a square...")
        case "triangle":
            echo("Drawing a triangle...")
        case _:
            echo("Unknown shape.")
            return False
    return True


@register_demo("matching", "Pattern matching on values, types, tuples and objects")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append

    echo("1. Day Type:")
    echo(f"Monday is a {day_type(Weekday.MONDAY)}")
    echo(f"Saturday is a {day_type(Weekday.SATURDAY)}")

    echo("2. Object Classification:")
    for value in ("", "Hello", -5, 10, None, 3.14):
        echo(classify(value))

    echo("3. Point Classification:")
    for x, y in ((0, 0), (1, 1), (2, 3), (4, -2)):
        echo(classify_point(x, y))

    echo("4. Person Description:")
    for person in (Person("Alice", 15), Person("Bob", 30), Person("Charlie", 70)):
        echo(describe(person))

    echo("5. Shape:")
    draw_shape(get_config().shape, echo)

    return lines
