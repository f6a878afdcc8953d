"""Generic in-place bubble sort over comparable items."""

from functools import total_ordering
from typing import Any, Callable, List, MutableSequence, Optional, TypeVar

from patterns.src.registry import register_demo

T = TypeVar("T")


def bubble_sort(items: MutableSequence[T], key: Optional[Callable[[T], Any]] = None) -> None:
    """
    Sort ``items`` in place, ascending.

    Equal items keep their relative order. Stops early once a pass makes no
    swaps.

    Args:
        items: Sequence to sort
        key: Optional function giving the value to compare
    """
    key = key or (lambda item: item)
    n = len(items)
    for i in range(n - 1):
        swapped = False
        for j in range(n - i - 1):
            if key(items[j + 1]) < key(items[j]):
                items[j], items[j + 1] = items[j + 1], items[j]
                swapped = True
        if not swapped:
            break


@total_ordering
class Employee:
    """Employees compare by name."""

    def __init__(self, id: int, name: str):
        self.id = id
        self.name = name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Employee):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other: "Employee") -> bool:
        if not isinstance(other, Employee):
            return NotImplemented
        return self.name < other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Employee(id={self.id}, name={self.name!r})"

    def __str__(self) -> str:
        return f"{self.id} {self.name}"


@register_demo("sorting", "Generic bubble sort of employees by name")
def run_demo() -> List[str]:
    employees = [Employee(4, "John"), Employee(2, "Bob"), Employee(3, "Greg"), Employee(1, "Tom")]
    bubble_sort(employees)
    return [str(employee) for employee in employees]
