"""Half-open ranges over sequences and in-place range replacement on lists."""

from typing import Callable, Iterable, List, MutableSequence, Optional, Sequence, TypeVar

from patterns.src.registry import register_demo

T = TypeVar("T")


def slice_range(items: Sequence[T], start: Optional[int] = None, end: Optional[int] = None) -> Sequence[T]:
    """
    Items from ``start`` up to but not including ``end``.

    Either bound may be omitted to run from the beginning or to the end.
    """
    return items[start:end]


def replace_range(items: MutableSequence[T], index: int, count: int, new_items: Iterable[T]) -> None:
    """
    Remove ``count`` items at ``index`` and insert ``new_items`` there.

    Raises:
        IndexError: If the removed range does not fit inside the list
    """
    if index < 0 or count < 0 or index + count > len(items):
        raise IndexError(f"Range {index}+{count} is outside a list of {len(items)} items")
    items[index:index + count] = list(new_items)


def _numbers_line(values: Iterable[int]) -> str:
    return " ".join(str(v) for v in values)


@register_demo("slicing", "Half-open ranges and list range replacement")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo: Callable[[str], None] = lines.append
    numbers = list(range(10))

    echo("Iterate over range 2..6:")
    echo(_numbers_line(slice_range(numbers, 2, 6)))
    echo("Iterate over range ..4:")
    echo(_numbers_line(slice_range(numbers, end=4)))
    echo("Iterate over range 7..:")
    echo(_numbers_line(slice_range(numbers, 7)))
    start, end = 3, 8
    echo(f"Iterate over range {start}..{end}:")
    echo(_numbers_line(slice_range(numbers, start, end)))

    fruits = ["Apple", "Banana", "Cherry", "Date", "Elderberry", "Fig", "Grape", "Honeydew"]

    echo("Fruits from index 2 to 4:")
    lines.extend(slice_range(fruits, 2, 5))
    echo("Fruits from index 3 to the end:")
    lines.extend(slice_range(fruits, 3))
    start, end = 1, len(fruits) - 1
    echo(f"Fruits from index {start} to {end - 1}:")
    lines.extend(slice_range(fruits, start, end))

    replace_range(fruits, 1, 3, ["Blackberry", "Blueberry"])
    echo("List after replacing elements:")
    lines.extend(fruits)

    return lines
