"""Generators: sequences, filters, a custom iterable and lazy loading."""

from itertools import islice
from typing import Callable, Iterable, Iterator, List

from patterns.src.config import get_config
from patterns.src.registry import register_demo

Echo = Callable[[str], None]


def fibonacci(count: int) -> Iterator[int]:
    """First ``count`` Fibonacci numbers starting at 0."""
    current, following = 0, 1
    for _ in range(count):
        yield current
        current, following = following, current + following


def even_numbers(numbers: Iterable[int]) -> Iterator[int]:
    for number in numbers:
        if number % 2 == 0:
            yield number


class Deck:
    """Standard 52 card deck, suit by suit."""

    SUITS = ("Hearts", "Diamonds", "Clubs", "Spades")
    RANKS = ("Ace", "2", "3", "4", "5", "6", "7", "8", "9", "10", "Jack", "Queen", "King")

    def __iter__(self) -> Iterator[str]:
        for suit in self.SUITS:
            for rank in self.RANKS:
                yield f"{rank} of {suit}"

    def __len__(self) -> int:
        return len(self.SUITS) * len(self.RANKS)


def large_data_set(
    size: int = 1_000_000,
    progress_interval: int = 100_000,
    echo: Echo = print
) -> Iterator[str]:
    """
    Lazily produce ``"Item i"`` strings.

    Nothing runs until the first item is requested, and only the consumed
    prefix is ever produced.

    Args:
        size: Number of items available
        progress_interval: Report progress every this many items
        echo: Progress sink
    """
    echo("Starting to load data...")
    for i in range(size):
        if i % progress_interval == 0:
            echo(f"Loaded {i} items...")
        yield f"Item {i}"


@register_demo("iterators", "Generators for sequences, filtering, a card deck and lazy loading")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append
    config = get_config().iterators

    echo("Fibonacci Sequence:")
    echo(" ".join(str(n) for n in fibonacci(config.fibonacci_count)))

    echo("Even numbers:")
    echo(" ".join(str(n) for n in even_numbers(range(1, 11))))

    echo("Cards in the deck:")
    lines.extend(Deck())

    echo("Lazy loading of large data set:")
    data = large_data_set(config.large_data_set_size, config.progress_interval, echo)
    lines.extend(islice(data, config.lazy_take))

    return lines
