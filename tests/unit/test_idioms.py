"""
Unit tests for the language idiom demos.

Tests cover records, generators, callables, pattern matching, slicing and
sorting.
"""

from decimal import Decimal
from itertools import islice

import pytest
from pydantic import ValidationError

from patterns.src.idioms import delegates, iterators, matching, records, slicing
from patterns.src.idioms.delegates import LogChain, perform_operation, process_numbers, process_strings
from patterns.src.idioms.iterators import Deck, even_numbers, fibonacci, large_data_set
from patterns.src.idioms.matching import Person, Weekday, classify, classify_point, day_type, describe, draw_shape
from patterns.src.idioms.records import OrderItem, OrderService, Product
from patterns.src.idioms.slicing import replace_range, slice_range
from patterns.src.idioms.sorting import Employee, bubble_sort

LAPTOP = Product(id="P1", name="Laptop", price=Decimal("999.99"))
MOUSE = Product(id="P2", name="Mouse", price=Decimal("24.99"))


# ============================================================================
# RECORDS
# ============================================================================


class TestRecords:
    """Test immutable order records."""

    def test_value_equality(self):
        """Test records with the same fields are equal."""
        assert Product(id="P1", name="Laptop", price=Decimal("999.99")) == LAPTOP

    def test_records_are_frozen(self):
        """Test fields cannot be reassigned."""
        with pytest.raises(ValidationError):
            LAPTOP.price = Decimal("1")

    def test_order_totals(self):
        """Test totals are computed from the items."""
        order = OrderService().create_order("C001", [OrderItem(product=LAPTOP, quantity=1), OrderItem(product=MOUSE, quantity=2)])

        assert order.total_amount == Decimal("1049.97")
        assert order.total_items == 3

    def test_new_order_is_pending(self):
        """Test new orders start Pending."""
        service = OrderService()
        order = service.create_order("C001", [])

        assert service.get_order_status(order.id).status == "Pending"

    def test_update_status(self):
        """Test the status record is replaced."""
        service = OrderService()
        order = service.create_order("C001", [])
        before = service.get_order_status(order.id)

        service.update_order_status(order.id, "Processing")

        assert service.get_order_status(order.id).status == "Processing"
        assert before.status == "Pending"

    def test_add_item_copies_order(self):
        """Test adding an item leaves the original order untouched."""
        service = OrderService()
        order = service.create_order("C001", [OrderItem(product=LAPTOP, quantity=1), OrderItem(product=MOUSE, quantity=2)])

        updated = service.add_item_to_order(order.id, OrderItem(product=MOUSE, quantity=1))

        assert updated.total_amount == Decimal("1074.96")
        assert updated.total_items == 4
        assert order.total_items == 3
        assert updated.id == order.id

    def test_orders_by_customer(self):
        """Test orders are filtered by customer."""
        service = OrderService()
        service.create_order("C001", [])
        service.create_order("C002", [])
        service.create_order("C001", [])

        assert len(service.get_orders_by_customer("C001")) == 2

    def test_missing_order(self):
        """Test unknown orders raise ValueError."""
        with pytest.raises(ValueError, match="Order not found"):
            OrderService().update_order_status("non-existent-id", "Shipped")

    def test_missing_status(self):
        """Test unknown order status raises ValueError."""
        with pytest.raises(ValueError, match="Order status not found"):
            OrderService().get_order_status("missing")

    def test_demo_transcript(self):
        """Test the demo ends with the not found error."""
        lines = records.run_demo()

        assert lines[0].endswith("Total: $1049.97")
        assert "Updated order total: $1074.96, Total items: 4" in lines
        assert "Customer C001 has 1 orders" in lines
        assert lines[-1] == "Error: Order not found"


# ============================================================================
# ITERATORS
# ============================================================================


class TestIterators:
    """Test generators."""

    def test_fibonacci(self):
        """Test the first ten numbers."""
        assert list(fibonacci(10)) == [0, 1, 1, 2, 3, 5, 8, 13, 21, 34]

    def test_fibonacci_zero(self):
        """Test a zero count yields nothing."""
        assert list(fibonacci(0)) == []

    def test_even_numbers(self):
        """Test odd numbers are filtered out."""
        assert list(even_numbers(range(1, 11))) == [2, 4, 6, 8, 10]

    def test_deck(self):
        """Test 52 cards in suit-major order."""
        cards = list(Deck())

        assert len(cards) == 52
        assert cards[0] == "Ace of Hearts"
        assert cards[12] == "King of Hearts"
        assert cards[13] == "Ace of Diamonds"
        assert cards[-1] == "King of Spades"

    def test_large_data_set_is_lazy(self):
        """Test nothing is produced until iteration and only what is taken."""
        progress = []
        data = large_data_set(echo=progress.append)

        assert progress == []

        assert list(islice(data, 5)) == ["Item 0", "Item 1", "Item 2", "Item 3", "Item 4"]
        assert progress == ["Starting to load data...", "Loaded 0 items..."]

    def test_progress_interval(self):
        """Test progress is reported at every interval."""
        progress = []
        list(large_data_set(size=25, progress_interval=10, echo=progress.append))

        assert progress[1:] == ["Loaded 0 items...", "Loaded 10 items...", "Loaded 20 items..."]

    def test_demo_transcript(self):
        """Test the demo prints the sequences and five lazy items."""
        lines = iterators.run_demo()

        assert "0 1 1 2 3 5 8 13 21 34" in lines
        assert "2 4 6 8 10" in lines
        assert lines[-5:] == ["Item 0", "Item 1", "Item 2", "Item 3", "Item 4"]


# ============================================================================
# DELEGATES
# ============================================================================


class TestDelegates:
    """Test callables passed as values."""

    def test_perform_operation(self):
        """Test arithmetic callables."""
        assert perform_operation(5, 3, lambda x, y: x + y) == 8
        assert perform_operation(5, 3, lambda x, y: x * y) == 15
        assert perform_operation(5, 3, lambda x, y: x - y) == 2

    def test_log_chain_calls_in_order(self):
        """Test combined callables run in the order they were added."""
        calls = []
        chain = LogChain(lambda text: calls.append(f"-- {text}")) + (lambda text: calls.append(f"--- {text}"))

        chain("Ada")

        assert calls == ["-- Ada", "--- Ada"]
        assert len(chain) == 2

    def test_log_chains_combine(self):
        """Test adding two chains concatenates them."""
        calls = []
        chain = LogChain(calls.append) + LogChain(calls.append, calls.append)

        chain("x")

        assert calls == ["x", "x", "x"]

    def test_process_numbers(self):
        """Test variadic numbers reach the operation."""
        assert process_numbers(max, 10, 20, 30) == 30
        assert process_numbers(delegates.average_of_evens, 1, 2, 3, 4, 5, 6) == 4
        assert process_numbers(delegates.average_of_evens, 1, 3) == 0

    def test_process_strings(self):
        """Test string aggregations."""
        assert process_strings(lambda s: ", ".join(sorted(s)), ["date", "apple"]) == "apple, date"
        assert process_strings(
            delegates.most_common_length,
            ["cat", "dog", "elephant", "lion", "tiger", "bear"]
        ) == "Most common length: 3, Words: cat, dog"

    def test_demo_transcript(self):
        """Test the demo covers every helper."""
        lines = delegates.run_demo()

        assert lines[:3] == ["Addition: 8", "Multiplication: 15", "Subtraction: 2"]
        assert "HELLO, WORLD!" in lines
        assert "13" in lines
        assert "True" in lines
        assert "Result: green" in lines


# ============================================================================
# MATCHING
# ============================================================================


class TestMatching:
    """Test pattern matching helpers."""

    @pytest.mark.parametrize("day,expected", [
        (Weekday.MONDAY, "Weekday"),
        (Weekday.FRIDAY, "Weekday"),
        (Weekday.SATURDAY, "Weekend"),
        (Weekday.SUNDAY, "Weekend"),
    ])
    def test_day_type(self, day, expected):
        assert day_type(day) == expected

    @pytest.mark.parametrize("value,expected", [
        ("", "Empty string"),
        ("Hello", "String of length 5"),
        (-5, "Negative integer"),
        (10, "Positive integer: 10"),
        (0, "Positive integer: 0"),
        (None, "Null object"),
        (3.14, "Unknown type"),
        (True, "Unknown type"),
    ])
    def test_classify(self, value, expected):
        assert classify(value) == expected

    @pytest.mark.parametrize("x,y,expected", [
        (0, 0, "Origin"),
        (1, 1, "On diagonal"),
        (2, 3, "Above X-axis"),
        (4, -2, "Below X-axis"),
        (5, 0, "On X-axis"),
    ])
    def test_classify_point(self, x, y, expected):
        assert classify_point(x, y) == expected

    @pytest.mark.parametrize("age,expected", [(15, "Minor"), (18, "Adult"), (64, "Adult"), (65, "Senior"), (70, "Senior")])
    def test_describe(self, age, expected):
        assert describe(Person("Someone", age)) == expected

    def test_draw_known_shape(self):
        """Test shape names are matched case-insensitively."""
        lines = []

        assert draw_shape("Square", lines.append)
        assert lines == ["Drawing a square..."]

    def test_draw_unknown_shape(self):
        """Test unknown shapes report failure."""
        lines = []

        assert not draw_shape("hexagon", lines.append)
        assert lines == ["Unknown shape."]

    def test_demo_transcript(self):
        """Test the demo draws the configured shape."""
        lines = matching.run_demo()

        assert "Monday is a Weekday" in lines
        assert lines[-1] == "Drawing a circle..."


# ============================================================================
# SLICING AND SORTING
# ============================================================================


class TestSlicing:
    """Test half-open ranges."""

    def test_ranges(self):
        """Test closed and open ended ranges."""
        numbers = list(range(10))

        assert slice_range(numbers, 2, 6) == [2, 3, 4, 5]
        assert slice_range(numbers, end=4) == [0, 1, 2, 3]
        assert slice_range(numbers, 7) == [7, 8, 9]

    def test_replace_range(self):
        """Test removing three and inserting two."""
        fruits = ["Apple", "Banana", "Cherry", "Date", "Elderberry"]

        replace_range(fruits, 1, 3, ["Blackberry", "Blueberry"])

        assert fruits == ["Apple", "Blackberry", "Blueberry", "Elderberry"]

    def test_replace_range_out_of_bounds(self):
        """Test ranges past the end raise IndexError."""
        with pytest.raises(IndexError):
            replace_range(["a", "b"], 1, 5, [])

    def test_demo_transcript(self):
        """Test the final list after replacement."""
        lines = slicing.run_demo()

        assert lines[-7:] == ["Apple", "Blackberry", "Blueberry", "Elderberry", "Fig", "Grape", "Honeydew"]


class TestSorting:
    """Test the generic bubble sort."""

    def test_sorts_numbers(self):
        """Test ascending order in place."""
        values = [5, 1, 4, 2, 3]
        bubble_sort(values)

        assert values == [1, 2, 3, 4, 5]

    def test_sort_with_key(self):
        """Test a key function controls the comparison."""
        words = ["ccc", "a", "bb"]
        bubble_sort(words, key=len)

        assert words == ["a", "bb", "ccc"]

    def test_stable(self):
        """Test equal keys keep their order."""
        pairs = [(1, "b"), (0, "x"), (1, "a")]
        bubble_sort(pairs, key=lambda p: p[0])

        assert pairs == [(0, "x"), (1, "b"), (1, "a")]

    def test_employees_sorted_by_name(self):
        """Test employees compare by name, not id."""
        employees = [Employee(4, "John"), Employee(2, "Bob"), Employee(3, "Greg"), Employee(1, "Tom")]
        bubble_sort(employees)

        assert [str(e) for e in employees] == ["2 Bob", "3 Greg", "4 John", "1 Tom"]

    def test_empty_and_single(self):
        """Test trivial inputs."""
        empty, single = [], [1]
        bubble_sort(empty)
        bubble_sort(single)

        assert empty == [] and single == [1]
