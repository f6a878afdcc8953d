"""Composable filtering rules.

Rules are small predicates that combine with ``AndRule`` and ``OrRule``.
``RuleEngine.filter`` keeps the input order.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Iterable, List, TypeVar

from patterns.src.registry import register_demo

T = TypeVar("T")


@dataclass(frozen=True)
class Product:
    name: str
    price: float
    category: str


class Rule(ABC, Generic[T]):
    @abstractmethod
    def is_satisfied(self, item: T) -> bool:
        ...


class PriceRule(Rule[Product]):
    """Inclusive price band."""

    def __init__(self, min_price: float, max_price: float = float("inf")):
        self.min_price = min_price
        self.max_price = max_price

    def is_satisfied(self, item: Product) -> bool:
        return self.min_price <= item.price <= self.max_price


class CategoryRule(Rule[Product]):
    def __init__(self, category: str):
        self.category = category

    def is_satisfied(self, item: Product) -> bool:
        return item.category == self.category


class NameRule(Rule[Product]):
    """Case-insensitive substring match on the product name."""

    def __init__(self, name_contains: str):
        self.name_contains = name_contains.lower()

    def is_satisfied(self, item: Product) -> bool:
        return self.name_contains in item.name.lower()


class AndRule(Rule[T]):
    def __init__(self, *rules: Rule[T]):
        self.rules = list(rules)

    def is_satisfied(self, item: T) -> bool:
        return all(rule.is_satisfied(item) for rule in self.rules)


class OrRule(Rule[T]):
    def __init__(self, *rules: Rule[T]):
        self.rules = list(rules)

    def is_satisfied(self, item: T) -> bool:
        return any(rule.is_satisfied(item) for rule in self.rules)


class RuleEngine(Generic[T]):
    def filter(self, items: Iterable[T], rule: Rule[T]) -> List[T]:
        return [item for item in items if rule.is_satisfied(item)]


CATALOG = (
    Product("Gaming Laptop", 1500, "Electronics"),
    Product("Smartphone", 800, "Electronics"),
    Product("Programming Book", 50, "Books"),
    Product("Wireless Headphones", 200, "Electronics"),
    Product("Smart Watch", 300, "Electronics"),
    Product("T-shirt", 30, "Clothing"),
)


def featured_products_rule() -> Rule[Product]:
    """Expensive electronics, or moderately priced smart electronics."""
    electronics = CategoryRule("Electronics")
    expensive_electronics = AndRule(PriceRule(500), electronics)
    moderate_electronics = AndRule(PriceRule(100, 500), electronics)
    smart_products = AndRule(electronics, NameRule("smart"))
    return OrRule(expensive_electronics, AndRule(moderate_electronics, smart_products))


@register_demo("rules", "Composable product filtering rules")
def run_demo() -> List[str]:
    filtered = RuleEngine[Product]().filter(CATALOG, featured_products_rule())

    lines = ["Filtered Products (Expensive Electronics OR (Moderate-priced Electronics AND Smart)):"]
    lines.extend(f"{product.name} - ${product.price:g} - {product.category}" for product in filtered)
    return lines
