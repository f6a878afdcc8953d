"""Decorators stacking extras on a coffee order."""

from abc import ABC, abstractmethod
from typing import List

from patterns.src.registry import register_demo


class Coffee(ABC):
    @abstractmethod
    def description(self) -> str:
        ...

    @abstractmethod
    def cost(self) -> float:
        ...


class SimpleCoffee(Coffee):
    def description(self) -> str:
        return "Simple coffee"

    def cost(self) -> float:
        return 2.00


class CoffeeDecorator(Coffee):
    """
    Base decorator.

    Subclasses set ``name`` and ``price``; the description gets ", <name>"
    appended and the price is added to the wrapped cost.
    """

    name = ""
    price = 0.0

    def __init__(self, coffee: Coffee):
        self._coffee = coffee

    def description(self) -> str:
        return f"{self._coffee.description()}, {self.name}"

    def cost(self) -> float:
        return round(self._coffee.cost() + self.price, 2)


class MilkDecorator(CoffeeDecorator):
    name = "Milk"
    price = 0.50


class SugarDecorator(CoffeeDecorator):
    name = "Sugar"
    price = 0.20


class WhippedCreamDecorator(CoffeeDecorator):
    name = "Whipped Cream"
    price = 0.70


def _order_line(coffee: Coffee) -> str:
    return f"{coffee.description()} ${coffee.cost():.2f}"


@register_demo("decorator", "Coffee decorators adding milk, sugar and whipped cream")
def run_demo() -> List[str]:
    coffee: Coffee = SimpleCoffee()
    lines = [_order_line(coffee)]

    coffee = MilkDecorator(coffee)
    lines.append(_order_line(coffee))

    coffee = SugarDecorator(coffee)
    lines.append(_order_line(coffee))

    coffee = WhippedCreamDecorator(coffee)
    lines.append(_order_line(coffee))

    return lines
