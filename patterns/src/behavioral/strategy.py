"""Interchangeable payment strategies for a shopping cart."""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from patterns.src.registry import register_demo

Echo = Callable[[str], None]


def _money(amount: float) -> str:
    return f"{amount:g}"


class PaymentStrategy(ABC):
    def __init__(self, echo: Echo = print):
        self._echo = echo

    @abstractmethod
    def pay(self, amount: float) -> None:
        ...


class CreditCardPayment(PaymentStrategy):
    def __init__(self, card_number: str, name: str, echo: Echo = print):
        super().__init__(echo)
        self.card_number = card_number
        self.name = name

    def pay(self, amount: float) -> None:
        self._echo(f"Paid ${_money(amount)} using Credit Card ({self.card_number})")


class PayPalPayment(PaymentStrategy):
    def __init__(self, email: str, echo: Echo = print):
        super().__init__(echo)
        self.email = email

    def pay(self, amount: float) -> None:
        self._echo(f"Paid ${_money(amount)} using PayPal account ({self.email})")


class CryptoPayment(PaymentStrategy):
    def __init__(self, wallet_address: str, currency: str, echo: Echo = print):
        super().__init__(echo)
        self.wallet_address = wallet_address
        self.currency = currency

    def pay(self, amount: float) -> None:
        self._echo(f"Paid ${_money(amount)} worth of {self.currency} using wallet {self.wallet_address}")


class ShoppingCart:
    """Accumulates a total and pays it with the selected strategy."""

    def __init__(self):
        self._total = 0.0
        self._strategy: Optional[PaymentStrategy] = None

    @property
    def total(self) -> float:
        return self._total

    def add_item(self, price: float) -> None:
        self._total += price

    def set_payment_strategy(self, strategy: PaymentStrategy) -> None:
        self._strategy = strategy

    def checkout(self) -> None:
        """
        Pay the current total and empty the cart.

        Raises:
            RuntimeError: If no payment strategy was selected
        """
        if self._strategy is None:
            raise RuntimeError("Please select a payment method.")

        self._strategy.pay(self._total)
        self._total = 0.0


@register_demo("strategy", "Shopping cart paying through interchangeable strategies")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append
    cart = ShoppingCart()

    echo("Paying with Credit Card:")
    cart.add_item(100)
    cart.add_item(50)
    cart.set_payment_strategy(CreditCardPayment("1234-5678-9012-3456", "John Doe", echo))
    cart.checkout()

    echo("Paying with PayPal:")
    cart.add_item(75)
    cart.set_payment_strategy(PayPalPayment("john.doe@email.com", echo))
    cart.checkout()

    echo("Paying with Cryptocurrency:")
    cart.add_item(200)
    cart.set_payment_strategy(CryptoPayment("0x123...abc", "BTC", echo))
    cart.checkout()

    return lines
