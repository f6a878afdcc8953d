"""Factory and abstract factory for payment processors.

The simple factory maps a ``PaymentMethod`` straight to a processor. The
abstract factory hands out one factory object per method, and that factory
builds the processor.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, List, Type

from patterns.src.registry import register_demo

Echo = Callable[[str], None]


class PaymentMethod(str, Enum):
    """Supported payment methods."""
    CREDIT_CARD = "CreditCard"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "BankTransfer"


# ============================================================================
# Processors
# ============================================================================


class PaymentProcessor(ABC):
    """Processes a payment of a given amount."""

    def __init__(self, echo: Echo = print):
        self._echo = echo

    @abstractmethod
    def process_payment(self, amount: float) -> bool:
        """Charge ``amount``; returns True on success."""

    @abstractmethod
    def payment_method(self) -> str:
        """Human readable method name."""


class CreditCardProcessor(PaymentProcessor):
    def process_payment(self, amount: float) -> bool:
        self._echo(f"Processing credit card payment of ${amount:.2f}")
        return True

    def payment_method(self) -> str:
        return "Credit Card"


class PayPalProcessor(PaymentProcessor):
    def process_payment(self, amount: float) -> bool:
        self._echo(f"Processing PayPal payment of ${amount:.2f}")
        return True

    def payment_method(self) -> str:
        return "PayPal"


class BankTransferProcessor(PaymentProcessor):
    def process_payment(self, amount: float) -> bool:
        self._echo(f"Processing bank transfer of ${amount:.2f}")
        return True

    def payment_method(self) -> str:
        return "Bank Transfer"


_PROCESSORS: Dict[PaymentMethod, Type[PaymentProcessor]] = {
    PaymentMethod.CREDIT_CARD: CreditCardProcessor,
    PaymentMethod.PAYPAL: PayPalProcessor,
    PaymentMethod.BANK_TRANSFER: BankTransferProcessor,
}


def _unsupported(method) -> ValueError:
    name = method.value if isinstance(method, PaymentMethod) else method
    return ValueError(f"Payment method {name} is not supported")


def create_processor(method: PaymentMethod, echo: Echo = print) -> PaymentProcessor:
    """
    Simple factory.

    Args:
        method: Payment method to build a processor for
        echo: Output sink handed to the processor

    Returns:
        Processor for ``method``

    Raises:
        ValueError: If the method has no processor
    """
    try:
        processor_class = _PROCESSORS[method]
    except (KeyError, TypeError):
        raise _unsupported(method) from None
    return processor_class(echo)


# ============================================================================
# Abstract factory
# ============================================================================


class PaymentProcessorFactory(ABC):
    """Builds processors of a single family."""

    @abstractmethod
    def create_processor(self, echo: Echo = print) -> PaymentProcessor:
        ...


class CreditCardProcessorFactory(PaymentProcessorFactory):
    def create_processor(self, echo: Echo = print) -> PaymentProcessor:
        return CreditCardProcessor(echo)


class PayPalProcessorFactory(PaymentProcessorFactory):
    def create_processor(self, echo: Echo = print) -> PaymentProcessor:
        return PayPalProcessor(echo)


class BankTransferProcessorFactory(PaymentProcessorFactory):
    def create_processor(self, echo: Echo = print) -> PaymentProcessor:
        return BankTransferProcessor(echo)


_FACTORIES: Dict[PaymentMethod, Type[PaymentProcessorFactory]] = {
    PaymentMethod.CREDIT_CARD: CreditCardProcessorFactory,
    PaymentMethod.PAYPAL: PayPalProcessorFactory,
    PaymentMethod.BANK_TRANSFER: BankTransferProcessorFactory,
}


def get_factory(method: PaymentMethod) -> PaymentProcessorFactory:
    """
    Return the factory for a payment method.

    Raises:
        ValueError: If the method has no factory
    """
    try:
        return _FACTORIES[method]()
    except (KeyError, TypeError):
        raise _unsupported(method) from None


def _pay(processor: PaymentProcessor, amount: float, echo: Echo) -> None:
    echo(f"Using {processor.payment_method()} processor:")
    if processor.process_payment(amount):
        echo("Payment succeeded")


@register_demo("factory", "Simple factory and abstract factory for payment processors")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append

    echo("--- Simple Factory Example ---")
    for method, amount in (
        (PaymentMethod.CREDIT_CARD, 99.99),
        (PaymentMethod.PAYPAL, 149.99),
        (PaymentMethod.BANK_TRANSFER, 999.99),
    ):
        _pay(create_processor(method, echo), amount, echo)

    echo("--- Abstract Factory Example ---")
    for method, amount in (
        (PaymentMethod.CREDIT_CARD, 199.99),
        (PaymentMethod.PAYPAL, 249.99),
        (PaymentMethod.BANK_TRANSFER, 1999.99),
    ):
        _pay(get_factory(method).create_processor(echo), amount, echo)

    return lines
