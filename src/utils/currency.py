# src/utils/currency.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from src.core.errors import MalformedInput

CENTS = Decimal("0.01")


def cents_to_dollars(cents: Union[int, float, Decimal, str]) -> Decimal:
    """Converte centavos inteiros para o valor exato em dólares (Decimal)."""
    if isinstance(cents, bool):
        raise MalformedInput(f"Invalid amount: {cents!r}")
    try:
        value = Decimal(str(cents)) if isinstance(cents, float) else Decimal(cents)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise MalformedInput(f"Invalid amount: {cents!r}") from e
    if not value.is_finite():
        raise MalformedInput(f"Invalid amount: {cents!r}")
    return value / 100


def format_currency(amount: Union[int, float, Decimal, str, None]) -> str:
    """
    Formata um valor em centavos como moeda en-US.
    Ex: 123456 -> "$1,234.56"
    Ex: -5000 -> "-$50.00"
    Ex: None -> "$0.00" (agregado sem linhas)
    """
    if amount is None:
        amount = 0
    dollars = cents_to_dollars(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"
