"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_CURRENCY = re.compile(r"[€$£]|\bEUR\b", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles the formats found on the ledger sheets:
    - "1500", "-500.25"
    - "€1,500.00", "1500 EUR"
    - "1.500,00" (comma as decimal separator)
    - "(300.00)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount (may be zero; callers decide whether zero is allowed)

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = _CURRENCY.sub("", str(amount_str)).strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1].strip()

    text = text.replace(" ", "")
    if "," in text and "." in text:
        # The right-most separator is the decimal point
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        head, _, tail = text.rpartition(",")
        text = f"{head.replace(',', '')}.{tail}" if len(tail) != 3 else text.replace(",", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f'amount "{amount_str}" is not a valid number')
    if not amount.is_finite():
        raise ValueError(f'amount "{amount_str}" is not a valid number')
    return -amount if is_negative else amount
