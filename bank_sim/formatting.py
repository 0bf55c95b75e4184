"""
Display formatting for monetary amounts.

Amounts are shown with a thousands separator and exactly two decimals,
followed by the currency code: 399,999,000.00 MNT.

Amounts of 10^16 and above are shown in scientific notation (1.00E+20)
instead of being expanded digit by digit.
"""

from decimal import Decimal

from bank_sim.config import settings

# Largest power of ten still written out in full
MAX_AMOUNT_EXPONENT = 15


def is_displayable(amount: Decimal) -> bool:
    """True for finite amounts below 10^(MAX_AMOUNT_EXPONENT + 1)."""
    return amount.is_finite() and amount.adjusted() <= MAX_AMOUNT_EXPONENT


def format_number(amount: Decimal | int | float) -> str:
    """Format an amount as 1,234,567.89."""
    amount = Decimal(str(amount))
    if not is_displayable(amount):
        return f"{amount:.2E}"
    return f"{amount:,.2f}"


def format_currency(amount: Decimal | int | float, currency: str | None = None) -> str:
    """Format an amount with the configured currency code appended."""
    return f"{format_number(amount)} {currency or settings.CURRENCY}"
