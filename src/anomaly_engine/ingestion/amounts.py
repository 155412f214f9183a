"""
Money codec for the event feed.

Amounts arrive as decimal strings with exactly two fractional digits and
are handled internally as integer pennies, so all arithmetic on them is
exact:
    "1601.83" -> 160183
    3         -> "0.03"
"""

PENNIES_PER_UNIT = 100


def amount_to_pennies(amount: str) -> int:
    """
    Convert a two-decimal amount string to integer pennies by dropping the
    decimal point. Leading zeros are harmless ("007.50" -> 750).
    """
    amount = amount.strip()
    return int(amount[:-3] + amount[-2:])


def pennies_to_amount(pennies: int) -> str:
    """Format integer pennies as a two-decimal string, zero-padded ("0.03")."""
    sign = "-" if pennies < 0 else ""
    units, cents = divmod(abs(int(pennies)), PENNIES_PER_UNIT)
    return f"{sign}{units}.{cents:02d}"
