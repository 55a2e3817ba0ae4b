"""Currency display helpers and key obfuscation for logging.

Stripe represents monetary amounts as integers in the smallest currency unit (e.g.
cents for AUD), which is also how amounts are stored on orders and tickets.  Most
currencies are "normal-decimal" where 1 unit = 100 smallest units, but a subset of
currencies are "zero-decimal" where the integer amount *is* the unit amount.
"""

from decimal import Decimal

_OBFUSCATE_VISIBLE_CHARS = 4

ZERO_DECIMAL_CURRENCIES: frozenset[str] = frozenset(
    {
        "BIF",
        "CLP",
        "DJF",
        "GNF",
        "JPY",
        "KMF",
        "KRW",
        "MGA",
        "PYG",
        "RWF",
        "UGX",
        "VND",
        "VUV",
        "XAF",
        "XOF",
        "XPF",
    }
)


def minor_units_to_decimal(amount: int, currency: str) -> Decimal:
    """Convert an integer amount in the smallest currency unit to a Decimal.

    For normal-decimal currencies the integer is divided by 100 (e.g. ``15000``
    becomes ``Decimal("150.00")``).  For zero-decimal currencies the integer is
    returned as-is wrapped in a Decimal.

    Args:
        amount: The integer amount in the smallest currency unit.
        currency: An ISO 4217 currency code (case-insensitive).

    Returns:
        The amount as a :class:`~decimal.Decimal` in the standard unit.
    """
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return Decimal(amount)
    return (Decimal(amount) / 100).quantize(Decimal("0.01"))


def format_amount(amount: int, currency: str) -> str:
    """Format a minor-unit amount for display, e.g. ``"$150.00 AUD"``."""
    return f"${minor_units_to_decimal(amount, currency):,} {currency.upper()}"


def obfuscate_key(key: str) -> str:
    """Obfuscate an API key so it can be safely written to logs.

    Returns the last four characters of the key prefixed with ``"****"``.  If the key is
    shorter than four characters the entire value is masked and only ``"****"`` is
    returned.

    Args:
        key: The secret key to obfuscate.

    Returns:
        A partially masked string safe for log output.
    """
    if len(key) < _OBFUSCATE_VISIBLE_CHARS:
        return "****"
    return "****" + key[-_OBFUSCATE_VISIBLE_CHARS:]
