"""
Display Formatting

French (fr-FR) formatting of prices in CFA francs and of order dates.
"""

from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

# fr-FR groups thousands with a narrow no-break space
THOUSANDS_SEPARATOR = '\u202f'

FRENCH_MONTHS_SHORT = (
    'janv.', 'févr.', 'mars', 'avr.', 'mai', 'juin',
    'juil.', 'août', 'sept.', 'oct.', 'nov.', 'déc.',
)


def format_number(value: Union[int, float, Decimal]) -> str:
    """
    Format a number with no decimals and fr-FR digit grouping.

    Example:
        >>> format_number(1234567.6)
        '1 234 568'
    """
    rounded = int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    sign = '-' if rounded < 0 else ''
    digits = f"{abs(rounded):,}".replace(',', THOUSANDS_SEPARATOR)
    return f"{sign}{digits}"


def format_currency(value: Union[int, float, Decimal]) -> str:
    """
    Format an amount in West African CFA francs.

    Example:
        >>> format_currency(25000)
        'CFA25 000 XOF'
    """
    return f"CFA{format_number(value)} XOF"


def format_date(value: Union[str, datetime], tz: Optional[tzinfo] = None) -> str:
    """
    Format a timestamp as a medium French date with short time.

    Args:
        value: datetime or ISO-8601 string
        tz: Timezone to display in (default: the value's own, UTC if naive)

    Example:
        >>> format_date("2024-01-02T14:30:00Z")
        '2 janv. 2024, 14:30'
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if tz is not None:
        value = value.astimezone(tz)

    month = FRENCH_MONTHS_SHORT[value.month - 1]
    return f"{value.day} {month} {value.year}, {value.hour:02d}:{value.minute:02d}"
