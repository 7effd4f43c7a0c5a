"""Display formatting shared by the session, the report renderer and sharing."""

from alokasi.models.budget import Period


MONTHS: tuple[str, ...] = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def format_currency(amount: int) -> str:
    """
    Format a whole amount with '.' thousands separators (id-ID style).

    >>> format_currency(5000000)
    '5.000.000'
    >>> format_currency(-1500)
    '-1.500'
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{abs(int(amount)):,}".replace(",", ".")


def month_name(month: int) -> str:
    return MONTHS[month]


def period_label(period: Period) -> str:
    """'Januari 2025' style label."""
    return f"{month_name(period.month)} {period.year}"
