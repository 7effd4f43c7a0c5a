"""
WhatsApp Share Service

Two ways out for a finished report:
1. A share sink (the platform's native share sheet) that can take a
   title, a text body and the report image
2. A wa.me deep link carrying the text body only

DESIGN DECISION: The share sink is an interface so the flow can be
tested with fakes and so a platform without native sharing simply
passes no sink. The deep link is always buildable and is the fallback
for every sink failure.
"""

from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

from alokasi.categories.registry import CategoryRegistry
from alokasi.formatting import format_currency
from alokasi.ledger.ledger import TransactionLedger
from alokasi.models.budget import BudgetState, SummaryText


DETAIL_HEADING = "*Detail:*"


class ShareSinkInterface(ABC):
    """
    Abstract interface for a native share target.
    """

    @abstractmethod
    def can_share_files(self) -> bool:
        """Whether the sink accepts an image attachment."""
        pass

    @abstractmethod
    async def share(
        self,
        title: str,
        text: str,
        image: Optional[bytes] = None,
        filename: Optional[str] = None,
    ) -> None:
        """
        Hand the report to the platform.

        Args:
            title: Share title
            text: Message body
            image: Encoded report image, if attached
            filename: Name for the attachment

        Raises:
            ShareCancelledError: If the user dismissed the share sheet
            ShareError: If the platform rejected the share
        """
        pass


class ShareError(Exception):
    """Base exception for share operations."""
    pass


class ShareCancelledError(ShareError):
    """The user dismissed the share sheet."""
    pass


class MissingRecipientError(ShareError):
    """No WhatsApp number is configured."""
    pass


def build_detail_lines(state: BudgetState, currency_prefix: str = "Rp") -> list[str]:
    """
    Numbered lines for every row with money on it.

    Numbering counts listed rows only. The amount shown is the income
    when there is any, otherwise the expense. Rows whose category no
    longer exists show "-".
    """
    registry = CategoryRegistry(state.categories)
    entries = TransactionLedger(registry, transactions=state.transactions).shareable_entries()

    lines = []
    for number, entry in enumerate(entries, start=1):
        category = registry.find_by_id(entry.category_id)
        category_name = category.name if category else "-"
        amount = entry.income if entry.income > 0 else entry.expense
        lines.append(
            f"{number}. {entry.description} [{category_name}] : "
            f"{currency_prefix} {format_currency(amount)}"
        )
    return lines


def build_share_message(
    summary: SummaryText,
    state: BudgetState,
    currency_prefix: str = "Rp",
) -> str:
    """Full text body: title, totals, then the detail list."""
    details = "\n".join(build_detail_lines(state, currency_prefix))
    return f"{summary.title}\n\n{summary.totals}\n\n{DETAIL_HEADING}\n{details}"


def build_whatsapp_link(link_base: str, number: str, message: str) -> str:
    """
    wa.me deep link with the message URL-encoded.

    Raises:
        MissingRecipientError: If number is empty
    """
    if not number:
        raise MissingRecipientError(
            "Nomor WhatsApp belum diisi. Atur nomor tujuan di Pengaturan."
        )
    return f"{link_base.rstrip('/')}/{number}?text={quote(message, safe='')}"
