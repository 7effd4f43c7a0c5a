"""Transaction ledger."""

from alokasi.ledger.amounts import MAX_AMOUNT, parse_amount
from alokasi.ledger.ledger import (
    HEAD_ROW_DESCRIPTION,
    HEAD_ROW_ID,
    SAVINGS_CATEGORY_MARKERS,
    TransactionLedger,
    UnknownFieldError,
    default_head_row,
)

__all__ = [
    "MAX_AMOUNT",
    "parse_amount",
    "HEAD_ROW_DESCRIPTION",
    "HEAD_ROW_ID",
    "SAVINGS_CATEGORY_MARKERS",
    "TransactionLedger",
    "UnknownFieldError",
    "default_head_row",
]
