"""
Data Models Package

This package contains all Pydantic models used in Alokasi Pendapatan.
All data flowing through the system must conform to these schemas.
"""

from alokasi.models.budget import (
    BudgetState,
    Category,
    CategoryBreakdownItem,
    Period,
    StateIssue,
    StateLoadResult,
    SummaryText,
    Transaction,
    TransactionField,
    generate_id,
)
from alokasi.models.report import (
    ExportResult,
    ShareMethod,
    ShareResult,
)
from alokasi.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Budget models
    "BudgetState",
    "Category",
    "CategoryBreakdownItem",
    "Period",
    "StateIssue",
    "StateLoadResult",
    "SummaryText",
    "Transaction",
    "TransactionField",
    "generate_id",
    # Report models
    "ExportResult",
    "ShareMethod",
    "ShareResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
