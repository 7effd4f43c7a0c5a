"""
Core Data Models for Alokasi Pendapatan

These models define the schemas for everything the budget session owns
and for the single persisted document. They are designed to:
1. Keep the persisted document keys stable (camelCase aliases)
2. Let Python code use snake_case attributes
3. Be serializable for storage and logging

DESIGN DECISION: category_id on a transaction is a weak reference.
Nothing here enforces that the id exists in the category list; every
read site resolves a missing category to the "uncategorized" fallback.
"""

from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def generate_id() -> str:
    """Short random identifier for categories and transactions."""
    return uuid4().hex[:12]


# =============================================================================
# ENUMS
# =============================================================================

class TransactionField(str, Enum):
    """
    Editable transaction fields.

    Values are the persisted document keys.
    """
    DESCRIPTION = "description"
    CATEGORY_ID = "categoryId"
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def _missing_(cls, value):
        # Accept the snake_case attribute name too
        if value == "category_id":
            return cls.CATEGORY_ID
        return None


# =============================================================================
# CORE MODELS
# =============================================================================

class Category(BaseModel):
    """
    A spending category.

    Default categories are seeded at session creation and cannot be
    deleted. User categories are created with is_default=False.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Opaque identifier, unique within the registry"
    )
    name: str = Field(
        ...,
        description="Display label"
    )
    color: str = Field(
        ...,
        description="Hex color used for grouping and charts"
    )
    is_default: bool = Field(
        default=False,
        alias="isDefault",
        description="Default categories cannot be deleted"
    )


class Transaction(BaseModel):
    """
    A single ledger row.

    The first row of a ledger is the income anchor; that is positional,
    there is no flag for it here.
    """
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Stable identifier for the record's lifetime"
    )
    description: str = Field(
        default="",
        description="Free-text label"
    )
    category_id: Optional[str] = Field(
        default=None,
        alias="categoryId",
        description="Weak reference to a Category; None means uncategorized"
    )
    income: int = Field(
        default=0,
        ge=0,
        description="Inflow in whole currency units"
    )
    expense: int = Field(
        default=0,
        ge=0,
        description="Outflow in whole currency units"
    )


class Period(BaseModel):
    """Reporting period. Selects the label only, never filters rows."""

    month: int = Field(
        ...,
        ge=0,
        le=11,
        description="Month index, 0 = January"
    )
    year: int = Field(
        ...,
        ge=1,
        le=9999,
        description="Calendar year"
    )


class BudgetState(BaseModel):
    """
    The whole aggregate as it is persisted.

    CRITICAL: This is the unit of persistence. It is always written and
    read as one document, never field by field.
    """
    model_config = ConfigDict(populate_by_name=True)

    categories: list[Category] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    period: Period
    whatsapp_number: str = Field(
        default="",
        alias="whatsappNumber",
        description="Recipient number, digits only"
    )
    savings_percent: int = Field(
        default=20,
        alias="savingsPercent",
        description="Savings plan percent of the head income"
    )

    def to_document(self) -> dict:
        """Serialize with the persisted (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class CategoryBreakdownItem(BaseModel):
    """One bucket of the expense breakdown."""

    category_id: Optional[str] = Field(
        default=None,
        description="None for the uncategorized bucket"
    )
    name: str
    color: str
    amount: int = Field(ge=0)
    percentage: float = Field(
        ge=0.0,
        le=100.0,
        description="Share of total expense, 0 when there is no expense"
    )


class SummaryText(BaseModel):
    """Period title plus formatted totals, used for sharing."""

    title: str
    totals: str
    total_income: int
    total_expense: int
    final_balance: int


# =============================================================================
# LOAD VALIDATION MODELS
# =============================================================================

class StateIssue(BaseModel):
    """A persisted field that could not be used as-is."""

    field: str = Field(
        ...,
        description="Top-level document key, or 'document' for the whole thing"
    )
    issue_type: str = Field(
        ...,
        pattern="^(missing|invalid|unparsable)$",
        description="Why the default was used"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class StateLoadResult(BaseModel):
    """Outcome of loading a persisted document."""

    state: BudgetState
    issues: list[StateIssue] = Field(default_factory=list)

    @property
    def defaulted_fields(self) -> list[str]:
        return [issue.field for issue in self.issues]

    @property
    def is_clean(self) -> bool:
        return not self.issues
