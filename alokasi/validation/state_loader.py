"""
Persisted State Loader

DESIGN DECISION: A persisted document is validated one top-level key at
a time. A key that is missing or fails validation is replaced by its
built-in default; the other keys are still loaded verbatim. A corrupt
document therefore never blocks startup and never throws away more
than the broken part.

Every substitution is reported as a StateIssue so the caller can log it.
Nothing here is shown to the user.
"""

import json
from datetime import date
from typing import Any, Callable, Optional

from pydantic import TypeAdapter, ValidationError

from alokasi.categories.registry import DEFAULT_CATEGORIES
from alokasi.config import DEFAULT_SAVINGS_PERCENT, SAVINGS_PERCENT_OPTIONS
from alokasi.ledger.ledger import default_head_row
from alokasi.models.budget import (
    BudgetState,
    Category,
    Period,
    StateIssue,
    StateLoadResult,
    Transaction,
)


_CATEGORIES = TypeAdapter(list[Category])
_TRANSACTIONS = TypeAdapter(list[Transaction])
_PERIOD = TypeAdapter(Period)


def current_period(today: Optional[date] = None) -> Period:
    """Period for the current calendar month."""
    today = today or date.today()
    return Period(month=today.month - 1, year=today.year)


def default_state(
    today: Optional[date] = None,
    savings_percent: int = DEFAULT_SAVINGS_PERCENT,
) -> BudgetState:
    """The state a first-time user starts with."""
    return BudgetState(
        categories=[c.model_copy() for c in DEFAULT_CATEGORIES],
        transactions=[default_head_row()],
        period=current_period(today),
        whatsapp_number="",
        savings_percent=savings_percent,
    )


def _validate_whatsapp_number(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("expected a string of digits")
    return value


def _validate_savings_percent(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("expected an integer")
    if value not in SAVINGS_PERCENT_OPTIONS:
        raise ValueError(f"{value} is not one of {SAVINGS_PERCENT_OPTIONS}")
    return value


def _validate_transactions(value: Any) -> list[Transaction]:
    transactions = _TRANSACTIONS.validate_python(value)
    if not transactions:
        raise ValueError("ledger needs at least the income row")
    return transactions


class StateLoader:
    """
    Turns a persisted document into a BudgetState.

    Accepts the document as JSON text, as an already-parsed dict, or None
    (nothing stored yet).
    """

    def __init__(
        self,
        today: Optional[date] = None,
        default_savings_percent: int = DEFAULT_SAVINGS_PERCENT,
    ):
        self._today = today
        self._default_savings_percent = default_savings_percent

    def load(self, serialized: Any) -> StateLoadResult:
        """
        Load a persisted document with per-field default substitution.

        Never raises.
        """
        defaults = default_state(self._today, self._default_savings_percent)

        if serialized is None:
            return StateLoadResult(state=defaults)

        document = serialized
        if isinstance(serialized, (str, bytes, bytearray)):
            try:
                document = json.loads(serialized)
            except ValueError as e:
                return StateLoadResult(
                    state=defaults,
                    issues=[StateIssue(
                        field="document",
                        issue_type="unparsable",
                        message=f"Stored state is not valid JSON: {e}",
                    )],
                )

        if not isinstance(document, dict):
            return StateLoadResult(
                state=defaults,
                issues=[StateIssue(
                    field="document",
                    issue_type="invalid",
                    message=f"Stored state is a {type(document).__name__}, not an object",
                )],
            )

        issues: list[StateIssue] = []

        fields: list[tuple[str, str, Callable[[Any], Any]]] = [
            ("categories", "categories", _CATEGORIES.validate_python),
            ("transactions", "transactions", _validate_transactions),
            ("period", "period", _PERIOD.validate_python),
            ("whatsappNumber", "whatsapp_number", _validate_whatsapp_number),
            ("savingsPercent", "savings_percent", _validate_savings_percent),
        ]

        values: dict[str, Any] = {}
        for key, attribute, validate in fields:
            if key not in document:
                issues.append(StateIssue(
                    field=key,
                    issue_type="missing",
                    message=f"'{key}' not stored; using default",
                ))
                values[attribute] = getattr(defaults, attribute)
                continue
            try:
                values[attribute] = validate(document[key])
            except (ValidationError, ValueError, TypeError) as e:
                issues.append(StateIssue(
                    field=key,
                    issue_type="invalid",
                    message=f"'{key}' rejected: {e}",
                ))
                values[attribute] = getattr(defaults, attribute)

        return StateLoadResult(state=BudgetState(**values), issues=issues)
