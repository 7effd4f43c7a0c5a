"""
Budget Session

The aggregate root. One session owns the reporting period, the ledger,
the category registry, the savings plan percent and the WhatsApp
recipient, and is the only thing that is ever persisted.

DESIGN DECISIONS:
1. The UI is a pure consumer. It issues commands on the session and
   re-reads derived queries; it never mutates the ledger directly.
2. Write-through persistence. Every command that changes state writes
   the full snapshot to storage before returning. There is no separate
   "save" action.
3. Loading never fails. A broken or partial document is repaired field
   by field (see alokasi.validation.state_loader).
"""

import re
from datetime import date
from typing import Any, Optional, Union

from alokasi.audit import AuditLogger
from alokasi.categories.matcher import AutoCategorizer
from alokasi.categories.registry import CategoryRegistry
from alokasi.config import DEFAULT_SAVINGS_PERCENT, SAVINGS_PERCENT_OPTIONS
from alokasi.formatting import format_currency, month_name, period_label
from alokasi.ledger.ledger import TransactionLedger
from alokasi.models.audit import AuditEventBuilder
from alokasi.models.budget import (
    BudgetState,
    Category,
    CategoryBreakdownItem,
    Period,
    SummaryText,
    Transaction,
    TransactionField,
)
from alokasi.services.storage import (
    StateStorageInterface,
    StorageError,
    StorageReadError,
)
from alokasi.validation.state_loader import StateLoader, default_state


DEFAULT_STATE_KEY = "budgetApp_v1"

_NON_DIGITS = re.compile(r"[^0-9]")


class SessionError(Exception):
    """Base exception for rejected session commands."""
    pass


class InvalidPeriodError(SessionError):
    """Month outside 0-11 or an impossible year."""
    pass


class InvalidSavingsPercentError(SessionError):
    """Savings percent is not one of the offered options."""
    pass


class PersistenceError(SessionError):
    """The state changed in memory but could not be written to storage."""
    pass


class BudgetSession:
    """
    Single-user budget aggregate with a narrow command API.

    Usage:
        session = BudgetSession.open(JsonFileStateStorage(path))
        session.set_income("5.000.000")
        row = session.add_transaction()
        session.update_transaction(row.id, "description", "bayar listrik")
        session.update_transaction(row.id, "expense", "350000")
    """

    def __init__(
        self,
        state: Optional[BudgetState] = None,
        storage: Optional[StateStorageInterface] = None,
        storage_key: str = DEFAULT_STATE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        categorizer: Optional[AutoCategorizer] = None,
        currency_prefix: str = "Rp",
        today: Optional[date] = None,
    ):
        """
        Initialize a session.

        Args:
            state: Initial aggregate. None starts from the defaults.
            storage: Where every change is written. None keeps the
                    session in memory only.
            storage_key: Key of the document in storage
            audit_logger: Audit trail; a local-only logger if None
            categorizer: Keyword matcher for description edits
            currency_prefix: Printed before amounts in summaries
            today: Reference date for defaults and year options
        """
        self._today = today
        if state is None:
            state = default_state(today)

        self._categorizer = categorizer
        self._registry = CategoryRegistry(state.categories)
        self._ledger = TransactionLedger(
            self._registry,
            categorizer=categorizer,
            transactions=state.transactions,
        )
        self._period = state.period.model_copy()
        self._whatsapp_number = state.whatsapp_number
        self._savings_percent = state.savings_percent

        self._storage = storage
        self._storage_key = storage_key
        self._audit = audit_logger or AuditLogger()
        self._currency_prefix = currency_prefix

    # -------------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        serialized: Any,
        default_savings_percent: int = DEFAULT_SAVINGS_PERCENT,
        **kwargs,
    ) -> "BudgetSession":
        """
        Build a session from a persisted document (JSON text or dict).

        Missing or malformed top-level fields fall back to their defaults;
        each substitution is logged as a warning.
        """
        audit_logger = kwargs.pop("audit_logger", None) or AuditLogger()
        loader = StateLoader(
            today=kwargs.get("today"),
            default_savings_percent=default_savings_percent,
        )
        result = loader.load(serialized)

        for issue in result.issues:
            audit_logger.log(AuditEventBuilder.state_field_defaulted(
                field=issue.field,
                reason=issue.message,
            ))

        session = cls(state=result.state, audit_logger=audit_logger, **kwargs)
        audit_logger.log(AuditEventBuilder.session_loaded(
            transaction_count=len(result.state.transactions),
            category_count=len(result.state.categories),
            defaulted_fields=result.defaulted_fields,
        ))
        return session

    @classmethod
    def open(
        cls,
        storage: StateStorageInterface,
        storage_key: str = DEFAULT_STATE_KEY,
        **kwargs,
    ) -> "BudgetSession":
        """
        Load the session stored under `storage_key` and keep writing to it.

        An unreadable store is treated like an empty one.
        """
        audit_logger = kwargs.pop("audit_logger", None) or AuditLogger()
        try:
            serialized = storage.get(storage_key)
        except StorageReadError as e:
            audit_logger.log_error(
                error_type="storage_read_failed",
                error_message=str(e),
                details={"key": storage_key},
            )
            serialized = None

        return cls.load(
            serialized,
            storage=storage,
            storage_key=storage_key,
            audit_logger=audit_logger,
            **kwargs,
        )

    def snapshot(self) -> BudgetState:
        """
        Capture the whole aggregate.

        The result is an independent copy: later commands on the session
        do not change a snapshot already taken.
        """
        return BudgetState(
            categories=self._registry.to_list(),
            transactions=self._ledger.to_list(),
            period=self._period.model_copy(),
            whatsapp_number=self._whatsapp_number,
            savings_percent=self._savings_percent,
        )

    def to_json(self) -> str:
        """Serialized snapshot, as written to storage."""
        return self.snapshot().model_dump_json(by_alias=True)

    def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set(self._storage_key, self.to_json())
        except StorageError as e:
            self._audit.log(AuditEventBuilder.save_failed(
                key=self._storage_key,
                error_message=str(e),
            ))
            raise PersistenceError(f"Could not save budget: {e}")
        self._audit.log(AuditEventBuilder.state_saved(
            key=self._storage_key,
            transaction_count=len(self._ledger),
        ))

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def registry(self) -> CategoryRegistry:
        """Detached copy of the categories; change them through session commands."""
        return CategoryRegistry(self._registry.to_list())

    @property
    def ledger(self) -> TransactionLedger:
        """Detached copy of the rows; change them through session commands."""
        return TransactionLedger(
            self.registry,
            categorizer=self._categorizer,
            transactions=self._ledger.to_list(),
        )

    @property
    def period(self) -> Period:
        return self._period.model_copy()

    @property
    def whatsapp_number(self) -> str:
        return self._whatsapp_number

    @property
    def savings_percent(self) -> int:
        return self._savings_percent

    @property
    def categories(self) -> list[Category]:
        return self._registry.to_list()

    @property
    def transactions(self) -> list[Transaction]:
        return self._ledger.to_list()

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    # -------------------------------------------------------------------------
    # Ledger commands
    # -------------------------------------------------------------------------

    def add_transaction(self) -> Transaction:
        """Append a blank row."""
        row = self._ledger.append()
        self._audit.log(AuditEventBuilder.transaction_added(row.id, len(self._ledger) - 1))
        self._persist()
        return row

    def update_transaction(
        self,
        transaction_id: str,
        field: Union[TransactionField, str],
        value: Any,
    ) -> Optional[Transaction]:
        """
        Edit one field of one row (see TransactionLedger.update).

        Returns:
            The updated row, or None if the id is unknown
        """
        before = self._ledger.get(transaction_id)
        previous_category = before.category_id if before else None

        row = self._ledger.update(transaction_id, field, value)
        if row is None:
            return None

        field = TransactionField(field)
        self._audit.log(AuditEventBuilder.transaction_updated(row.id, field.value))
        if field == TransactionField.DESCRIPTION and row.category_id != previous_category:
            self._audit.log(AuditEventBuilder.transaction_auto_categorized(
                transaction_id=row.id,
                previous_category_id=previous_category,
                category_id=row.category_id,
            ))
        self._persist()
        return row

    def set_income(self, value: Any) -> int:
        """Set this month's income (the head row) from raw input."""
        amount = self._ledger.set_head_income(value)
        self._audit.log(AuditEventBuilder.transaction_updated(
            self._ledger.head.id,
            TransactionField.INCOME.value,
        ))
        self._persist()
        return amount

    def remove_transaction(self, transaction_id: str) -> bool:
        """Delete a row. The head row and unknown ids are left alone."""
        index = self._ledger.index_of(transaction_id)
        if not self._ledger.remove(transaction_id):
            reason = "income row cannot be removed" if index == 0 else "no such transaction"
            self._audit.log(AuditEventBuilder.transaction_remove_refused(transaction_id, reason))
            return False

        self._audit.log(AuditEventBuilder.transaction_removed(transaction_id))
        self._persist()
        return True

    def add_savings_entry(self, percent: Optional[int] = None) -> Transaction:
        """
        Append the savings plan expense.

        Args:
            percent: Percent of the head income; the session's savings
                    plan percent if None
        """
        percent = self._savings_percent if percent is None else percent
        row = self._ledger.add_savings_entry(percent)
        self._audit.log(AuditEventBuilder.savings_entry_added(
            transaction_id=row.id,
            percent=percent,
            amount=row.expense,
            category_id=row.category_id,
        ))
        self._persist()
        return row

    # -------------------------------------------------------------------------
    # Category commands
    # -------------------------------------------------------------------------

    def add_category(self, name: str, color: str) -> Category:
        """
        Add a user category.

        Raises:
            InvalidCategoryError: If the name is blank
        """
        category = self._registry.add_category(name, color)
        self._audit.log(AuditEventBuilder.category_added(category.id, category.name))
        self._persist()
        return category

    def remove_category(self, category_id: str) -> bool:
        """
        Remove a user category.

        Transactions that referenced it keep the id and display as
        uncategorized.
        """
        category = self._registry.find_by_id(category_id)
        if not self._registry.remove_category(category_id):
            reason = "default category" if category is not None else "no such category"
            self._audit.log(AuditEventBuilder.category_remove_refused(category_id, reason))
            return False

        self._audit.log(AuditEventBuilder.category_removed(category_id))
        self._persist()
        return True

    # -------------------------------------------------------------------------
    # Settings commands
    # -------------------------------------------------------------------------

    def set_period(self, month: int, year: int) -> Period:
        """
        Change the reporting period label.

        Raises:
            InvalidPeriodError: If month is outside 0-11 or year is invalid
        """
        if isinstance(month, bool) or not isinstance(month, int) or not 0 <= month <= 11:
            raise InvalidPeriodError(f"Month must be 0-11, got {month!r}")
        if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
            raise InvalidPeriodError(f"Invalid year: {year!r}")

        self._period = Period(month=month, year=year)
        self._audit.log(AuditEventBuilder.period_changed(month, year))
        self._persist()
        return self.period

    def set_savings_percent(self, percent: int) -> int:
        """
        Choose the savings plan percent.

        Raises:
            InvalidSavingsPercentError: If percent is not an offered option
        """
        if percent not in SAVINGS_PERCENT_OPTIONS:
            raise InvalidSavingsPercentError(
                f"Savings percent must be one of {SAVINGS_PERCENT_OPTIONS}, got {percent!r}"
            )
        self._savings_percent = int(percent)
        self._audit.log(AuditEventBuilder.setting_changed("savings_percent", self._savings_percent))
        self._persist()
        return self._savings_percent

    def set_whatsapp_number(self, number: Any) -> str:
        """Store the share recipient. Everything but digits is dropped."""
        self._whatsapp_number = _NON_DIGITS.sub("", str(number or ""))
        # Masked: the audit log doesn't need the full number
        masked = f"***{self._whatsapp_number[-4:]}" if self._whatsapp_number else ""
        self._audit.log(AuditEventBuilder.setting_changed("whatsapp_number", masked))
        self._persist()
        return self._whatsapp_number

    # -------------------------------------------------------------------------
    # Derived queries
    # -------------------------------------------------------------------------

    def total_income(self) -> int:
        return self._ledger.total_income()

    def total_expense(self) -> int:
        return self._ledger.total_expense()

    def final_balance(self) -> int:
        return self._ledger.final_balance()

    def running_balances(self) -> list[int]:
        return self._ledger.running_balances()

    def category_breakdown(self) -> list[CategoryBreakdownItem]:
        return self._ledger.category_breakdown()

    def period_label(self) -> str:
        return period_label(self._period)

    def report_filename(self, extension: str = "jpg") -> str:
        """Report-<MonthName>-<Year>.<ext>"""
        return f"Report-{month_name(self._period.month)}-{self._period.year}.{extension}"

    def year_options(self) -> list[int]:
        """Selectable years: last year through three years ahead."""
        current = (self._today or date.today()).year
        return list(range(current - 1, current + 4))

    def summary_text(self) -> SummaryText:
        """Period title and formatted totals. Reads only."""
        total_income = self.total_income()
        total_expense = self.total_expense()
        final_balance = total_income - total_expense
        prefix = self._currency_prefix

        totals = "\n".join([
            f"Total Masuk: {prefix} {format_currency(total_income)}",
            f"Total Keluar: {prefix} {format_currency(total_expense)}",
            f"Sisa Saldo: {prefix} {format_currency(final_balance)}",
        ])
        return SummaryText(
            title=f"*Laporan Keuangan {self.period_label()}*",
            totals=totals,
            total_income=total_income,
            total_expense=total_expense,
            final_balance=final_balance,
        )
