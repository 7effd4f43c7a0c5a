"""
Transaction Ledger

The ordered sequence of transactions for the active period, plus every
derived read-only view (totals, running balance, category breakdown).

DESIGN DECISIONS:
1. Row order is significant. It is the display order and the order the
   running balance is accumulated in. Row 0 is the income anchor.
2. The head row is structurally permanent: remove() refuses it.
3. Derived values are recomputed on every call. Ledgers hold dozens of
   rows, so there is no cache to invalidate after an edit.
4. Malformed user input never raises. Bad amounts become 0, unknown
   ids are no-ops.
"""

from typing import Any, Iterable, Iterator, Optional, Union

from alokasi.categories.matcher import AutoCategorizer
from alokasi.categories.registry import CategoryRegistry
from alokasi.ledger.amounts import parse_amount
from alokasi.models.budget import (
    CategoryBreakdownItem,
    Transaction,
    TransactionField,
    generate_id,
)


HEAD_ROW_ID = "initial-income"
HEAD_ROW_DESCRIPTION = "Penghasilan"

# Name fragments identifying the savings / financial planning category
SAVINGS_CATEGORY_MARKERS: tuple[str, ...] = ("Keuangan", "Tabungan")


class UnknownFieldError(Exception):
    """update() was asked to change a field transactions don't have."""
    pass


def default_head_row() -> Transaction:
    """The income anchor a fresh ledger starts with."""
    return Transaction(
        id=HEAD_ROW_ID,
        description=HEAD_ROW_DESCRIPTION,
        category_id=None,
        income=0,
        expense=0,
    )


class TransactionLedger:
    """
    Ordered transactions with derived aggregates.

    The ledger shares the session's CategoryRegistry: category lookups
    always see the registry as it is now, including user deletions.
    """

    def __init__(
        self,
        registry: CategoryRegistry,
        categorizer: Optional[AutoCategorizer] = None,
        transactions: Optional[Iterable[Transaction]] = None,
    ):
        """
        Args:
            registry: Category registry used for matching and display
            categorizer: Keyword matcher; the default table if None
            transactions: Initial rows. Empty or None gives a ledger with
                only the default head row.
        """
        self._registry = registry
        self._categorizer = categorizer or AutoCategorizer()
        self._rows: list[Transaction] = [t.model_copy() for t in (transactions or [])]
        if not self._rows:
            self._rows.append(default_head_row())

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._rows))

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def head(self) -> Transaction:
        return self._rows[0]

    def get(self, transaction_id: str) -> Optional[Transaction]:
        index = self.index_of(transaction_id)
        return None if index is None else self._rows[index]

    def index_of(self, transaction_id: str) -> Optional[int]:
        for index, row in enumerate(self._rows):
            if row.id == transaction_id:
                return index
        return None

    def to_list(self) -> list[Transaction]:
        """Copies of all rows, in ledger order."""
        return [row.model_copy() for row in self._rows]

    def has_entries(self) -> bool:
        """False while the ledger holds only the head row."""
        return len(self._rows) > 1

    def shareable_entries(self) -> list[Transaction]:
        """Rows with a nonzero income or expense, in ledger order."""
        return [row for row in self._rows if row.income > 0 or row.expense > 0]

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def append(self) -> Transaction:
        """Add a blank row (no description, no category, zero amounts) at the end."""
        row = Transaction(id=self._fresh_id())
        self._rows.append(row)
        return row

    def update(
        self,
        transaction_id: str,
        field: Union[TransactionField, str],
        value: Any,
    ) -> Optional[Transaction]:
        """
        Change one field of one row.

        - description: stored as text, then the auto-categorizer may set
          category_id (see AutoCategorizer.suggest)
        - income / expense: coerced with parse_amount
        - categoryId: replaced as given; empty values clear it

        Returns:
            The updated row, or None if the id is unknown

        Raises:
            UnknownFieldError: If `field` is not an editable field
        """
        try:
            field = TransactionField(field)
        except ValueError:
            raise UnknownFieldError(f"Transactions have no editable field '{field}'")

        row = self.get(transaction_id)
        if row is None:
            return None

        if field == TransactionField.DESCRIPTION:
            description = "" if value is None else str(value)
            row.description = description
            row.category_id = self._categorizer.suggest(
                description,
                self._registry,
                current=row.category_id,
            )
        elif field == TransactionField.CATEGORY_ID:
            row.category_id = str(value) if value else None
        elif field == TransactionField.INCOME:
            row.income = parse_amount(value)
        elif field == TransactionField.EXPENSE:
            row.expense = parse_amount(value)

        return row

    def set_head_income(self, value: Any) -> int:
        """Set the income anchor's amount from raw input. Returns the stored amount."""
        self.update(self.head.id, TransactionField.INCOME, value)
        return self.head.income

    def remove(self, transaction_id: str) -> bool:
        """
        Delete a row.

        The head row is never removed; unknown ids are ignored.

        Returns:
            True if a row was removed
        """
        index = self.index_of(transaction_id)
        if index is None or index == 0:
            return False
        del self._rows[index]
        return True

    def add_savings_entry(self, percent: int) -> Transaction:
        """
        Append an expense row setting aside `percent` of the head income.

        The amount is rounded half up to whole units. The row goes to the
        first category whose name carries a savings marker, or stays
        uncategorized if there is none.
        """
        percent = parse_amount(percent)
        # Integer half-up rounding of income * percent / 100
        amount = (self.head.income * percent + 50) // 100
        category = self._registry.find_first_by_name_marker(SAVINGS_CATEGORY_MARKERS)

        row = Transaction(
            id=self._fresh_id(),
            description=f"Tabungan ({percent}%)",
            category_id=category.id if category else None,
            income=0,
            expense=amount,
        )
        self._rows.append(row)
        return row

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def total_income(self) -> int:
        return sum(row.income for row in self._rows)

    def total_expense(self) -> int:
        return sum(row.expense for row in self._rows)

    def final_balance(self) -> int:
        """Total income minus total expense. Can be negative."""
        return self.total_income() - self.total_expense()

    def running_balance(self, up_to_index: int) -> int:
        """
        Sum of (income - expense) over rows 0..up_to_index inclusive.

        Indexes past the end are clamped to the last row; negative
        indexes give 0.
        """
        if up_to_index < 0:
            return 0
        return sum(row.income - row.expense for row in self._rows[:up_to_index + 1])

    def running_balances(self) -> list[int]:
        """Running balance after every row, in ledger order."""
        balances = []
        balance = 0
        for row in self._rows:
            balance += row.income - row.expense
            balances.append(balance)
        return balances

    def category_breakdown(self) -> list[CategoryBreakdownItem]:
        """
        Expense per category bucket, largest first.

        Only rows with expense > 0 count. A None category id is its own
        bucket. Ties keep the order buckets were first seen in.
        """
        totals: dict[Optional[str], int] = {}
        for row in self._rows:
            if row.expense > 0:
                totals[row.category_id] = totals.get(row.category_id, 0) + row.expense

        total_expense = sum(totals.values())
        items = []
        for category_id, amount in totals.items():
            name, color = self._registry.display_for(category_id)
            items.append(CategoryBreakdownItem(
                category_id=category_id,
                name=name,
                color=color,
                amount=amount,
                percentage=(amount / total_expense * 100) if total_expense > 0 else 0.0,
            ))

        items.sort(key=lambda item: item.amount, reverse=True)
        return items

    def _fresh_id(self) -> str:
        existing = {row.id for row in self._rows}
        while True:
            candidate = generate_id()
            if candidate not in existing:
                return candidate
