"""
Category Registry

Holds the ordered list of spending categories for the session.

DESIGN DECISION: Categories are referenced from transactions by id only.
Removing a category never touches transactions; a transaction pointing
at a removed id simply resolves to the uncategorized fallback on read.
"""

from typing import Iterable, Iterator, Optional

from alokasi.models.budget import Category, generate_id


# Display fallback for a missing or unknown category
UNCATEGORIZED_NAME = "Tanpa Kategori"
UNCATEGORIZED_COLOR = "#cbd5e1"

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="pokok", name="Kebutuhan Pokok", color="#ea580c", is_default=True),
    Category(id="utilitas", name="Utilitas & Tagihan", color="#ca8a04", is_default=True),
    Category(id="keluarga", name="Kebutuhan Keluarga", color="#2563eb", is_default=True),
    Category(id="keuangan", name="Keuangan & Perencanaan", color="#16a34a", is_default=True),
    Category(id="transportasi", name="Transportasi", color="#475569", is_default=True),
    Category(id="kesehatan", name="Kesehatan", color="#dc2626", is_default=True),
    Category(id="pendidikan", name="Pendidikan", color="#7c3aed", is_default=True),
    Category(id="rumah", name="Perawatan Rumah", color="#0891b2", is_default=True),
    Category(id="sosial", name="Sosial", color="#db2777", is_default=True),
    Category(id="hiburan", name="Hiburan & Gaya Hidup", color="#c026d3", is_default=True),
    Category(id="darurat", name="Dana Tidak Terduga", color="#be123c", is_default=True),
)


class InvalidCategoryError(Exception):
    """Category input rejected (e.g. blank name)."""
    pass


class CategoryRegistry:
    """
    Ordered mapping of category id -> Category.

    Lookups by id are expected to miss sometimes; find_by_id returns
    None rather than raising.
    """

    def __init__(self, categories: Optional[Iterable[Category]] = None):
        """
        Args:
            categories: Initial categories. None seeds the defaults.
        """
        if categories is None:
            categories = DEFAULT_CATEGORIES
        # Copies, so the seed tuple and callers' lists stay untouched
        self._categories: list[Category] = [c.model_copy() for c in categories]

    def __iter__(self) -> Iterator[Category]:
        return iter(list(self._categories))

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return self.find_by_id(category_id) is not None

    def ids(self) -> list[str]:
        return [c.id for c in self._categories]

    def to_list(self) -> list[Category]:
        """Copies of all categories, in registry order."""
        return [c.model_copy() for c in self._categories]

    def find_by_id(self, category_id: object) -> Optional[Category]:
        """Return the category with this id, or None."""
        if not category_id:
            return None
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def display_for(self, category_id: Optional[str]) -> tuple[str, str]:
        """
        Resolve (name, color) for display.

        Unknown and None ids resolve to the uncategorized fallback.
        """
        category = self.find_by_id(category_id)
        if category is None:
            return UNCATEGORIZED_NAME, UNCATEGORIZED_COLOR
        return category.name, category.color

    def find_first_by_name_marker(self, markers: Iterable[str]) -> Optional[Category]:
        """
        First category (registry order) whose name contains any marker.

        Matching is case-sensitive substring containment.
        """
        markers = tuple(markers)
        for category in self._categories:
            if any(marker in category.name for marker in markers):
                return category
        return None

    def add_category(self, name: str, color: str) -> Category:
        """
        Add a user category.

        Names and colors need not be unique.

        Raises:
            InvalidCategoryError: If the name is blank
        """
        name = (name or "").strip()
        if not name:
            raise InvalidCategoryError("Category name cannot be empty")

        category = Category(
            id=self._fresh_id(),
            name=name,
            color=color,
            is_default=False,
        )
        self._categories.append(category)
        return category

    def remove_category(self, category_id: str) -> bool:
        """
        Remove a user category.

        Default categories are never removed, whoever asks.

        Returns:
            True if a category was removed
        """
        category = self.find_by_id(category_id)
        if category is None or category.is_default:
            return False
        self._categories.remove(category)
        return True

    def _fresh_id(self) -> str:
        existing = set(self.ids())
        while True:
            candidate = generate_id()
            if candidate not in existing:
                return candidate
