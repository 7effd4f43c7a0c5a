"""Category registry and auto-categorization."""

from alokasi.categories.registry import (
    DEFAULT_CATEGORIES,
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_NAME,
    CategoryRegistry,
    InvalidCategoryError,
)
from alokasi.categories.matcher import (
    KEYWORD_GROUPS,
    AutoCategorizer,
    KeywordRule,
    build_keyword_table,
)

__all__ = [
    "DEFAULT_CATEGORIES",
    "UNCATEGORIZED_COLOR",
    "UNCATEGORIZED_NAME",
    "CategoryRegistry",
    "InvalidCategoryError",
    "KEYWORD_GROUPS",
    "AutoCategorizer",
    "KeywordRule",
    "build_keyword_table",
]
