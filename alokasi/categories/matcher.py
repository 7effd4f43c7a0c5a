"""
Auto-Categorization Matcher

Suggests a category for a transaction the moment its description changes.

DESIGN DECISION: We use plain substring keyword matching because:
1. It is transparent to the user (they can see why a row was categorized)
2. It is deterministic and cheap
3. The user can always override the category afterwards

The keyword table is flattened and sorted by keyword length, longest
first, once at construction. A longer, more specific keyword ("airpam")
is therefore always tried before a shorter one it contains ("air"),
whatever order the groups were written in.

LIMITATION: Matching is substring containment, not word matching.
"les" matches inside "sales", "tas" inside "pantas". This is accepted
behavior; see DESIGN.md (open questions).
"""

from typing import Iterable, Mapping, NamedTuple, Optional

from alokasi.categories.registry import CategoryRegistry


# Keyword groups per default category id
KEYWORD_GROUPS: dict[str, tuple[str, ...]] = {
    "pokok": (
        "beras", "nasi", "sayur", "buah", "telur", "daging", "ikan",
        "minyak", "gula", "garam", "tepung", "mie", "roti", "air",
    ),
    "utilitas": (
        "listrik", "wifi", "airpam", "pulsa", "paketdata", "gas", "lpg",
        "iuran", "sampah",
    ),
    "keluarga": (
        "popok", "susu", "mainan", "seragam", "sepatu", "pakaian", "tas",
        "hijab", "kosmetik", "perawatan",
    ),
    "keuangan": (
        "tabungan", "investasi", "asuransi", "bpjs", "cicilan", "angsuran",
        "deposito",
    ),
    "transportasi": (
        "bensin", "parkir", "tol", "ojek", "taksi", "bus", "kereta",
        "servis", "oli", "ban",
    ),
    "kesehatan": (
        "obat", "vitamin", "dokter", "klinik", "rumahsakit", "teslab",
        "masker", "alkohol",
    ),
    "pendidikan": (
        "sekolah", "les", "buku", "alat", "kursus", "pelatihan", "seminar",
        "ujian",
    ),
    "rumah": (
        "sabun", "deterjen", "pewangi", "pel", "sapu", "vacuum", "pembersih",
        "lap",
    ),
    "sosial": (
        "kondangan", "sumbangan", "donasi", "hadiah", "arisan", "tahlilan",
        "syukuran",
    ),
    "hiburan": (
        "hiburan", "nongkrong", "nonton", "liburan", "game", "musik",
        "streaming", "kopi",
    ),
    "darurat": (
        "darurat", "perbaikan", "kehilangan", "denda", "rusak",
    ),
}


class KeywordRule(NamedTuple):
    """One (keyword, category id) pair of the lookup table."""
    keyword: str
    category_id: str


def build_keyword_table(
    groups: Mapping[str, Iterable[str]],
) -> tuple[KeywordRule, ...]:
    """
    Flatten keyword groups and sort by keyword length, descending.

    The sort is stable: equal-length keywords keep their source order.
    """
    rules = [
        KeywordRule(keyword.lower(), category_id)
        for category_id, keywords in groups.items()
        for keyword in keywords
        if keyword
    ]
    rules.sort(key=lambda rule: len(rule.keyword), reverse=True)
    return tuple(rules)


class AutoCategorizer:
    """
    Keyword-based category suggester.

    Stateless after construction; safe to share across sessions.
    """

    def __init__(self, groups: Optional[Mapping[str, Iterable[str]]] = None):
        self._table = build_keyword_table(KEYWORD_GROUPS if groups is None else groups)

    @property
    def table(self) -> tuple[KeywordRule, ...]:
        return self._table

    def match(self, description: Optional[str]) -> Optional[KeywordRule]:
        """First rule whose keyword occurs in the lower-cased description."""
        if not description:
            return None
        text = description.lower()
        for rule in self._table:
            if rule.keyword in text:
                return rule
        return None

    def suggest(
        self,
        description: Optional[str],
        registry: CategoryRegistry,
        current: Optional[str] = None,
    ) -> Optional[str]:
        """
        Category id the transaction should carry after this description edit.

        Returns the matched id only if it still exists in the registry;
        otherwise returns `current` unchanged. A match never clears an
        existing category and never assigns a dangling id.
        """
        rule = self.match(description)
        if rule is None:
            return current
        if registry.find_by_id(rule.category_id) is None:
            return current
        return rule.category_id
