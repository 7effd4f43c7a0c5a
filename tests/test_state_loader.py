"""Tests for loading persisted state with per-field defaults."""

import json
import pytest
from datetime import date

from alokasi.ledger import HEAD_ROW_ID
from alokasi.validation import StateLoader, current_period, default_state


TODAY = date(2025, 3, 14)


@pytest.fixture
def loader():
    return StateLoader(today=TODAY)


def full_document() -> dict:
    return {
        "categories": [
            {"id": "pokok", "name": "Kebutuhan Pokok", "color": "#ea580c", "isDefault": True},
            {"id": "c1", "name": "Kucing", "color": "#111111", "isDefault": False},
        ],
        "transactions": [
            {"id": HEAD_ROW_ID, "description": "Penghasilan", "categoryId": None,
             "income": 5000000, "expense": 0},
            {"id": "t1", "description": "pakan", "categoryId": "c1",
             "income": 0, "expense": 150000},
        ],
        "period": {"month": 7, "year": 2024},
        "whatsappNumber": "628123456789",
        "savingsPercent": 25,
    }


class TestDefaultState:
    """Tests for the first-run state."""

    def test_current_period_is_zero_based(self):
        """Test March maps to month index 2."""
        period = current_period(TODAY)
        assert (period.month, period.year) == (2, 2025)

    def test_default_state(self):
        """Test the first-run state."""
        state = default_state(TODAY)
        assert len(state.categories) == 11
        assert [t.id for t in state.transactions] == [HEAD_ROW_ID]
        assert state.whatsapp_number == ""
        assert state.savings_percent == 20


class TestStateLoader:
    """Tests for StateLoader."""

    def test_nothing_stored(self, loader):
        """Test None gives defaults without issues."""
        result = loader.load(None)
        assert result.is_clean
        assert result.state == default_state(TODAY)

    def test_full_document_loaded_verbatim(self, loader):
        """Test a valid document is loaded as is."""
        result = loader.load(json.dumps(full_document()))
        assert result.is_clean
        assert result.state.to_document() == full_document()

    def test_dict_accepted(self, loader):
        """Test an already-parsed document is accepted."""
        assert loader.load(full_document()).is_clean

    def test_unparsable_json(self, loader):
        """Test broken JSON gives defaults and one issue."""
        result = loader.load("{not json")
        assert result.state == default_state(TODAY)
        assert result.defaulted_fields == ["document"]
        assert result.issues[0].issue_type == "unparsable"

    def test_oversized_number_literal(self, loader):
        """Test a number literal too long to convert gives defaults instead of raising."""
        result = loader.load('{"savingsPercent": ' + "9" * 5000 + "}")
        assert result.state.savings_percent == default_state(TODAY).savings_percent
        assert not result.is_clean

    def test_non_object_document(self, loader):
        """Test a JSON array is rejected as a whole."""
        result = loader.load("[1, 2, 3]")
        assert result.defaulted_fields == ["document"]
        assert result.issues[0].issue_type == "invalid"

    def test_missing_field_defaulted(self, loader):
        """Test a missing key gets its default, others load."""
        document = full_document()
        del document["period"]
        result = loader.load(document)
        assert result.defaulted_fields == ["period"]
        assert result.issues[0].issue_type == "missing"
        assert result.state.period == current_period(TODAY)
        assert result.state.whatsapp_number == "628123456789"

    def test_invalid_field_defaulted(self, loader):
        """Test an invalid key gets its default, others load."""
        document = full_document()
        document["savingsPercent"] = 33
        document["period"] = {"month": 14, "year": 2024}
        result = loader.load(document)
        assert set(result.defaulted_fields) == {"savingsPercent", "period"}
        assert result.state.savings_percent == 20
        assert result.state.period == current_period(TODAY)
        assert len(result.state.transactions) == 2

    def test_configured_default_savings_percent(self):
        """Test the savings default comes from the loader settings."""
        result = StateLoader(today=TODAY, default_savings_percent=10).load({})
        assert result.state.savings_percent == 10
        assert len(result.issues) == 5

    def test_empty_transactions_defaulted(self, loader):
        """Test an empty ledger is replaced with the head row."""
        document = full_document()
        document["transactions"] = []
        result = loader.load(document)
        assert result.defaulted_fields == ["transactions"]
        assert [t.id for t in result.state.transactions] == [HEAD_ROW_ID]

    def test_bad_transaction_defaults_whole_list(self, loader):
        """Test one malformed row rejects the transactions field."""
        document = full_document()
        document["transactions"][1]["expense"] = "lots"
        result = loader.load(document)
        assert result.defaulted_fields == ["transactions"]

    def test_whatsapp_number_must_be_text(self, loader):
        """Test a numeric recipient is rejected."""
        document = full_document()
        document["whatsappNumber"] = 628123
        result = loader.load(document)
        assert result.defaulted_fields == ["whatsappNumber"]
        assert result.state.whatsapp_number == ""

    def test_empty_categories_kept(self, loader):
        """Test an explicitly empty category list is kept."""
        document = full_document()
        document["categories"] = []
        result = loader.load(document)
        assert result.is_clean
        assert result.state.categories == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
