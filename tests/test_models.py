"""
Tests for Alokasi Pendapatan

Test strategy:
1. Unit tests for individual components (models, registry, ledger)
2. Flow tests for export and share (with fake share sinks)
3. No real I/O beyond pytest's tmp_path
"""

import pytest
from uuid import uuid4

from pydantic import ValidationError

from alokasi.formatting import format_currency, month_name, period_label
from alokasi.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from alokasi.models.budget import (
    BudgetState,
    Category,
    Period,
    StateIssue,
    StateLoadResult,
    Transaction,
    TransactionField,
)
from alokasi.models.report import ExportResult, ShareMethod, ShareResult


class TestBudgetModels:
    """Tests for budget-related Pydantic models."""

    def test_category_accepts_persisted_alias(self):
        """Test Category reads the camelCase isDefault key."""
        category = Category.model_validate(
            {"id": "pokok", "name": "Kebutuhan Pokok", "color": "#ea580c", "isDefault": True}
        )
        assert category.is_default is True

    def test_category_defaults_to_user_category(self):
        """Test new categories are not default unless flagged."""
        category = Category(name="Kucing", color="#000000")
        assert category.is_default is False
        assert category.id

    def test_transaction_defaults(self):
        """Test a bare transaction is blank and uncategorized."""
        row = Transaction()
        assert row.description == ""
        assert row.category_id is None
        assert row.income == 0
        assert row.expense == 0

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(expense=-100)

    def test_transaction_validates_assignment(self):
        """Test assignment goes through validation too."""
        row = Transaction()
        with pytest.raises(ValidationError):
            row.income = -1

    def test_period_month_bounds(self):
        """Test month index must be 0-11."""
        Period(month=0, year=2025)
        Period(month=11, year=2025)
        with pytest.raises(ValidationError):
            Period(month=12, year=2025)

    def test_budget_state_document_uses_persisted_keys(self):
        """Test to_document writes camelCase keys."""
        state = BudgetState(
            categories=[Category(id="x", name="X", color="#111111")],
            transactions=[Transaction(id="t1", category_id="x", income=10)],
            period=Period(month=2, year=2025),
            whatsapp_number="628123",
            savings_percent=15,
        )
        document = state.to_document()
        assert set(document) == {
            "categories", "transactions", "period", "whatsappNumber", "savingsPercent",
        }
        assert document["transactions"][0]["categoryId"] == "x"
        assert document["categories"][0]["isDefault"] is False


class TestTransactionField:
    """Tests for the editable field enum."""

    def test_field_values_are_document_keys(self):
        """Test enum values match the persisted keys."""
        assert TransactionField("categoryId") is TransactionField.CATEGORY_ID
        assert TransactionField("income") is TransactionField.INCOME

    def test_snake_case_category_field_accepted(self):
        """Test the attribute spelling maps to the same field."""
        assert TransactionField("category_id") is TransactionField.CATEGORY_ID

    def test_unknown_field_rejected(self):
        """Test unknown names raise ValueError."""
        with pytest.raises(ValueError):
            TransactionField("amount")


class TestStateLoadResult:
    """Tests for load result helpers."""

    def test_clean_result(self):
        """Test a result without issues is clean."""
        state = BudgetState(period=Period(month=0, year=2025))
        result = StateLoadResult(state=state)
        assert result.is_clean
        assert result.defaulted_fields == []

    def test_defaulted_fields_listed(self):
        """Test defaulted fields are reported in order."""
        state = BudgetState(period=Period(month=0, year=2025))
        result = StateLoadResult(
            state=state,
            issues=[
                StateIssue(field="period", issue_type="missing", message="m"),
                StateIssue(field="savingsPercent", issue_type="invalid", message="m"),
            ],
        )
        assert not result.is_clean
        assert result.defaulted_fields == ["period", "savingsPercent"]

    def test_issue_type_restricted(self):
        """Test unknown issue types are rejected."""
        with pytest.raises(ValidationError):
            StateIssue(field="period", issue_type="weird", message="m")


class TestReportModels:
    """Tests for export and share result models."""

    def test_export_result_size(self):
        """Test size_bytes reflects the image payload."""
        assert ExportResult(success=True, image_bytes=b"abc").size_bytes == 3
        assert ExportResult(success=False, error_message="x").size_bytes == 0

    def test_export_result_default_mime_type(self):
        """Test exports are JPEG by default."""
        assert ExportResult(success=True).mime_type == "image/jpeg"

    def test_share_result_link(self):
        """Test link shares carry the URL and reason."""
        result = ShareResult(
            method=ShareMethod.LINK,
            title="t",
            text="x",
            link_url="https://wa.me/1?text=x",
            fallback_reason="cancelled",
        )
        assert result.method == ShareMethod.LINK
        assert result.image_attached is False


class TestAuditModels:
    """Tests for audit models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Transaction added",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test AuditEvent to_log_dict conversion."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id="abc",
            correlation_id=correlation_id,
            description="Category added",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "category_added"
        assert log_dict["entity_id"] == "abc"
        assert log_dict["correlation_id"] == str(correlation_id)

    def test_builder_state_field_defaulted_is_warning(self):
        """Test defaulted state fields are logged as warnings."""
        event = AuditEventBuilder.state_field_defaulted("period", "missing")
        assert event.event_type == AuditEventType.STATE_FIELD_DEFAULTED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["field"] == "period"

    def test_builder_savings_entry_added(self):
        """Test savings entry event carries amount and percent."""
        event = AuditEventBuilder.savings_entry_added(
            transaction_id="t1",
            percent=20,
            amount=1_000_000,
            category_id="keuangan",
        )
        assert event.entity_id == "t1"
        assert event.details["percent"] == 20
        assert event.details["amount"] == 1_000_000

    def test_builder_report_export_failed_is_error(self):
        """Test export failures are errors."""
        event = AuditEventBuilder.report_export_failed("boom")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "boom"


class TestFormatting:
    """Tests for display formatting."""

    def test_format_currency_thousands(self):
        """Test '.' thousands separators."""
        assert format_currency(5_000_000) == "5.000.000"
        assert format_currency(999) == "999"
        assert format_currency(0) == "0"

    def test_format_currency_negative(self):
        """Test negative balances keep their sign."""
        assert format_currency(-1_500) == "-1.500"

    def test_month_names(self):
        """Test Indonesian month names by index."""
        assert month_name(0) == "Januari"
        assert month_name(11) == "Desember"

    def test_period_label(self):
        """Test period label format."""
        assert period_label(Period(month=7, year=2025)) == "Agustus 2025"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
