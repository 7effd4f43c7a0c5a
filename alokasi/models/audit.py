"""
Audit Models for Alokasi Pendapatan

Every command that changes the budget session, and every export or
share attempt, is logged as an audit event. This provides:
1. Traceability of what the user changed and when
2. Debugging information when a load or export goes wrong
3. A record of silently recovered problems (defaulted state fields)

DESIGN DECISION: Audit events are append-only log records.
They never feed back into the session state.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every session command and every boundary flow has its own event type.
    """
    # Session lifecycle
    SESSION_LOADED = "session_loaded"
    STATE_FIELD_DEFAULTED = "state_field_defaulted"
    STATE_SAVED = "state_saved"
    SAVE_FAILED = "save_failed"

    # Ledger
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_AUTO_CATEGORIZED = "transaction_auto_categorized"
    TRANSACTION_REMOVED = "transaction_removed"
    TRANSACTION_REMOVE_REFUSED = "transaction_remove_refused"
    SAVINGS_ENTRY_ADDED = "savings_entry_added"

    # Category registry
    CATEGORY_ADDED = "category_added"
    CATEGORY_REMOVED = "category_removed"
    CATEGORY_REMOVE_REFUSED = "category_remove_refused"

    # Session settings
    PERIOD_CHANGED = "period_changed"
    SETTING_CHANGED = "setting_changed"

    # Export and share
    REPORT_EXPORTED = "report_exported"
    REPORT_EXPORT_FAILED = "report_export_failed"
    SHARE_COMPLETED = "share_completed"
    SHARE_FALLBACK_USED = "share_fallback_used"
    SHARE_BLOCKED = "share_blocked"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'category', 'report')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one share attempt)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id)
        event = AuditEventBuilder.category_removed(category_id, name)
    """

    @staticmethod
    def session_loaded(
        transaction_count: int,
        category_count: int,
        defaulted_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_LOADED,
            entity_type="session",
            description=f"Session loaded with {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "category_count": category_count,
                "defaulted_fields": defaulted_fields,
            },
        )

    @staticmethod
    def state_field_defaulted(field: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_FIELD_DEFAULTED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            description=f"Persisted field '{field}' replaced by its default",
            details={
                "field": field,
                "reason": reason,
            },
        )

    @staticmethod
    def state_saved(key: str, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="session",
            description=f"State written to '{key}'",
            details={
                "key": key,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="session",
            description=f"Could not write state to '{key}'",
            error_message=error_message,
            details={
                "key": key,
            },
        )

    @staticmethod
    def transaction_added(transaction_id: str, position: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added at row {position + 1}",
            details={
                "position": position,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(transaction_id: str, field: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            severity=AuditSeverity.DEBUG,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction field '{field}' updated",
            details={
                "field": field,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_auto_categorized(
        transaction_id: str,
        previous_category_id: Optional[str],
        category_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_AUTO_CATEGORIZED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Description matched category '{category_id}'",
            details={
                "previous_category_id": previous_category_id,
                "category_id": category_id,
            },
        )

    @staticmethod
    def transaction_removed(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REMOVED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction removed",
            is_user_action=True,
        )

    @staticmethod
    def transaction_remove_refused(transaction_id: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REMOVE_REFUSED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction not removed: {reason}",
            details={
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def savings_entry_added(
        transaction_id: str,
        percent: int,
        amount: int,
        category_id: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVINGS_ENTRY_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Savings entry of {percent}% added",
            details={
                "percent": percent,
                "amount": amount,
                "category_id": category_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_added(category_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category added: {name}",
            details={
                "name": name,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_removed(category_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_REMOVED,
            entity_type="category",
            entity_id=category_id,
            description="Category removed",
            is_user_action=True,
        )

    @staticmethod
    def category_remove_refused(category_id: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_REMOVE_REFUSED,
            severity=AuditSeverity.WARNING,
            entity_type="category",
            entity_id=category_id,
            description=f"Category not removed: {reason}",
            details={
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def period_changed(month: int, year: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERIOD_CHANGED,
            entity_type="session",
            description=f"Period set to {month + 1:02d}/{year}",
            details={
                "month": month,
                "year": year,
            },
            is_user_action=True,
        )

    @staticmethod
    def setting_changed(setting: str, value: Any) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTING_CHANGED,
            entity_type="session",
            description=f"Setting '{setting}' changed",
            details={
                "setting": setting,
                "value": value,
            },
            is_user_action=True,
        )

    @staticmethod
    def report_exported(
        export_id: UUID,
        filename: str,
        size_bytes: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORTED,
            entity_type="report",
            entity_id=str(export_id),
            correlation_id=correlation_id,
            description=f"Report exported: {filename}",
            details={
                "filename": filename,
                "size_bytes": size_bytes,
            },
        )

    @staticmethod
    def report_export_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="report",
            correlation_id=correlation_id,
            description="Report image could not be generated",
            error_message=error_message,
        )

    @staticmethod
    def share_completed(
        method: str,
        image_attached: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHARE_COMPLETED,
            entity_type="report",
            correlation_id=correlation_id,
            description=f"Report shared via {method}",
            details={
                "method": method,
                "image_attached": image_attached,
            },
            is_user_action=True,
        )

    @staticmethod
    def share_fallback_used(
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHARE_FALLBACK_USED,
            severity=AuditSeverity.WARNING,
            entity_type="report",
            correlation_id=correlation_id,
            description="Falling back to the text link",
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def share_blocked(
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHARE_BLOCKED,
            severity=AuditSeverity.WARNING,
            entity_type="report",
            correlation_id=correlation_id,
            description=f"Share blocked: {reason}",
            details={
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
