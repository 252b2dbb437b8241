"""
Audit Models for Finanzas Personales

Every change to the roster or the session is logged as an audit event.
This provides:
1. Traceability of who changed what and when
2. Debugging information when persisted data turns out malformed
3. A record of failed logins and rejected registrations

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Roster lifecycle
    ROSTER_SEEDED = "roster_seeded"
    ROSTER_ENTRY_SKIPPED = "roster_entry_skipped"

    # Session lifecycle
    SESSION_RESTORED = "session_restored"
    SESSION_DISCARDED = "session_discarded"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"

    # Registration
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"

    # Roster writes
    USER_UPDATED = "user_updated"
    UPDATE_IGNORED = "update_ignored"

    # Ledger operations
    TRANSACTION_RECORDED = "transaction_recorded"
    BUDGET_SET = "budget_set"
    CATEGORY_ADDED = "category_added"
    OPERATION_REJECTED = "operation_rejected"

    # Admin
    REPORT_EXPORTED = "report_exported"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = Field(default=AuditSeverity.INFO)

    # Context - which user is this about?
    user_id: Optional[int] = Field(
        default=None,
        description="Roster id of the user this event relates to"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one dashboard action)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

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
            "user_id": self.user_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_registered(user_id, email)
        event = AuditEventBuilder.login_failed(email)
    """

    @staticmethod
    def roster_seeded(admin_id: int, admin_email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROSTER_SEEDED,
            user_id=admin_id,
            description="Empty store: roster seeded with default admin",
            details={"email": admin_email},
        )

    @staticmethod
    def roster_entry_skipped(index: int, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ROSTER_ENTRY_SKIPPED,
            severity=AuditSeverity.WARNING,
            description=f"Malformed roster entry at position {index} skipped",
            details={"index": index, "reason": reason},
        )

    @staticmethod
    def session_restored(user_id: int, matches_roster: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_RESTORED,
            severity=AuditSeverity.INFO if matches_roster else AuditSeverity.WARNING,
            user_id=user_id,
            description="Persisted session restored without credential check",
            details={"matches_roster": matches_roster},
        )

    @staticmethod
    def session_discarded(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_DISCARDED,
            severity=AuditSeverity.WARNING,
            description="Malformed persisted session treated as logged out",
            details={"reason": reason},
        )

    @staticmethod
    def user_registered(user_id: int, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            user_id=user_id,
            description="User registered",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Registration rejected: email already registered",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(user_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            user_id=user_id,
            description="Login succeeded",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            description="Login failed: invalid credentials",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def logout(user_id: Optional[int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGOUT,
            user_id=user_id,
            description="Session closed",
            is_user_action=True,
        )

    @staticmethod
    def user_updated(user_id: int, session_refreshed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_UPDATED,
            user_id=user_id,
            description="Roster entry replaced",
            details={"session_refreshed": session_refreshed},
        )

    @staticmethod
    def update_ignored(user_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UPDATE_IGNORED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            description="Update ignored: no roster entry with this id",
        )

    @staticmethod
    def transaction_recorded(
        user_id: int,
        transaction_id: int,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Transaction recorded: {transaction_type}",
            details={
                "transaction_id": transaction_id,
                "type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_set(
        user_id: int,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Budget set",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def category_added(
        user_id: int,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            user_id=user_id,
            correlation_id=correlation_id,
            description="Category added",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def operation_rejected(
        user_id: Optional[int],
        operation: str,
        error_kind: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"{operation} rejected: {error_kind}",
            details={
                "operation": operation,
                "error_kind": error_kind,
                "error_message": error_message,
            },
            is_user_action=True,
        )

    @staticmethod
    def report_exported(user_id: int, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORTED,
            user_id=user_id,
            description=f"Admin summary exported with {row_count} rows",
            details={"row_count": row_count},
            is_user_action=True,
        )
