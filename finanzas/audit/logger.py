"""
Audit Logger

DESIGN DECISION: Every change to the roster or session is logged.
This provides:
1. Complete traceability of registrations, logins and ledger writes
2. Visibility into malformed persisted data that was skipped
3. A record of rejected operations

The audit logger:
- Is synchronous, like the rest of the core
- Never raises: a logging failure must not break a ledger operation
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

import structlog
from pydantic import ValidationError

from finanzas.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog to emit JSON lines."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)
    # basicConfig is a no-op once handlers exist; the level still applies
    logging.getLogger().setLevel(log_level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log. An optional list sink keeps
    them in memory as well, which the admin view and tests can inspect.
    """

    def __init__(self, sink: Optional[list[AuditEvent]] = None):
        """
        Initialize audit logger.

        Args:
            sink: List to append every logged event to.
                  If None, events are only written to the log.
        """
        self._sink = sink
        self._logger = structlog.get_logger("finanzas.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Never let logging break the main flow
            print(f"WARNING: Failed to write audit event: {e}", file=sys.stderr)

        if self._sink is not None:
            self._sink.append(event)

    def _emit(self, build: Callable[..., AuditEvent], *args: Any, **kwargs: Any) -> None:
        """Build an event and log it. An event that fails validation is dropped, not raised."""
        try:
            event = build(*args, **kwargs)
        except ValidationError as e:
            self._logger.error("audit_event_invalid", builder=build.__name__, error=str(e))
            return
        self.log(event)

    def log_roster_seeded(self, admin_id: int, admin_email: str) -> None:
        self._emit(AuditEventBuilder.roster_seeded, admin_id, admin_email)

    def log_roster_entry_skipped(self, index: int, reason: str) -> None:
        self._emit(AuditEventBuilder.roster_entry_skipped, index, reason)

    def log_session_restored(self, user_id: int, matches_roster: bool) -> None:
        self._emit(AuditEventBuilder.session_restored, user_id, matches_roster)

    def log_session_discarded(self, reason: str) -> None:
        self._emit(AuditEventBuilder.session_discarded, reason)

    def log_user_registered(self, user_id: int, email: str) -> None:
        self._emit(AuditEventBuilder.user_registered, user_id, email)

    def log_registration_rejected(self, email: str) -> None:
        self._emit(AuditEventBuilder.registration_rejected, email)

    def log_login_succeeded(self, user_id: int) -> None:
        self._emit(AuditEventBuilder.login_succeeded, user_id)

    def log_login_failed(self, email: str) -> None:
        self._emit(AuditEventBuilder.login_failed, email)

    def log_logout(self, user_id: Optional[int]) -> None:
        self._emit(AuditEventBuilder.logout, user_id)

    def log_user_updated(self, user_id: int, session_refreshed: bool) -> None:
        self._emit(AuditEventBuilder.user_updated, user_id, session_refreshed)

    def log_update_ignored(self, user_id: int) -> None:
        self._emit(AuditEventBuilder.update_ignored, user_id)

    def log_transaction_recorded(
        self,
        user_id: int,
        transaction_id: int,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new ledger entry."""
        self._emit(
            AuditEventBuilder.transaction_recorded,
            user_id=user_id,
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            correlation_id=correlation_id,
        )

    def log_budget_set(
        self,
        user_id: int,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(AuditEventBuilder.budget_set, user_id, amount, correlation_id)

    def log_category_added(
        self,
        user_id: int,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._emit(AuditEventBuilder.category_added, user_id, name, correlation_id)

    def log_operation_rejected(
        self,
        user_id: Optional[int],
        operation: str,
        error_kind: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a ledger operation refused because of invalid input."""
        self._emit(
            AuditEventBuilder.operation_rejected,
            user_id=user_id,
            operation=operation,
            error_kind=error_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_report_exported(self, user_id: int, row_count: int) -> None:
        self._emit(AuditEventBuilder.report_exported, user_id, row_count)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., submitting the
    transaction form) and pass it through all subsequent operations.
    """
    return uuid4()
