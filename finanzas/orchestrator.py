"""
Main Orchestrator for Finanzas Personales

This module ties together all the components and defines the flows
the view layer calls:
1. Ledger (record transaction, set budget, add category, dashboard)
2. Admin (roster overview, CSV summary export)

Registration, login and logout are called on the SessionAuthority
directly.

DESIGN DECISION: Every mutation follows the same path:
copy the session user -> apply the entity operation -> update_user.
The view never mutates a user the authority holds, and input errors
come back as an OperationResult instead of an exception.
"""

import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Union
from uuid import UUID

from finanzas.audit import AuditLogger, configure_logging, create_correlation_id
from finanzas.config import Settings, get_settings
from finanzas.models.errors import ErrorKind, LedgerError
from finanzas.models.results import OperationResult
from finanzas.models.transaction import Transaction
from finanzas.models.user import User
from finanzas.queries import DashboardSnapshot, TransactionFilter, build_dashboard
from finanzas.reports import (
    AdminOverview,
    build_admin_overview,
    export_summary_csv,
    write_summary_csv,
)
from finanzas.services.storage import (
    GoogleSheetsStore,
    InMemoryStore,
    JSONFileStore,
    KeyValueStore,
)
from finanzas.session import SessionAuthority


MSG_NOT_AUTHENTICATED = "Debes iniciar sesión."
MSG_TRANSACTION_RECORDED = "Transacción registrada."
MSG_BUDGET_SET = "Presupuesto actualizado."
MSG_CATEGORY_ADDED = "Categoría agregada."
MSG_USER_NOT_FOUND = "El usuario de la sesión ya no existe."


class PermissionDeniedError(Exception):
    """An admin-only flow was called without an admin session."""
    pass


class LedgerFlow:
    """
    Orchestrates the user dashboard operations.

    Flow for each mutation:
    1. Take a copy of the session user
    2. Apply the entity operation (may reject the input)
    3. Hand the complete user back to SessionAuthority.update_user
    4. Return the refreshed session copy for re-rendering
    """

    def __init__(
        self,
        authority: SessionAuthority,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._authority = authority
        self._audit_logger = audit_logger or AuditLogger()

    def _mutate(
        self,
        operation: str,
        apply: Callable[[User], Any],
        on_success: Callable[[User, Any], None],
        message: str,
        correlation_id: Optional[UUID],
    ) -> OperationResult:
        """
        Run apply(user) on a copy of the session user and persist it.

        on_success(user, outcome) runs only once the roster accepted the
        change.
        """
        user = self._authority.current_user()
        if user is None:
            return OperationResult(
                success=False,
                message=MSG_NOT_AUTHENTICATED,
                error=ErrorKind.NOT_AUTHENTICATED,
            )

        try:
            outcome = apply(user)
        except LedgerError as e:
            self._audit_logger.log_operation_rejected(
                user_id=user.id,
                operation=operation,
                error_kind=e.kind.value,
                error_message=e.message,
                correlation_id=correlation_id,
            )
            return OperationResult.failed(e)

        # A restored session can name a user the roster no longer has
        if not self._authority.update_user(user):
            return OperationResult(
                success=False,
                message=MSG_USER_NOT_FOUND,
                error=ErrorKind.USER_NOT_FOUND,
            )

        on_success(user, outcome)
        return OperationResult(
            success=True,
            message=message,
            user=self._authority.current_user(),
        )

    def record_transaction(
        self,
        amount: Any,
        type: Any,
        category: str,
        date: Union[str, datetime.date],
        description: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        """
        Add an income or expense entry to the session user's ledger.

        The category is not checked against the user's vocabulary.
        """
        correlation_id = correlation_id or create_correlation_id()

        def apply(user: User) -> Transaction:
            transaction = Transaction.create(
                id=user.next_transaction_id(),
                amount=amount,
                type=type,
                category=category,
                date=date,
                description=description,
            )
            user.add_transaction(transaction)
            return transaction

        def on_success(user: User, transaction: Transaction) -> None:
            self._audit_logger.log_transaction_recorded(
                user_id=user.id,
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
                correlation_id=correlation_id,
            )

        return self._mutate(
            "record_transaction", apply, on_success, MSG_TRANSACTION_RECORDED, correlation_id
        )

    def set_budget(
        self,
        amount: Any,
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        correlation_id = correlation_id or create_correlation_id()

        def on_success(user: User, _: Any) -> None:
            self._audit_logger.log_budget_set(
                user_id=user.id,
                amount=str(user.budget),
                correlation_id=correlation_id,
            )

        return self._mutate(
            "set_budget",
            lambda user: user.set_budget(amount),
            on_success,
            MSG_BUDGET_SET,
            correlation_id,
        )

    def add_category(
        self,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        correlation_id = correlation_id or create_correlation_id()

        def on_success(user: User, _: Any) -> None:
            self._audit_logger.log_category_added(
                user_id=user.id,
                name=name.strip(),
                correlation_id=correlation_id,
            )

        return self._mutate(
            "add_category",
            lambda user: user.add_category(name),
            on_success,
            MSG_CATEGORY_ADDED,
            correlation_id,
        )

    def dashboard(
        self,
        transaction_filter: Optional[TransactionFilter] = None,
    ) -> Optional[DashboardSnapshot]:
        """Dashboard for the session user, or None when logged out."""
        user = self._authority.current_user()
        if user is None:
            return None
        return build_dashboard(user, transaction_filter)


class AdminFlow:
    """
    Orchestrates the admin views.

    Reads always go through SessionAuthority.list_all_users, which
    re-reads the store, so other processes' writes are visible.
    """

    def __init__(
        self,
        authority: SessionAuthority,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._authority = authority
        self._audit_logger = audit_logger or AuditLogger()

    def _require_admin(self) -> User:
        user = self._authority.current_user()
        if user is None or not self._authority.is_admin():
            raise PermissionDeniedError("Admin session required")
        return user

    def overview(self) -> AdminOverview:
        self._require_admin()
        return build_admin_overview(self._authority.list_all_users())

    def export_report(self) -> str:
        """CSV summary of every user, as text."""
        admin = self._require_admin()
        users = self._authority.list_all_users()
        self._audit_logger.log_report_exported(admin.id, len(users))
        return export_summary_csv(users)

    def write_report(self, path: Union[str, Path]) -> Path:
        """Write the CSV summary to path (a directory gets the default filename)."""
        admin = self._require_admin()
        users = self._authority.list_all_users()
        target = write_summary_csv(users, path)
        self._audit_logger.log_report_exported(admin.id, len(users))
        return target


def create_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """Build the configured key-value store."""
    settings = settings or get_settings()
    storage = settings.storage

    if storage.backend == "memory":
        return InMemoryStore()
    if storage.backend == "google_sheets":
        return GoogleSheetsStore()
    return JSONFileStore(storage.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> tuple[SessionAuthority, LedgerFlow, AdminFlow]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to get_settings().
        store: Store to use instead of the configured backend
               (tests pass an InMemoryStore).

    Returns:
        (authority, ledger_flow, admin_flow)
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    authority = SessionAuthority(
        store=store or create_store(settings),
        audit_logger=audit_logger,
    )

    ledger_flow = LedgerFlow(authority, audit_logger)
    admin_flow = AdminFlow(authority, audit_logger)

    return authority, ledger_flow, admin_flow
