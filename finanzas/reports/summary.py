"""
Admin Summary Reports

Aggregates across the whole roster for the admin view, and the CSV
summary an admin can download.

The over-budget rule here is strict (expense > budget), unlike the
dashboard's EXCEEDED tier which starts at exactly 100%.
"""

import csv
import io
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Union

from pydantic import BaseModel, Field

from finanzas.models.user import User, UserRole


REPORT_FILENAME = "reporte_general_financiero.csv"

CSV_HEADER = [
    "Usuario",
    "Email",
    "Rol",
    "Balance Total",
    "Transacciones Totales",
    "Gastos Totales",
    "Presupuesto",
    "Estado",
]

STATUS_OK = "OK"
STATUS_OVER_BUDGET = "SOBREPRESUPUESTO"

BADGE_ACTIVE = "Activo"
BADGE_OVER_BUDGET = "Sobrepresupuesto"


class AdminUserRow(BaseModel):
    """One line of the admin users table."""

    user_id: int
    name: str
    email: str
    role: UserRole
    balance: Decimal
    status: str = Field(
        ...,
        description="Activo, or Sobrepresupuesto for over-budget regular users"
    )


class AdminOverview(BaseModel):
    """Roster-wide figures for the admin view."""

    total_users: int
    system_balance: Decimal
    budget_alerts: int = Field(
        ...,
        description="Regular users whose expense exceeds their budget"
    )
    rows: list[AdminUserRow] = Field(default_factory=list)


def _format_money(value: Decimal) -> str:
    return f"{value:.2f}"


def build_admin_overview(users: Iterable[User]) -> AdminOverview:
    """
    Summarize every user.

    Only role 'user' accounts raise budget alerts; an admin's own
    ledger never counts as an alert.
    """
    rows = []
    system_balance = Decimal(0)
    budget_alerts = 0

    for user in users:
        balance = user.balance()
        system_balance += balance

        over_budget = user.role == UserRole.USER and user.is_over_budget()
        if over_budget:
            budget_alerts += 1

        rows.append(AdminUserRow(
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            balance=balance,
            status=BADGE_OVER_BUDGET if over_budget else BADGE_ACTIVE,
        ))

    return AdminOverview(
        total_users=len(rows),
        system_balance=system_balance,
        budget_alerts=budget_alerts,
        rows=rows,
    )


def summary_rows(users: Iterable[User]) -> list[list[str]]:
    """CSV data rows, one per user, in roster order."""
    rows = []
    for user in users:
        rows.append([
            user.name,
            user.email,
            user.role.value,
            _format_money(user.balance()),
            str(len(user.transactions)),
            _format_money(user.total_expense()),
            _format_money(user.budget),
            STATUS_OVER_BUDGET if user.is_over_budget() else STATUS_OK,
        ])
    return rows


def export_summary_csv(users: Iterable[User]) -> str:
    """
    Render the admin summary as CSV text.

    Fields containing commas or quotes are quoted; lines end with '\\n'.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(summary_rows(users))
    return output.getvalue()


def write_summary_csv(users: Iterable[User], path: Union[str, Path]) -> Path:
    """Write the CSV summary to a file and return its path."""
    target = Path(path)
    if target.is_dir():
        target = target / REPORT_FILENAME
    target.write_text(export_summary_csv(users), encoding="utf-8")
    return target
