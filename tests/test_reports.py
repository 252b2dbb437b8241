"""
Tests for the admin overview and CSV summary export
"""

import csv
import io
from decimal import Decimal

import pytest

from finanzas.models import Transaction, User, UserRole
from finanzas.reports import (
    CSV_HEADER,
    REPORT_FILENAME,
    build_admin_overview,
    export_summary_csv,
    write_summary_csv,
)


def make_user(user_id, name, email, budget=0, income=0, expense=0, role=UserRole.USER) -> User:
    user = User(
        id=user_id,
        name=name,
        email=email,
        password="pw",
        role=role,
        budget=Decimal(budget),
    )
    if income:
        user.add_transaction(Transaction.create(1, income, "income", "Salario", "2024-01-01"))
    if expense:
        user.add_transaction(Transaction.create(2, expense, "expense", "Otros", "2024-01-02"))
    return user


@pytest.fixture
def roster() -> list[User]:
    return [
        make_user(1, "Admin", "admin@finanzas.com", budget=10, expense=50, role=UserRole.ADMIN),
        make_user(2, "Ana", "ana@x.com", income=1000, expense=200),
        make_user(3, "Luis", "luis@x.com", budget=100, income=50, expense="100.01"),
        make_user(4, "Eva", "eva@x.com", budget=100, expense=100),
    ]


class TestAdminOverview:
    """Tests for roster-wide figures."""

    def test_totals(self, roster):
        overview = build_admin_overview(roster)
        assert overview.total_users == 4
        assert overview.system_balance == Decimal("599.99")

    def test_only_regular_users_raise_alerts(self, roster):
        """The admin is over budget too, but does not count."""
        overview = build_admin_overview(roster)
        assert overview.budget_alerts == 1
        badges = {row.email: row.status for row in overview.rows}
        assert badges == {
            "admin@finanzas.com": "Activo",
            "ana@x.com": "Activo",
            "luis@x.com": "Sobrepresupuesto",
            "eva@x.com": "Activo",
        }

    def test_empty_roster(self):
        overview = build_admin_overview([])
        assert overview.total_users == 0
        assert overview.system_balance == 0
        assert overview.rows == []


class TestSummaryCSV:
    """Tests for the downloadable CSV summary."""

    def test_header(self, roster):
        first_line = export_summary_csv(roster).split("\n")[0]
        assert first_line == (
            "Usuario,Email,Rol,Balance Total,Transacciones Totales,"
            "Gastos Totales,Presupuesto,Estado"
        )
        assert first_line.split(",") == CSV_HEADER

    def test_rows(self, roster):
        lines = export_summary_csv(roster).splitlines()
        assert lines[1:] == [
            "Admin,admin@finanzas.com,admin,-50.00,1,50.00,10.00,SOBREPRESUPUESTO",
            "Ana,ana@x.com,user,800.00,2,200.00,0.00,OK",
            "Luis,luis@x.com,user,-50.01,2,100.01,100.00,SOBREPRESUPUESTO",
            "Eva,eva@x.com,user,-100.00,1,100.00,100.00,OK",
        ]

    def test_ends_with_newline(self, roster):
        assert export_summary_csv(roster).endswith("\n")

    def test_commas_in_names_are_quoted(self):
        user = make_user(5, "Pérez, Juan", "juan@x.com")
        text = export_summary_csv([user])
        assert '"Pérez, Juan"' in text
        parsed = list(csv.reader(io.StringIO(text)))
        assert parsed[1][0] == "Pérez, Juan"
        assert len(parsed[1]) == len(CSV_HEADER)

    def test_write_to_directory_uses_default_name(self, roster, tmp_path):
        target = write_summary_csv(roster, tmp_path)
        assert target == tmp_path / REPORT_FILENAME
        assert target.read_text(encoding="utf-8") == export_summary_csv(roster)

    def test_write_to_explicit_file(self, roster, tmp_path):
        target = write_summary_csv(roster, tmp_path / "resumen.csv")
        assert target.name == "resumen.csv"
        assert target.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
