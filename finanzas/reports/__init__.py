"""Admin reports package."""

from finanzas.reports.summary import (
    CSV_HEADER,
    REPORT_FILENAME,
    AdminOverview,
    AdminUserRow,
    build_admin_overview,
    export_summary_csv,
    write_summary_csv,
)

__all__ = [
    "CSV_HEADER",
    "REPORT_FILENAME",
    "AdminOverview",
    "AdminUserRow",
    "build_admin_overview",
    "export_summary_csv",
    "write_summary_csv",
]
