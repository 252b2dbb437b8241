"""
Finanzas Personales - Source Package

A personal-finance tracker core: users register, log in, record income
and expense entries, set a monthly budget and read aggregated balances.
Administrators read every user's aggregates and export a summary.

DESIGN PRINCIPLES:
1. Aggregates are always derived from the ledger, never stored
2. The roster is the single source of truth
3. The active session never diverges from its roster entry
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finanzas Personales Team"
