"""
Expense Tracker - Source Package

A personal wallet and expense ledger for a single user.

DESIGN PRINCIPLES:
1. Wallet balance and expenses always reconcile
2. Validate fully, then apply atomically
3. Derived views are recomputed, never maintained
4. Every outcome is reported, never swallowed
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
