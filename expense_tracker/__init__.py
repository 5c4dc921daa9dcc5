"""
Expense Tracker - Source Package

A small invoice-based expense tracker: sign in, upload an invoice photo,
review the proposed fields, save, and watch the totals on the dashboard.

DESIGN PRINCIPLES:
1. Extraction proposes, the user confirms
2. Every invoice belongs to exactly one user
3. Backends (database, auth, extraction) are swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
