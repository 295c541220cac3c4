"""
FinModel Backend Application Package

Financial dashboard backend: storage adapter over SQLite or PostgreSQL,
Financial Health Score engine and server-sent event fan-out.
"""

__version__ = "0.1.0"
