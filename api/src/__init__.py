"""FastAPI service for the authentication and authorization demo.

This package provides JSON API, browser cookie flow and external login
endpoints over a SQLite or SQL Server user store.
"""

__version__ = "1.0.0"
