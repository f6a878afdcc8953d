"""Data models for the FastAPI service.

This package contains the SQLAlchemy tables for users, roles and comments
and the Pydantic models used for request/response validation.
"""
