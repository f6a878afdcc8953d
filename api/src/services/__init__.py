"""Business logic services.

This package contains the authentication, user/comment and external
login services used by the API routers.
"""
