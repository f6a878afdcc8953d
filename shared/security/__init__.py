"""Security helpers for request forgery protection and output encoding."""

from .crypto import (
    generate_csrf_token,
    generate_hmac,
    html_encode,
    sign_value,
    unsign_value,
    verify_csrf_token,
    verify_hmac,
)

__all__ = [
    "generate_csrf_token",
    "generate_hmac",
    "html_encode",
    "sign_value",
    "unsign_value",
    "verify_csrf_token",
    "verify_hmac",
]
