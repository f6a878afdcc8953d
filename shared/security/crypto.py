"""Cryptographic utilities for request integrity and output encoding.

Provides HMAC signing, anti-forgery tokens, and HTML encoding used to
prevent CSRF and XSS in the auth demo.
"""

import hashlib
import hmac
import html
import secrets
from typing import Optional, Union


def generate_hmac(
    data: Union[str, bytes], key: Union[str, bytes], algorithm: str = "sha256"
) -> str:
    """Generate HMAC for data integrity verification.

    Args:
        data: Data to create HMAC for
        key: Secret key
        algorithm: HMAC algorithm (sha256, sha512)

    Returns:
        Hexadecimal HMAC string
    """
    if isinstance(data, str):
        data = data.encode()

    if isinstance(key, str):
        key = key.encode()

    if algorithm == "sha256":
        hasher = hmac.new(key, data, hashlib.sha256)
    elif algorithm == "sha512":
        hasher = hmac.new(key, data, hashlib.sha512)
    else:
        raise ValueError(f"Unsupported HMAC algorithm: {algorithm}")

    return hasher.hexdigest()


def verify_hmac(
    data: Union[str, bytes],
    key: Union[str, bytes],
    expected_hmac: str,
    algorithm: str = "sha256",
) -> bool:
    """Verify HMAC for data integrity.

    Args:
        data: Data to verify
        key: Secret key
        expected_hmac: Expected HMAC value
        algorithm: HMAC algorithm (sha256, sha512)

    Returns:
        True if HMAC matches, False otherwise
    """
    computed_hmac = generate_hmac(data, key, algorithm)
    return hmac.compare_digest(computed_hmac, expected_hmac)


def sign_value(value: str, key: Union[str, bytes]) -> str:
    """Append an HMAC signature to a value ("value.signature")."""
    return f"{value}.{generate_hmac(value, key)}"


def unsign_value(signed: str, key: Union[str, bytes]) -> Optional[str]:
    """Return the original value if its signature is valid, None otherwise."""
    if not signed or "." not in signed:
        return None

    value, _, signature = signed.rpartition(".")
    if not value or not verify_hmac(value, key, signature):
        return None
    return value


def generate_csrf_token(key: Union[str, bytes], size: int = 32) -> str:
    """Generate a signed anti-forgery token.

    Args:
        key: Secret signing key
        size: Number of random bytes in the nonce

    Returns:
        Token in "nonce.signature" form
    """
    return sign_value(secrets.token_urlsafe(size), key)


def verify_csrf_token(
    cookie_token: Optional[str],
    header_token: Optional[str],
    key: Union[str, bytes],
) -> bool:
    """Verify a double-submitted anti-forgery token.

    The cookie and header values must be identical and carry a valid
    signature.

    Args:
        cookie_token: Token from the anti-forgery cookie
        header_token: Token echoed by the client in the request header
        key: Secret signing key

    Returns:
        True if the token pair is valid
    """
    if not cookie_token or not header_token:
        return False

    if not hmac.compare_digest(cookie_token, header_token):
        return False

    return unsign_value(cookie_token, key) is not None


def html_encode(text: str) -> str:
    """HTML-encode user supplied text (&, <, >, double and single quotes)."""
    return html.escape(text, quote=True)
