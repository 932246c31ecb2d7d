"""Validation utilities for the link shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple


SHORT_CODE_PATTERN = re.compile(r"[A-Za-z0-9]{6,8}")

ALLOWED_SCHEMES = ("http", "https")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a target URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    try:
        result = urlparse(url)
        # Accessing port validates it; urlparse is lazy about that.
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme.lower() not in ALLOWED_SCHEMES:
        return False, "Invalid URL. Must start with http:// or https://"

    if not result.hostname:
        return False, "URL must have a valid domain"

    return True, ""


def is_valid_short_code(short_code: str) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if short_code is None or short_code == "":
        return False, "Short code is required"

    if not isinstance(short_code, str) or not SHORT_CODE_PATTERN.fullmatch(short_code):
        return False, "Code must be 6-8 alphanumeric characters [A-Za-z0-9]"

    return True, ""
