"""
LinkedIn / GitHub handle <-> profile URL conversion.

The extractor stores bare usernames, the assembler turns them into URLs.
"""
import re
from typing import Optional

PROFILE_URL_PREFIXES = {
    "linkedin": "https://linkedin.com/in/",
    "github": "https://github.com/",
}

_PROFILE_URL_PATTERNS = {
    "linkedin": re.compile(r"^(?:https?://)?(?:[\w-]+\.)?linkedin\.com/in/([^/?#\s]+)", re.IGNORECASE),
    "github": re.compile(r"^(?:https?://)?(?:www\.)?github\.com/([^/?#\s]+)", re.IGNORECASE),
}


def normalize_profile_url(platform: str, value: Optional[str]) -> str:
    """
    Convert a bare handle to the platform's canonical profile URL.

    Values that already carry an http(s) scheme are returned unchanged, so the
    conversion is idempotent.
    """
    if not value:
        return ""
    value = value.strip()
    if value.startswith("http://") or value.startswith("https://"):
        return value
    prefix = PROFILE_URL_PREFIXES.get(platform)
    if prefix is None or not value:
        return value
    return f"{prefix}{value.lstrip('@')}"


def extract_username(platform: str, value: Optional[str]) -> Optional[str]:
    """Reduce a profile URL ("linkedin.com/in/johndoe") to its handle."""
    if not value:
        return None
    value = value.strip()
    pattern = _PROFILE_URL_PATTERNS.get(platform)
    if pattern is None:
        return value
    match = pattern.match(value)
    if match:
        return match.group(1)
    return value
