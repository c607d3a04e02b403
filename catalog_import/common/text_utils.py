"""
Text Utilities

Helper functions for text and URL cleanup shared by the parsers.
"""

from typing import Any


def clean_text(text: Any) -> str:
    """
    Collapse whitespace and strip a value.

    Args:
        text: Text (or any value) to clean

    Returns:
        Cleaned string, empty string for None/empty input
    """
    if text is None or text == "":
        return ""
    if not isinstance(text, str):
        text = str(text)
    return ' '.join(text.split()).strip()


def absolute_url(url: Any) -> str:
    """
    Make a source URL absolute.

    The source serves protocol-relative URLs ("//ae01.alicdn.com/...")
    and occasionally a single leading slash in front of them.

    Args:
        url: Raw URL from a payload or an element attribute

    Returns:
        Absolute https URL, or empty string
    """
    url = clean_text(url)
    if not url:
        return ""
    if url.startswith('//'):
        return 'https:' + url
    if url.startswith('/') and '.' in url.split('/')[1]:
        # "/ae01.alicdn.com/kf/x.jpg" - host with a stray leading slash
        return 'https://' + url.lstrip('/')
    return url
