"""
Input Sanitization Module

Cleans free text from API requests before it is stored or placed in a
language-model prompt.
"""

import re

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')


def sanitize_text(text, max_length=10000):
    """
    Sanitize a single-line text value.

    Removes control characters (including newlines, which would let a
    value break out of its line in a prompt), collapses whitespace and
    truncates.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Sanitized string, '' for None
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = _CONTROL_CHARS.sub(' ', text)

    # Collapse multiple spaces
    text = re.sub(r'\s+', ' ', text).strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text
