"""Terminal-safe text output.

Go identifiers may contain any Unicode letter. On terminals that cannot encode
them (legacy Windows code pages, ``LANG=C``) characters are escaped instead of
crashing the write.
"""
import sys
import locale
from typing import TextIO


def detect_terminal_encoding(stream: TextIO | None = None) -> str:
    """Detect the encoding of ``stream`` (stderr by default).

    Returns:
        str: Encoding name in lower case ('utf-8', 'cp1252', 'ascii', etc.)
    """
    stream = stream if stream is not None else sys.stderr
    encoding = getattr(stream, 'encoding', None)
    if encoding:
        return encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except Exception:
        return 'ascii'


def is_utf8_capable(stream: TextIO | None = None) -> bool:
    """Check if the terminal can handle UTF-8 text."""
    return detect_terminal_encoding(stream).replace('_', '-') in ('utf-8', 'utf8')


def sanitize_for_terminal(text: str, encoding: str | None = None) -> str:
    """Escape characters the terminal encoding cannot represent.

    Args:
        text: Text to print
        encoding: Target encoding; detected from stderr when omitted

    Returns:
        str: Text safe to write with ``encoding``
    """
    encoding = encoding or detect_terminal_encoding()
    try:
        return text.encode(encoding, errors='backslashreplace').decode(encoding)
    except LookupError:
        return text.encode('ascii', errors='backslashreplace').decode('ascii')
