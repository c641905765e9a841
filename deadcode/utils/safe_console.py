"""Encoding-safe Console wrapper for Rich library.

Wraps Rich's Console to escape characters that the output stream cannot
encode.
"""
from rich.console import Console
from typing import Any
from .logger import detect_terminal_encoding, is_utf8_capable, sanitize_for_terminal


class SafeConsole(Console):
    """Console that sanitizes text for non-UTF-8 terminals.

    Markup and highlighting are off by default: printed text carries file
    paths and identifiers, which must be shown verbatim.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('markup', False)
        kwargs.setdefault('highlight', False)
        kwargs.setdefault('soft_wrap', True)
        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic sanitization.

        Args:
            *objects: Objects to print (same as Rich Console.print)
            **kwargs: Keyword arguments (same as Rich Console.print)
        """
        if not is_utf8_capable(self.file):
            encoding = detect_terminal_encoding(self.file)
            objects = tuple(
                sanitize_for_terminal(obj, encoding) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)
