"""Tests for terminal-safe output."""
import io

from deadcode.utils.logger import detect_terminal_encoding, is_utf8_capable, sanitize_for_terminal
from deadcode.utils.safe_console import SafeConsole


def stream(encoding):
    return io.TextIOWrapper(io.BytesIO(), encoding=encoding)


def test_detect_encoding_from_stream():
    assert detect_terminal_encoding(stream('UTF-8')) == 'utf-8'
    assert detect_terminal_encoding(stream('cp1252')) == 'cp1252'


def test_utf8_capable():
    assert is_utf8_capable(stream('utf-8'))
    assert is_utf8_capable(stream('utf_8'))
    assert not is_utf8_capable(stream('ascii'))


def test_sanitize_keeps_encodable_text():
    assert sanitize_for_terminal('größe is unused', 'utf-8') == 'größe is unused'
    assert sanitize_for_terminal('größe is unused', 'latin-1') == 'größe is unused'


def test_sanitize_escapes_unencodable_text():
    assert sanitize_for_terminal('größe is unused', 'ascii') == 'gr\\xf6\\xdfe is unused'


def test_sanitize_unknown_encoding_falls_back_to_ascii():
    assert sanitize_for_terminal('π', 'no-such-codec') == '\\u03c0'


def test_console_prints_verbatim():
    out = io.StringIO()
    console = SafeConsole(file=out, width=200)
    console.print('a.go:3:7: [bold]limit[/bold] is unused')
    assert out.getvalue() == 'a.go:3:7: [bold]limit[/bold] is unused\n'


def test_console_sanitizes_for_ascii_streams():
    out = stream('ascii')
    console = SafeConsole(file=out, width=200)
    console.print('a.go:3:7: größe is unused')
    out.flush()
    assert out.buffer.getvalue() == b'a.go:3:7: gr\\xf6\\xdfe is unused\n'
