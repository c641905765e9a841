"""Tree-sitter parser for Go sources."""
from pathlib import Path
from typing import Optional
from tree_sitter import Language, Node, Parser, Tree
import tree_sitter_go as tsgo

from .nodes import File
from .tree_builder import SyntaxTreeBuilder


class ParseError(Exception):
    """A Go source file could not be read or parsed."""

    def __init__(self, filename: str, line: int, column: int, message: str):
        super().__init__(f"{filename}:{line}:{column}: {message}")
        self.filename = filename
        self.line = line
        self.column = column
        self.message = message


class GoParser:
    """Go parser using the tree-sitter v0.22+ API."""

    EXTENSION = '.go'

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Factory method using the ``Parser(Language(capsule))`` API.

        Returns:
            Configured Parser instance
        """
        return Parser(Language(tsgo.language()))

    def parse_tree(self, source: bytes) -> Tree:
        """Parse raw source into a tree-sitter Tree, errors included."""
        return self.parser.parse(source)

    def parse_source(self, source: bytes, filename: str = "<source>") -> File:
        """Parse Go source into a File node.

        Args:
            source: Source code bytes
            filename: Name recorded in every position

        Returns:
            The lowered File node

        Raises:
            ParseError: If the source has syntax errors
        """
        tree = self.parse_tree(source)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root) or root
            line, column = bad.start_point[0] + 1, bad.start_point[1] + 1
            if bad.is_missing:
                message = f"expected {bad.type}"
            else:
                text = bad.text.decode('utf-8', errors='replace') if bad.text else ""
                message = f"unexpected {text.splitlines()[0]!r}" if text.strip() else "syntax error"
            raise ParseError(filename, line, column, message)
        return SyntaxTreeBuilder(filename).build(root)

    def parse_file(self, file_path: str | Path) -> File:
        """Read and parse a Go source file.

        Raises:
            ParseError: If the file cannot be read or has syntax errors
        """
        file_path = Path(file_path)
        try:
            source = file_path.read_bytes()
        except OSError as e:
            raise ParseError(str(file_path), 0, 0, e.strerror or str(e)) from e
        return self.parse_source(source, str(file_path))

    @classmethod
    def handles(cls, file_path: str | Path) -> bool:
        return Path(file_path).suffix == cls.EXTENSION


def _first_error(node: Node) -> Optional[Node]:
    """Depth-first search for the earliest ERROR or MISSING node."""
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None
