"""Lexical scope tracking for declared symbols."""
from dataclasses import dataclass
from typing import Dict, List

from .nodes import Position

BLANK = "_"


@dataclass
class Symbol:
    """A declared name and whether anything referenced it."""
    name: str
    pos: Position
    used: bool = False


@dataclass(frozen=True, order=True)
class Report:
    """An unused declaration. Orders by position."""
    pos: Position
    name: str

    def __str__(self) -> str:
        return f"{self.pos}: {self.name} is unused"


class ScopeStack:
    """Nested scopes, innermost last.

    One scope is pushed per file, function body and block. Only the innermost
    scope receives declarations; lookups walk outwards.
    """

    def __init__(self):
        self._scopes: List[Dict[str, Symbol]] = []

    def __len__(self) -> int:
        return len(self._scopes)

    def push(self):
        self._scopes.append({})

    def pop(self) -> List[Report]:
        """Close the innermost scope.

        Returns:
            Reports for every symbol of that scope that was never used
        """
        scope = self._scopes.pop()
        return [Report(pos=s.pos, name=s.name) for s in scope.values() if not s.used]

    def is_root(self) -> bool:
        """True at package (file) level."""
        return len(self._scopes) == 1

    def declare(self, name: str, pos: Position, used: bool = False):
        """Declare ``name`` in the innermost scope.

        Redeclaring keeps a previous ``used=True``; the site moves to ``pos``.
        """
        if name == BLANK:
            return
        scope = self._scopes[-1]
        symbol = scope.get(name)
        if symbol is None:
            scope[name] = Symbol(name=name, pos=pos, used=used)
        else:
            symbol.pos = pos
            symbol.used = symbol.used or used

    def mark(self, name: str) -> bool:
        """Mark the nearest declaration of ``name`` as used.

        Returns:
            False if no open scope declares ``name``
        """
        if name == BLANK:
            return True
        for scope in reversed(self._scopes):
            symbol = scope.get(name)
            if symbol is not None:
                symbol.used = True
                return True
        return False
