"""Package scanner: walks every file and reconciles forward references."""
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from .nodes import File, Package, Position
from .scope import Report
from .visitors import StatementVisitor, WalkState


class Reporter:
    """Collects reports, one per declaration site."""

    def __init__(self):
        self._reports: Dict[Position, Report] = {}

    def __len__(self) -> int:
        return len(self._reports)

    def add(self, report: Report):
        self._reports.setdefault(report.pos, report)

    def extend(self, reports: Iterable[Report]):
        for report in reports:
            self.add(report)

    def sorted(self) -> List[Report]:
        return sorted(self._reports.values())


def reconcile(reports: Iterable[Report], unresolved: Set[str]) -> List[Report]:
    """Filter out reports for names some file referenced before declaring.

    Package-level declarations are visible from every file regardless of
    order, so a name that was unresolved anywhere in the package may well
    refer to a reported symbol.
    """
    return [r for r in reports if r.name not in unresolved]


class Scanner:
    """Finds unused declarations in one package.

    Args:
        package: Parsed package
        trace: Optional callback receiving one line per visited node
    """

    def __init__(self, package: Package, trace: Optional[Callable[[str], None]] = None):
        self.package = package
        self.trace = trace

    def scan_file(self, file: File) -> Tuple[List[Report], Set[str]]:
        """Walk one file in its own root scope.

        Returns:
            Unused declarations of the file and the names it could not resolve
        """
        state = WalkState(entry=self.package.entry, trace=self.trace)
        state.push()
        StatementVisitor(state).visit(file)
        state.pop()
        return state.reports, state.unresolved

    def run(self) -> List[Report]:
        """Scan all files in filename order.

        Returns:
            Reconciled reports sorted by position
        """
        reporter = Reporter()
        unresolved: Set[str] = set()
        for file in sorted(self.package.files, key=lambda f: f.filename):
            reports, names = self.scan_file(file)
            reporter.extend(reports)
            unresolved |= names
        return reconcile(reporter.sorted(), unresolved)


def scan_package(package: Package, trace: Optional[Callable[[str], None]] = None) -> List[Report]:
    """Convenience wrapper around ``Scanner(package).run()``."""
    return Scanner(package, trace=trace).run()
