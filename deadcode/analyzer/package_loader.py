"""Discovery and grouping of Go source files into packages."""
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from .nodes import File, Package
from .parser import GoParser

TEST_SUFFIX = '_test.go'


class PackageLoader:
    """Parse the Go files of a directory and group them by package clause.

    Args:
        entry_name: Package name that marks an executable (``main`` for Go)
        include_tests: Also load ``_test.go`` files
        parser: Parser to reuse; a new one is created by default
    """

    def __init__(self, entry_name: str = 'main', include_tests: bool = False,
                 parser: Optional[GoParser] = None):
        self.entry_name = entry_name
        self.include_tests = include_tests
        self.parser = parser or GoParser()

    def is_source(self, path: Path) -> bool:
        """Go source file, excluding tests unless they were asked for."""
        if not path.is_file() or not GoParser.handles(path):
            return False
        return self.include_tests or not path.name.endswith(TEST_SUFFIX)

    def source_files(self, directory: str | Path) -> List[Path]:
        directory = Path(directory)
        return sorted(p for p in directory.iterdir() if self.is_source(p))

    def load_dir(self, directory: str | Path) -> List[Package]:
        """Parse every source file of ``directory`` (not recursive).

        Returns:
            Packages sorted by name

        Raises:
            ParseError: On the first file that fails to parse
        """
        files = [self.parser.parse_file(path) for path in self.source_files(directory)]
        return self.group(files)

    def group(self, files: Iterable[File]) -> List[Package]:
        packages: Dict[str, Package] = {}
        for file in files:
            package = packages.get(file.package)
            if package is None:
                package = Package(name=file.package, entry=file.package == self.entry_name)
                packages[file.package] = package
            package.files.append(file)
        return [packages[name] for name in sorted(packages)]

    def walk_dirs(self, root: str | Path, excluded: Iterable[str] = (),
                  onerror: Optional[Callable[[OSError], None]] = None) -> Iterator[Path]:
        """Yield ``root`` and every subdirectory holding Go sources.

        Directories named in ``excluded`` are pruned along with their contents.
        Symlinked subdirectories are not followed.

        Args:
            root: Directory to start from
            excluded: Directory names to skip
            onerror: Called with the error when a directory cannot be listed;
                the error is raised when no callback is given
        """
        root = Path(root)
        excluded = set(excluded)
        pending = [root]
        while pending:
            directory = pending.pop()
            try:
                children = sorted(directory.iterdir())
            except OSError as e:
                if onerror is None:
                    raise
                onerror(e)
                continue
            if directory == root or any(self.is_source(p) for p in children):
                yield directory
            subdirs = [
                p for p in children
                if p.is_dir() and not p.is_symlink() and p.name not in excluded
            ]
            pending.extend(reversed(subdirs))
