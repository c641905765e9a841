"""deadcode CLI - report unused declarations in Go packages."""
from pathlib import Path
from typing import Callable, List, Optional
import click
import typer
from rich.table import Table

from deadcode.analyzer.package_loader import PackageLoader
from deadcode.analyzer.parser import ParseError
from deadcode.analyzer.scanner import Scanner
from deadcode.analyzer.scope import Report
from deadcode.config import __version__, get_config
from deadcode.utils.safe_console import SafeConsole

app = typer.Typer(
    name="deadcode",
    help="Report unused functions, types, constants and variables in Go packages",
    add_completion=False
)
console = SafeConsole()
err_console = SafeConsole(stderr=True)


class Session:
    """Output and exit status of one CLI run."""

    def __init__(self, output_format: str = "text", verbose: bool = False):
        self.output_format = output_format
        self.verbose = verbose
        self.exit_code = 0
        self.reports: List[Report] = []

    def errorf(self, message: str):
        """Print a diagnostic to stderr and fail the run."""
        err_console.print(f"deadcode: {message}")
        self.exit_code = 2

    def oserror(self, error: OSError):
        """Report a filesystem error and fail the run."""
        self.errorf(f"{error.filename}: {error.strerror or error}")

    def info(self, message: str):
        if self.verbose:
            err_console.print(f"deadcode: {message}")

    def report(self, report: Report):
        if self.output_format == "table":
            self.reports.append(report)
            self.exit_code = 2
        else:
            self.errorf(str(report))


def scan_directory(directory: Path, loader: PackageLoader, session: Session,
                   trace: Optional[Callable[[str], None]] = None):
    """Scan every package of one directory.

    A parse error abandons this directory only.
    """
    try:
        packages = loader.load_dir(directory)
    except ParseError as e:
        session.errorf(str(e))
        return
    except OSError as e:
        session.errorf(f"{directory}: {e.strerror or e}")
        return

    for package in packages:
        session.info(f"scanning package {package.name} in {directory} ({len(package.files)} files)")
        for report in Scanner(package, trace=trace).run():
            session.report(report)


def _print_table(reports: List[Report]):
    if not reports:
        console.print("No unused declarations found.")
        return

    table = Table(title="Unused Declarations")
    table.add_column("File", style="cyan", no_wrap=False)
    table.add_column("Line", style="green", justify="right")
    table.add_column("Column", style="green", justify="right")
    table.add_column("Symbol", style="yellow")

    for report in reports:
        table.add_row(report.pos.filename, str(report.pos.line), str(report.pos.column), report.name)

    console.print(table)
    console.print(f"Total: {len(reports)} unused declaration(s)")


def _version_callback(value: bool):
    if value:
        console.print(f"deadcode {__version__}")
        raise typer.Exit()


@app.command()
def scan(
    paths: Optional[List[Path]] = typer.Argument(None, help="Package directories to scan (default: current directory)"),
    output_format: str = typer.Option("text", "--format", "-f", click_type=click.Choice(["text", "table"], case_sensitive=False), help="Output format: 'text' diagnostics on stderr or a 'table' on stdout"),
    entry_package: Optional[str] = typer.Option(None, "--entry-package", help="Package name that builds an executable (default: main)"),
    include_tests: Optional[bool] = typer.Option(None, "--include-tests/--exclude-tests", help="Also scan _test.go files"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Scan subdirectories too"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print each scanned package"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"),
):
    """Report declarations that are never used.

    Exits with status 2 if anything unused was found or a directory could not
    be parsed.
    """
    try:
        config = get_config()
    except ValueError as e:
        err_console.print(f"deadcode: {e}")
        raise typer.Exit(2)

    session = Session(output_format=output_format.lower(), verbose=verbose)
    loader = PackageLoader(
        entry_name=entry_package or config.entry_package,
        include_tests=config.include_tests if include_tests is None else include_tests,
    )
    trace = None
    if config.debug:
        trace = lambda line: err_console.print(f"deadcode: debug: {line}")

    for path in paths or [Path(".")]:
        if not path.is_dir():
            session.errorf(f"not a directory: {path}")
            continue
        if recursive:
            walk = loader.walk_dirs(path, config.excluded_dirs, onerror=session.oserror)
            for directory in walk:
                scan_directory(directory, loader, session, trace)
        else:
            scan_directory(path, loader, session, trace)

    if session.output_format == "table":
        _print_table(session.reports)

    raise typer.Exit(session.exit_code)


if __name__ == "__main__":
    app()
