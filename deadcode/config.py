"""Configuration management for deadcode.

Loads environment variables and provides centralized config access.
"""
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

__version__ = "1.0.0"

TRUTHY = {'1', 'true', 'yes', 'on'}


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: str | Path | None = None):
        """Initialize config by loading a .env file.

        Args:
            env_path: .env file to load; defaults to the working directory's
        """
        env_path = Path(env_path) if env_path else Path.cwd() / ".env"
        load_dotenv(env_path)

        self._validate()

    def _validate(self):
        """Validate environment overrides.

        Raises:
            ValueError: If DEADCODE_ENTRY_PACKAGE is not a valid package name
        """
        if not self.entry_package.isidentifier():
            raise ValueError(
                f"DEADCODE_ENTRY_PACKAGE must be a package name, got {self.entry_package!r}"
            )

    @property
    def entry_package(self) -> str:
        """Name of the package that builds an executable.

        Returns:
            Package name, ``main`` unless overridden
        """
        return os.getenv("DEADCODE_ENTRY_PACKAGE", "main")

    @property
    def include_tests(self) -> bool:
        """Whether ``_test.go`` files are scanned."""
        return _flag("DEADCODE_INCLUDE_TESTS")

    @property
    def excluded_dirs(self) -> List[str]:
        """Directory names skipped by recursive scans.

        Returns:
            List of directory names
        """
        raw = os.getenv("DEADCODE_EXCLUDED_DIRS", "vendor,testdata,.git")
        return [name.strip() for name in raw.split(",") if name.strip()]

    @property
    def debug(self) -> bool:
        """Trace every visited node to stderr."""
        return _flag("DEADCODE_DEBUG")


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in TRUTHY


# Singleton instance
_config = None


def get_config(reload: bool = False) -> Config:
    """Get or create singleton Config instance.

    Args:
        reload: Drop the cached instance and read the environment again

    Returns:
        Config instance
    """
    global _config
    if _config is None or reload:
        _config = Config()
    return _config
