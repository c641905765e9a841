"""Shared fixtures for the deadcode test suite."""
from pathlib import Path

import pytest

import deadcode.config as config_module

FIXTURES_DIR = Path(__file__).parent / 'fixtures'


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Every test reads the environment again."""
    for name in ('DEADCODE_ENTRY_PACKAGE', 'DEADCODE_INCLUDE_TESTS',
                 'DEADCODE_EXCLUDED_DIRS', 'DEADCODE_DEBUG'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, '_config', None)


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR
