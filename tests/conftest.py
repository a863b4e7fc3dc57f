"""Shared test fixtures for Mod Inspector."""

import json
from pathlib import Path
from typing import Any

import pytest

from mod_inspector.adapters.archive import InMemoryContentProvider

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
TRANSCRIPTS_DIR = FIXTURES_DIR / "transcripts"
RESULTS_DIR = FIXTURES_DIR / "results"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def two_files_transcript() -> str:
    """Load a transcript with errors in two files, a warning and a missing script."""
    return (TRANSCRIPTS_DIR / "two_files.txt").read_text()


@pytest.fixture
def library_result() -> dict[str, Any]:
    """Load the analyzer result of a library package."""
    return json.loads((RESULTS_DIR / "library.json").read_text())


@pytest.fixture
def chain_files() -> dict[str, str]:
    """Return an archive where entry.lua -> guard.lua -> helpers.lua."""
    return {
        "entry.lua": 'include("guard.lua")\n',
        "guard.lua": "include('helpers.lua')\nlocal x = 1\n",
        "helpers.lua": "return {}\n",
    }


@pytest.fixture
def cyclic_files() -> dict[str, str]:
    """Return an archive where a.lua and b.lua include each other."""
    return {
        "a.lua": 'include("b.lua")\n',
        "b.lua": 'include("a.lua")\n',
    }


@pytest.fixture
def provider(chain_files: dict[str, str], cyclic_files: dict[str, str]) -> InMemoryContentProvider:
    """Return an in-memory provider holding the chain and cyclic archives."""
    return InMemoryContentProvider({"chain": chain_files, "cyclic": cyclic_files})
