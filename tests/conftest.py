"""
Shared fixtures for the Primer test suite.
"""

import sys
from pathlib import Path

import pytest

# Ensure the src/ directory is on the import path so that
# primer.core.graph / primer.core.symbols / etc. can be imported.
SRC_ROOT = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(SRC_ROOT))

from primer.core.config import PrimerConfig  # noqa: E402
from primer.core.environment import (  # noqa: E402
    DirectoryEnsurer,
    MappingEnvironment,
)
from primer.exceptions import DirectoryError  # noqa: E402


# =============================================================================
# Fakes
# =============================================================================

class RecordingEnsurer(DirectoryEnsurer):
    """In-memory ensurer: fails on chosen paths, records every attempt."""

    def __init__(self, existing=(), failing=(), error=DirectoryError):
        self.existing = {str(p) for p in existing}
        self.failing = {str(p) for p in failing}
        self.error = error
        self.attempts = []

    def ensure_exists(self, path) -> bool:
        path = str(path)
        self.attempts.append(path)
        if path in self.failing:
            raise self.error(f"permission denied: {path}")
        if path in self.existing:
            return False
        self.existing.add(path)
        return True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def environment() -> MappingEnvironment:
    """A complete environment: no defaults need to be applied."""
    return MappingEnvironment({
        "USER": "ada",
        "HOME": "/home/ada",
        "PRIMER_WORKSPACE": "/srv/primer",
    })


@pytest.fixture
def empty_environment() -> MappingEnvironment:
    return MappingEnvironment({})


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Temporary directory under which required directories are created."""
    root = tmp_path / "app"
    root.mkdir()
    return root


@pytest.fixture
def config(base_dir: Path) -> PrimerConfig:
    """Default graph, required directories rooted in a temp dir."""
    return PrimerConfig(base_dir=str(base_dir))


@pytest.fixture
def recording_ensurer() -> RecordingEnsurer:
    return RecordingEnsurer()
