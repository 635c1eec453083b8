"""
Primer Environment Collaborators

The narrow capabilities the startup pipeline consumes from the outside
world: named configuration lookup and "make sure this directory exists".
Both are small abstract bases with a real implementation and an
in-memory one, so tests never need to touch ``os.environ``.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from tqdm import tqdm

from primer.exceptions import DirectoryError

logger = logging.getLogger(__name__)


# =============================================================================
# Environment lookup
# =============================================================================

class EnvironmentProvider:
    """
    Abstract base for read-only configuration lookup.

    ``get`` returns ``None`` for a missing name; absence is never an error.
    """

    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError


class OsEnvironment(EnvironmentProvider):
    """Process environment (``os.environ``).  Empty values count as unset."""

    def get(self, name: str) -> Optional[str]:
        value = os.environ.get(name)
        return value if value else None


class MappingEnvironment(EnvironmentProvider):
    """Fixed snapshot of name → value pairs (tests, embedding)."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})

    def get(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        return value if value else None


# =============================================================================
# Directory ensuring
# =============================================================================

class DirectoryEnsurer:
    """
    Abstract base for idempotent directory creation.

    ``ensure_exists`` returns True when it created the directory and
    False when it was already there.  Failures raise
    :class:`~primer.exceptions.DirectoryError`.
    """

    def ensure_exists(self, path: Union[str, Path]) -> bool:
        raise NotImplementedError


class FilesystemDirectoryEnsurer(DirectoryEnsurer):
    """Creates directories on the local filesystem."""

    def __init__(self, mode: int = 0o755):
        self.mode = mode

    def ensure_exists(self, path: Union[str, Path]) -> bool:
        target = Path(path)
        try:
            if target.is_dir():
                return False
            if target.exists():
                raise DirectoryError(f"{target} exists but is not a directory")
            target.mkdir(mode=self.mode, parents=True, exist_ok=True)
        except DirectoryError:
            raise
        except OSError as exc:
            raise DirectoryError(f"Failed to create directory {target}: {exc}") from exc
        return True


@dataclass(frozen=True)
class DirectoryReport:
    """Read-only outcome of a best-effort pass over the required directories."""
    ensured: Tuple[str, ...] = ()
    """Every path that exists as a directory afterwards."""
    created: Tuple[str, ...] = ()
    """Subset of :attr:`ensured` that this pass created."""
    failed: Mapping[str, str] = field(default_factory=dict)
    """Path → error message for each directory that could not be ensured."""

    def __post_init__(self):
        object.__setattr__(self, "ensured", tuple(self.ensured))
        object.__setattr__(self, "created", tuple(self.created))
        object.__setattr__(self, "failed", MappingProxyType(dict(self.failed)))

    @property
    def ok(self) -> bool:
        return not self.failed


def ensure_directories(
    paths: Iterable[Union[str, Path]],
    ensurer: DirectoryEnsurer,
    show_progress: bool = False,
) -> DirectoryReport:
    """
    Ensure every path in *paths* exists.

    One failure never stops the remaining attempts.  Failures are logged
    and recorded in the report; nothing is raised.
    """
    ensured: List[str] = []
    created: List[str] = []
    failed: Dict[str, str] = {}
    targets = [str(p) for p in paths]

    with tqdm(total=len(targets), desc="Ensuring directories", unit="dir",
              disable=not show_progress) as pbar:
        for target in targets:
            try:
                if ensurer.ensure_exists(target):
                    logger.info(f"Created required directory: {target}")
                    created.append(target)
                ensured.append(target)
            except OSError as exc:
                # DirectoryError is an OSError; plain ones come from
                # third-party ensurers.
                logger.warning(f"Failed to create directory {target}: {exc}")
                failed[target] = str(exc)
            finally:
                pbar.update(1)

    return DirectoryReport(ensured=ensured, created=created, failed=failed)


# =============================================================================
# Runtime settings
# =============================================================================

@dataclass(frozen=True)
class RuntimeSettings:
    """User, home and workspace as resolved at startup."""
    user: str
    home: str
    workspace: str
    defaults_applied: tuple = ()
    """Names of the settings that fell back to a default."""


def resolve_settings(environment: EnvironmentProvider, config) -> RuntimeSettings:
    """
    Read ``USER``, ``HOME`` and ``PRIMER_WORKSPACE``, filling gaps.

    A missing user is worth a warning; missing home and workspace are
    derived from the user and the home directory respectively.
    """
    applied = []

    user = environment.get("USER")
    if user is None:
        logger.warning(f"$USER not set, using default: {config.default_user}")
        user = config.default_user
        applied.append("user")

    home = environment.get("HOME")
    if home is None:
        home = f"/home/{user}"
        logger.info(f"HOME not set, using default: {home}")
        applied.append("home")

    workspace = environment.get("PRIMER_WORKSPACE")
    if workspace is None:
        workspace = str(Path(home) / config.workspace_dirname)
        logger.info(f"PRIMER_WORKSPACE not set, using default: {workspace}")
        applied.append("workspace")

    return RuntimeSettings(
        user=user,
        home=home,
        workspace=workspace,
        defaults_applied=tuple(applied),
    )
