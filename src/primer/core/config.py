"""
Primer Configuration Module

Instance-based configuration for the startup pipeline.  A
``PrimerConfig`` is built once (explicitly or from the environment) and
passed down the call stack; there is no global configuration object.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from primer.core.environment import EnvironmentProvider, OsEnvironment

DEFAULT_NODES: Tuple[str, ...] = ("A", "B", "C", "D")
DEFAULT_EDGES: Tuple[Tuple[str, str], ...] = (
    ("A", "B"),
    ("A", "C"),
    ("B", "D"),
    ("C", "D"),
)

EDGE_SEPARATOR = ">"


# =============================================================================
# Parsing helpers
# =============================================================================

def parse_name_list(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated list, dropping blanks."""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def parse_edge_list(raw: str) -> Tuple[Tuple[str, str], ...]:
    """
    Parse ``"A>B, A>C"`` into ``(("A", "B"), ("A", "C"))``.

    Whitespace is ignored and an empty string means no edges.  Raises
    :class:`~primer.exceptions.ConfigError` on a token that is not
    exactly ``source>target`` with both sides non-empty.
    """
    from primer.exceptions import ConfigError

    edges: List[Tuple[str, str]] = []
    for token in parse_name_list(raw):
        parts = [p.strip() for p in token.split(EDGE_SEPARATOR)]
        if len(parts) != 2 or not all(parts):
            raise ConfigError(
                f"Malformed edge '{token}'. "
                f"Expected 'source{EDGE_SEPARATOR}target', e.g. PRIMER_GRAPH_EDGES='A>B,A>C'"
            )
        edges.append((parts[0], parts[1]))
    return tuple(edges)


# =============================================================================
# Instance-Based Configuration
# =============================================================================

@dataclass
class PrimerConfig:
    """
    Configuration for one run of the startup pipeline.

    Create from environment variables::

        config = PrimerConfig.from_env()

    Or with explicit values::

        config = PrimerConfig(graph_nodes=("X", "Y"), graph_edges=(("X", "Y"),))
    """

    # ── Graph ─────────────────────────────────────────────────────
    graph_nodes: Tuple[str, ...] = DEFAULT_NODES
    graph_edges: Tuple[Tuple[str, str], ...] = DEFAULT_EDGES
    weight_per_edge: int = 10

    # ── Required directories ──────────────────────────────────────
    required_dirs: Tuple[str, ...] = ("uploads", "logs", "temp")
    base_dir: str = "."

    # ── Runtime settings defaults ─────────────────────────────────
    default_user: str = "defaultuser"
    workspace_dirname: str = "workspace"

    # ── Logging ───────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ── Factory ───────────────────────────────────────────────────

    @classmethod
    def from_env(cls, environment: Optional[EnvironmentProvider] = None) -> "PrimerConfig":
        """Build a config snapshot from environment variables.

        Unset variables keep the dataclass defaults.  Reads
        :envvar:`PRIMER_GRAPH_NODES`, :envvar:`PRIMER_GRAPH_EDGES`,
        :envvar:`PRIMER_REQUIRED_DIRS`, :envvar:`PRIMER_BASE_DIR` and
        :envvar:`PRIMER_LOG_LEVEL`.
        """
        env = environment or OsEnvironment()
        overrides = {}

        nodes_raw = env.get("PRIMER_GRAPH_NODES")
        if nodes_raw is not None:
            overrides["graph_nodes"] = parse_name_list(nodes_raw)

        edges_raw = env.get("PRIMER_GRAPH_EDGES")
        if edges_raw is not None:
            overrides["graph_edges"] = parse_edge_list(edges_raw)

        dirs_raw = env.get("PRIMER_REQUIRED_DIRS")
        if dirs_raw is not None:
            overrides["required_dirs"] = parse_name_list(dirs_raw)

        base_dir = env.get("PRIMER_BASE_DIR")
        if base_dir is not None:
            overrides["base_dir"] = base_dir

        log_level = env.get("PRIMER_LOG_LEVEL")
        if log_level is not None:
            overrides["log_level"] = log_level.upper()

        return cls(**overrides)

    # ── Validation & Accessors ────────────────────────────────────

    def validate(self) -> bool:
        """
        Check the config for values the pipeline cannot use.

        Edges may still reference ids that are not in ``graph_nodes``;
        the graph store accepts those.
        Raises :class:`~primer.exceptions.ConfigError` on failure.
        """
        from primer.exceptions import ConfigError

        if any(not node_id for node_id in self.graph_nodes):
            raise ConfigError("Node ids must be non-empty strings.")

        for source, target in self.graph_edges:
            if not source or not target:
                raise ConfigError(f"Edge ({source!r}, {target!r}) has an empty endpoint.")

        if self.weight_per_edge <= 0:
            raise ConfigError(
                f"weight_per_edge must be positive, got {self.weight_per_edge}."
            )

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(
                f"Unknown log level '{self.log_level}'.\n"
                "  Set via: export PRIMER_LOG_LEVEL=INFO"
            )
        return True

    def get_directory_paths(self, base_dir: Optional[Path] = None) -> List[Path]:
        """Resolve :attr:`required_dirs` under *base_dir* (default :attr:`base_dir`)."""
        root = Path(base_dir) if base_dir is not None else Path(self.base_dir)
        return [root / name for name in self.required_dirs]
