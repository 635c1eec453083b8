"""
Primer — explicit, run-once startup state.

The ``primer`` package builds a program's startup structures (a directed
graph with derived node weights, and a magnitude → symbol table) in one
explicit pass and publishes them as read-only values.  Nothing is
computed at import time.

Quick start (programmatic API)::

    from primer import Primer

    client = Primer()                 # reads env vars
    state = client.build()            # build once, publish
    state.weights["A"]                # 20
    state.symbols.lookup(40)          # "XL"

Quick start (CLI)::

    primer show
    primer check --base-dir ./var

Configuration override::

    from primer import Primer, PrimerConfig

    config = PrimerConfig(graph_nodes=("X", "Y"), graph_edges=(("X", "Y"),))
    client = Primer(config=config)
"""

__version__ = "1.0.0"

# Primary public API — the Primer facade
from primer.client import Primer

# Configuration
from primer.core.config import PrimerConfig

# Core data types that callers interact with
from primer.core.bootstrap import StartupState, build_startup_state
from primer.core.graph import FrozenGraph, GraphStore, Node, derive_weights
from primer.core.symbols import SymbolTable, build_symbol_table

# Exception hierarchy
from primer.exceptions import (
    ConfigError,
    DirectoryError,
    FrozenStateError,
    PrimerError,
    StateNotReadyError,
)


def health(config: PrimerConfig | None = None) -> dict:
    """
    Return a small status dict for readiness probes (builds nothing).

    When *config* is None, uses :meth:`PrimerConfig.from_env()` for the snapshot.
    """
    cfg = config or PrimerConfig.from_env()
    return {
        "version": __version__,
        "nodes": len(cfg.graph_nodes),
        "edges": len(cfg.graph_edges),
        "required_dirs": list(cfg.required_dirs),
    }


__all__ = [
    "__version__",
    # Facade
    "Primer",
    # Config
    "PrimerConfig",
    # Data types
    "StartupState",
    "FrozenGraph",
    "GraphStore",
    "Node",
    "SymbolTable",
    # Construction
    "build_startup_state",
    "build_symbol_table",
    "derive_weights",
    # Exceptions
    "PrimerError",
    "ConfigError",
    "DirectoryError",
    "FrozenStateError",
    "StateNotReadyError",
    # Status
    "health",
]
