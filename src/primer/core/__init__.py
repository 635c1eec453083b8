"""
Primer Core — configuration, graph, symbols, environment, and bootstrap.

Re-exports the primary classes for convenience::

    from primer.core import GraphStore, BootstrapPipeline, build_symbol_table
"""

from primer.core.bootstrap import (
    BootstrapPipeline,
    CompletionBarrier,
    StartupState,
    build_graph,
    build_startup_state,
)
from primer.core.config import PrimerConfig, parse_edge_list
from primer.core.environment import (
    DirectoryEnsurer,
    DirectoryReport,
    EnvironmentProvider,
    FilesystemDirectoryEnsurer,
    MappingEnvironment,
    OsEnvironment,
    RuntimeSettings,
    ensure_directories,
    resolve_settings,
)
from primer.core.graph import ConstructionState, FrozenGraph, GraphStore, Node, derive_weights
from primer.core.symbols import BASE_SYMBOLS, SymbolTable, build_symbol_table

__all__ = [
    "BootstrapPipeline",
    "CompletionBarrier",
    "StartupState",
    "build_graph",
    "build_startup_state",
    "PrimerConfig",
    "parse_edge_list",
    "DirectoryEnsurer",
    "DirectoryReport",
    "EnvironmentProvider",
    "FilesystemDirectoryEnsurer",
    "MappingEnvironment",
    "OsEnvironment",
    "RuntimeSettings",
    "ensure_directories",
    "resolve_settings",
    "ConstructionState",
    "FrozenGraph",
    "GraphStore",
    "Node",
    "derive_weights",
    "BASE_SYMBOLS",
    "SymbolTable",
    "build_symbol_table",
]
