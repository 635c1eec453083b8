"""
Primer Bootstrap Pipeline

The composition root for startup state.  Construction happens in an
explicit, ordered list of named steps, invoked once, and the finished
structures are published behind a one-shot completion barrier.  Nothing
runs at import time.

Steps:
  1. build_graph         — add nodes and edges, then freeze
  2. derive_weights      — out-degree weights from the frozen graph
  3. build_symbols       — symbol table (independent of 1-2)
  4. resolve_settings    — user / home / workspace with defaults
  5. ensure_directories  — best-effort repair of required directories
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from primer.core.config import PrimerConfig
from primer.core.environment import (
    DirectoryEnsurer,
    DirectoryReport,
    EnvironmentProvider,
    FilesystemDirectoryEnsurer,
    OsEnvironment,
    RuntimeSettings,
    ensure_directories,
    resolve_settings,
)
from primer.core.graph import FrozenGraph, GraphStore, derive_weights
from primer.core.symbols import SymbolTable, build_symbol_table
from primer.exceptions import FrozenStateError, StateNotReadyError

logger = logging.getLogger(__name__)


# =============================================================================
# Published state
# =============================================================================

@dataclass(frozen=True)
class StartupState:
    """Everything the pipeline publishes.  Read-only once returned."""
    graph: FrozenGraph
    weights: Mapping[str, int]
    symbols: SymbolTable
    settings: Optional[RuntimeSettings] = None
    directories: Optional[DirectoryReport] = None

    def to_dict(self) -> dict:
        """Return a JSON-serializable view for CLI / API output."""
        data: Dict[str, Any] = {
            "nodes": sorted(self.graph.nodes()),
            "edges": {src: list(dst) for src, dst in sorted(self.graph.adjacency.items())},
            "weights": dict(sorted(self.weights.items())),
            "symbols": {str(k): v for k, v in self.symbols.items()},
        }
        if self.settings is not None:
            data["settings"] = {
                "user": self.settings.user,
                "home": self.settings.home,
                "workspace": self.settings.workspace,
                "defaults_applied": list(self.settings.defaults_applied),
            }
        if self.directories is not None:
            data["directories"] = {
                "ensured": list(self.directories.ensured),
                "created": list(self.directories.created),
                "failed": dict(self.directories.failed),
            }
        return data


class CompletionBarrier:
    """
    One-shot publish point.

    ``publish`` stores the value and sets an :class:`threading.Event`;
    any thread that sees the event set also sees everything written
    before it.  A second publish raises
    :class:`~primer.exceptions.FrozenStateError`.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._value: Any = None

    def publish(self, value: Any) -> None:
        with self._lock:
            if self._event.is_set():
                raise FrozenStateError("Startup state has already been published.")
            self._value = value
            self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def get(self) -> Any:
        if not self._event.is_set():
            raise StateNotReadyError("Startup state has not been published yet.")
        return self._value

    def wait(self, timeout: Optional[float] = None) -> Any:
        """Block until published; raise StateNotReadyError on timeout."""
        if not self._event.wait(timeout):
            raise StateNotReadyError(
                f"Startup state was not published within {timeout} seconds."
            )
        return self._value


# =============================================================================
# Construction steps
# =============================================================================

def build_graph(
    nodes: Iterable[str],
    edges: Iterable[Tuple[str, str]],
) -> FrozenGraph:
    """Add every node, then every edge, and freeze the result."""
    logger.info("Building graph...")
    store = GraphStore()
    for node_id in nodes:
        store.add_node(node_id)
    for source, target in edges:
        store.add_edge(source, target)
    graph = store.freeze()
    logger.info(f"  {graph!r}")
    return graph


# =============================================================================
# Pipeline
# =============================================================================

class BootstrapPipeline:
    """
    Runs the construction steps in order and publishes the result once.

    Steps 1-2 and step 3 share no data; they are listed in a fixed order
    only so the log reads the same on every run.
    """

    def __init__(
        self,
        config: PrimerConfig | None = None,
        *,
        environment: EnvironmentProvider | None = None,
        ensurer: DirectoryEnsurer | None = None,
        include_environment: bool = True,
        show_progress: bool = False,
    ):
        """
        Args:
            config: Pipeline configuration.  Defaults to
                :meth:`PrimerConfig.from_env`.
            environment: Lookup used for runtime settings.  Defaults to
                :class:`OsEnvironment`.
            ensurer: Directory creator.  Defaults to
                :class:`FilesystemDirectoryEnsurer`.
            include_environment: When False, skip steps 4-5 (settings
                and directories are then ``None``).
            show_progress: Show a tqdm progress bar while ensuring
                directories.
        """
        self.environment = environment or OsEnvironment()
        self.config = config or PrimerConfig.from_env(self.environment)
        self.ensurer = ensurer or FilesystemDirectoryEnsurer()
        self.include_environment = include_environment
        self.show_progress = show_progress
        self.barrier = CompletionBarrier()
        self._run_lock = threading.Lock()

    def steps(self) -> List[Tuple[str, Callable[[Dict[str, Any]], Any]]]:
        """Return the named steps in execution order."""
        steps = [
            ("build_graph", self._step_build_graph),
            ("derive_weights", self._step_derive_weights),
            ("build_symbols", self._step_build_symbols),
        ]
        if self.include_environment:
            steps += [
                ("resolve_settings", self._step_resolve_settings),
                ("ensure_directories", self._step_ensure_directories),
            ]
        return steps

    def run(self) -> StartupState:
        """
        Execute every step and publish the :class:`StartupState`.

        Later calls return the state that was already published.
        """
        with self._run_lock:
            if self.barrier.is_set():
                return self.barrier.get()

            self.config.validate()
            results: Dict[str, Any] = {}
            steps = self.steps()
            for position, (name, step) in enumerate(steps, start=1):
                logger.debug(f"[{position}/{len(steps)}] {name}")
                results[name] = step(results)

            state = StartupState(
                graph=results["build_graph"],
                weights=results["derive_weights"],
                symbols=results["build_symbols"],
                settings=results.get("resolve_settings"),
                directories=results.get("ensure_directories"),
            )
            self.barrier.publish(state)
            logger.info("Startup state published")
            return state

    # ── Steps ─────────────────────────────────────────────────────

    def _step_build_graph(self, results: Dict[str, Any]) -> FrozenGraph:
        return build_graph(self.config.graph_nodes, self.config.graph_edges)

    def _step_derive_weights(self, results: Dict[str, Any]) -> Mapping[str, int]:
        return derive_weights(results["build_graph"], per_edge=self.config.weight_per_edge)

    def _step_build_symbols(self, results: Dict[str, Any]) -> SymbolTable:
        return build_symbol_table()

    def _step_resolve_settings(self, results: Dict[str, Any]) -> RuntimeSettings:
        return resolve_settings(self.environment, self.config)

    def _step_ensure_directories(self, results: Dict[str, Any]) -> DirectoryReport:
        paths = self.config.get_directory_paths()
        logger.info(f"Checking {len(paths)} required directories...")
        report = ensure_directories(paths, self.ensurer, show_progress=self.show_progress)
        if not report.ok:
            logger.warning(f"  {len(report.failed)} directories could not be created")
        return report


def build_startup_state(
    config: PrimerConfig | None = None,
    **kwargs,
) -> StartupState:
    """Build and return the startup state in one call.

    Keyword arguments are forwarded to :class:`BootstrapPipeline`.
    """
    return BootstrapPipeline(config, **kwargs).run()
