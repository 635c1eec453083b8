"""
Primer Client Facade

Single entry point for programmatic use of Primer.  Builds the startup
state lazily, exactly once, and answers read-only queries against it.

Usage::

    from primer import Primer

    # From environment variables
    client = Primer()

    # With explicit configuration
    from primer.core.config import PrimerConfig
    client = Primer(config=PrimerConfig(required_dirs=()))

    client.weight("A")      # 20
    client.symbol(90)       # "XC"
    client.numeral(1994)    # "MCMXCIV"

    # Async variant (for FastAPI / Django async views)
    state = await client.abuild()
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import fields
from typing import Dict, Optional

from primer.core.bootstrap import BootstrapPipeline, StartupState
from primer.core.config import PrimerConfig
from primer.core.environment import DirectoryEnsurer, EnvironmentProvider, OsEnvironment

logger = logging.getLogger(__name__)


class Primer:
    """
    High-level Primer client.

    Each instance carries its own :class:`PrimerConfig` and its own
    published state; nothing is shared through module globals.

    Args:
        config: Explicit configuration object.  When *None*, a config
            is built from the environment plus keyword overrides.
        environment: Lookup for config and runtime settings.  Defaults
            to the process environment.
        ensurer: Directory creator used for required directories.
        include_environment: When False, only the graph, weights and
            symbol table are built.
        **kwargs: Forwarded to :class:`PrimerConfig` when *config* is
            ``None`` (e.g. ``required_dirs=()``).
    """

    def __init__(
        self,
        config: PrimerConfig | None = None,
        *,
        environment: EnvironmentProvider | None = None,
        ensurer: DirectoryEnsurer | None = None,
        include_environment: bool = True,
        **kwargs,
    ):
        self._environment = environment or OsEnvironment()
        if config is not None:
            self._config = config
        elif kwargs:
            # Build a config from env, then overlay keyword overrides
            base = PrimerConfig.from_env(self._environment)
            merged = {
                f.name: kwargs.get(f.name, getattr(base, f.name))
                for f in fields(base)
            }
            self._config = PrimerConfig(**merged)
        else:
            self._config = PrimerConfig.from_env(self._environment)

        self._pipeline = BootstrapPipeline(
            self._config,
            environment=self._environment,
            ensurer=ensurer,
            include_environment=include_environment,
        )
        self._lock = threading.Lock()

    # ── Configuration ─────────────────────────────────────────────

    @property
    def config(self) -> PrimerConfig:
        """The active configuration for this client."""
        return self._config

    # ── State ─────────────────────────────────────────────────────

    def build(self) -> StartupState:
        """Build the startup state if needed and return it."""
        with self._lock:
            return self._pipeline.run()

    @property
    def state(self) -> StartupState:
        """The published startup state (built on first access)."""
        if self._pipeline.barrier.is_set():
            return self._pipeline.barrier.get()
        return self.build()

    @property
    def is_built(self) -> bool:
        return self._pipeline.barrier.is_set()

    # ── Queries ───────────────────────────────────────────────────

    def weight(self, node_id: str) -> Optional[int]:
        """Derived weight of *node_id*, or None if the node was never added."""
        return self.state.weights.get(node_id)

    def symbol(self, magnitude) -> Optional[str]:
        """Symbol for *magnitude*, or None when the table has no entry."""
        return self.state.symbols.lookup(magnitude)

    def numeral(self, number) -> Optional[str]:
        """Render *number* (1..3999) from the symbol table."""
        return self.state.symbols.compose(number)

    # ── Async variants ────────────────────────────────────────────

    async def abuild(self) -> StartupState:
        """Async variant of :meth:`build`. Raises same exceptions as sync."""
        return await asyncio.to_thread(self.build)

    # ── Health (for agents / status endpoints) ─────────────────────

    def health(self) -> Dict[str, object]:
        """
        Return a small status dict for readiness probes.

        Never triggers a build.
        """
        return {
            "version": __import__("primer", fromlist=["__version__"]).__version__,
            "built": self.is_built,
            "nodes": len(self._config.graph_nodes),
            "edges": len(self._config.graph_edges),
        }
