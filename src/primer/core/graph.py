"""
Primer Graph Store

In-memory directed graph used during startup, plus the weight derivation
that runs against it once construction has finished.

The store is deliberately permissive: ``add_node`` overwrites an existing
entry with a fresh default node, and ``add_edge`` never checks that
either end exists.  Both behaviours are part of the contract.
"""

import enum
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from primer.exceptions import FrozenStateError

logger = logging.getLogger(__name__)

WEIGHT_PER_EDGE = 10


# =============================================================================
# Data Models
# =============================================================================

class ConstructionState(enum.Enum):
    """Lifecycle of a run-once structure.  There is no transition back."""
    EMPTY = "empty"
    UNDER_CONSTRUCTION = "under_construction"
    FROZEN = "frozen"


@dataclass(frozen=True)
class Node:
    """An identified graph entity with an integer payload."""
    id: str
    value: int = 0


class FrozenGraph:
    """Read-only snapshot of a :class:`GraphStore`.

    Node and adjacency mappings are exposed through
    :class:`types.MappingProxyType`, and every outgoing sequence is a
    tuple, so nothing reachable from a published graph can be mutated.
    """

    __slots__ = ("_nodes", "_edges")

    def __init__(self, nodes: Mapping[str, Node], edges: Mapping[str, List[str]]):
        self._nodes = MappingProxyType(dict(nodes))
        self._edges = MappingProxyType(
            {source: tuple(targets) for source, targets in edges.items()}
        )

    @property
    def node_map(self) -> Mapping[str, Node]:
        return self._nodes

    @property
    def adjacency(self) -> Mapping[str, Tuple[str, ...]]:
        return self._edges

    def nodes(self) -> FrozenSet[str]:
        """Return the node ids.  Treat as a set; order is not defined."""
        return frozenset(self._nodes)

    def node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def edges_from(self, node_id: str) -> Tuple[str, ...]:
        return self._edges.get(node_id, ())

    def out_degree(self, node_id: str) -> int:
        return len(self.edges_from(node_id))

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        edge_count = sum(len(targets) for targets in self._edges.values())
        return f"FrozenGraph(nodes={len(self._nodes)}, edges={edge_count})"


# =============================================================================
# Graph Store
# =============================================================================

class GraphStore:
    """
    Owns nodes and directed adjacency while the graph is being built.

    Mutation is allowed until :meth:`freeze` is called; after that every
    ``add_*`` call raises :class:`~primer.exceptions.FrozenStateError`.
    No locking: there is exactly one writer and no readers until the
    frozen snapshot is published.
    """

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, List[str]] = {}
        self._state = ConstructionState.EMPTY
        self._frozen: Optional[FrozenGraph] = None

    @property
    def state(self) -> ConstructionState:
        return self._state

    # ── Construction ──────────────────────────────────────────────

    def add_node(self, node_id: str) -> Node:
        """
        Ensure a node with *node_id* exists.

        An existing entry is replaced by a fresh default-valued node;
        payloads are overwritten, not merged.
        """
        self._begin_mutation()
        if node_id in self._nodes:
            logger.debug(f"Node {node_id!r} already present, resetting payload")
        node = Node(id=node_id)
        self._nodes[node_id] = node
        return node

    def add_edge(self, source: str, target: str) -> None:
        """Append *target* to the outgoing sequence of *source*.

        Neither end is checked for existence.  Duplicates and self-loops
        are kept.
        """
        self._begin_mutation()
        self._edges.setdefault(source, []).append(target)

    def freeze(self) -> FrozenGraph:
        """Freeze the store and return its read-only snapshot.

        The first call performs the transition; later calls return the
        same snapshot.
        """
        if self._frozen is None:
            self._frozen = FrozenGraph(self._nodes, self._edges)
            self._state = ConstructionState.FROZEN
            logger.debug(f"Graph frozen: {self._frozen!r}")
        return self._frozen

    # ── Reads ─────────────────────────────────────────────────────

    def nodes(self) -> FrozenSet[str]:
        """Return the current node ids as an unordered set."""
        return frozenset(self._nodes)

    def edges_from(self, node_id: str) -> Tuple[str, ...]:
        return tuple(self._edges.get(node_id, ()))

    def snapshot(self) -> FrozenGraph:
        """Copy the current contents without freezing the store."""
        if self._frozen is not None:
            return self._frozen
        return FrozenGraph(self._nodes, self._edges)

    # ── Internal helpers ──────────────────────────────────────────

    def _begin_mutation(self) -> None:
        if self._state is ConstructionState.FROZEN:
            raise FrozenStateError("Graph is frozen; no further nodes or edges may be added.")
        self._state = ConstructionState.UNDER_CONSTRUCTION


# =============================================================================
# Weight Derivation
# =============================================================================

def derive_weights(
    graph: Union[GraphStore, FrozenGraph],
    per_edge: int = WEIGHT_PER_EDGE,
) -> Mapping[str, int]:
    """
    Compute the weight of every node from its out-degree.

    weight = number of outgoing edges x *per_edge*.  Edges pointing at
    ids that were never added still count.  Source ids without a node
    entry receive no weight.

    The graph is snapshotted at call time, so later mutation of a
    still-open :class:`GraphStore` is not observed.  Call this after the
    last ``add_edge``.
    """
    frozen = graph.snapshot() if isinstance(graph, GraphStore) else graph
    weights = {
        node_id: frozen.out_degree(node_id) * per_edge
        for node_id in frozen.node_map
    }
    return MappingProxyType(weights)
