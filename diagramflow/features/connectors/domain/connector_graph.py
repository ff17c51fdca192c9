"""
Connector graph

Explicit adjacency index over a flat list of connectors, and cycle detection
over it. The index is built once (context -> source id -> outgoing edges) so
a traversal never re-scans the connector list per visited node.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from diagramflow.features.components.domain.component_kind import ComponentKind


class AdjacencyIndex:
    """
    Outgoing edges per context and source.

    A connector is indexed under each context it belongs to; connectors with
    no context are indexed under the None key.
    """

    def __init__(self, connectors: Iterable = ()):
        # context -> source id -> [(connector id, target id)]
        self._edges: Dict[Optional[str], Dict[str, List[Tuple[str, str]]]] = defaultdict(lambda: defaultdict(list))
        self._size = 0
        for connector in connectors:
            self.add(connector)

    def add(self, connector) -> None:
        if connector.kind is not ComponentKind.CONNECTOR:
            return
        payload = connector.payload
        for context_id in (connector.contexts or (None,)):
            self._edges[context_id][payload.from_id].append((connector.id, payload.to_id))
        self._size += 1

    def successors(self, node_id: str, context_id: Optional[str] = None,
                   exclude_id: Optional[str] = None) -> List[str]:
        """Destination ids reachable in one step from node_id within a context."""
        by_source = self._edges.get(context_id)
        if not by_source or node_id not in by_source:
            return []
        return [target for connector_id, target in by_source[node_id] if connector_id != exclude_id]

    def contexts(self) -> List[Optional[str]]:
        return list(self._edges.keys())

    def __len__(self) -> int:
        return self._size


def find_cycle_path(index: AdjacencyIndex, source_id: str, target_id: str,
                    context_id: Optional[str] = None,
                    exclude_id: Optional[str] = None) -> Optional[List[str]]:
    """
    Find a cycle reachable from source_id once the edge source -> target is added.

    Iterative depth-first traversal with "on stack" and "explored" marks:
    reaching an on-stack node closes a cycle, reaching an explored node is
    pruned. Each node and edge is visited at most once.

    Args:
        index: Existing edges
        source_id: Source of the tentative edge (traversal root)
        target_id: Destination of the tentative edge
        context_id: Context whose edges are followed
        exclude_id: Connector id to ignore (the candidate itself, when stored)

    Returns:
        Node ids along the cycle, first and last equal (e.g. ["B", "C", "A", "B"]),
        or None when no cycle exists
    """
    def successors(node_id: str) -> List[str]:
        nodes = index.successors(node_id, context_id, exclude_id)
        if node_id == source_id:
            nodes = nodes + [target_id]
        return nodes

    path = [source_id]
    on_stack = {source_id: 0}  # node -> position in path
    explored = set()
    pending = [iter(successors(source_id))]

    while pending:
        child = next(pending[-1], None)
        if child is None:
            pending.pop()
            node_id = path.pop()
            del on_stack[node_id]
            explored.add(node_id)
            continue
        if child in on_stack:
            return path[on_stack[child]:] + [child]
        if child in explored:
            continue
        on_stack[child] = len(path)
        path.append(child)
        pending.append(iter(successors(child)))

    return None


def would_create_cycle(index: AdjacencyIndex, source_id: str, target_id: str,
                       context_id: Optional[str] = None,
                       exclude_id: Optional[str] = None) -> bool:
    """True if adding source -> target leaves a cycle reachable from source."""
    return find_cycle_path(index, source_id, target_id, context_id, exclude_id) is not None
