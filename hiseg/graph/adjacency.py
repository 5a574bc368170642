# -*- coding: utf-8 -*-
"""
Adjacency List Graph - Explicit undirected graph used for region adjacency.

``AdjacencyListGraph`` stores nodes with arbitrary non-negative integer ids
and edges with dense ids ``0 .. edge_count - 1``. Edges are unique per
unordered node pair: ``add_edge`` returns the existing id when the pair is
already connected, using a dict keyed by ``(min(u, v), max(u, v))`` for
O(1) amortized lookup. Self-loops are rejected.

Topology is append-only; there is no node or edge removal. Agglomerative
clustering never deletes nodes, it tracks merged regions in a union-find
structure of its own.

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-19

Modified
--------
2026-10-19
"""

# Standard library
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import ValidationError


class AdjacencyListGraph:
    """Undirected simple graph with explicit adjacency lists.

    Parameters
    ----------
    nodes : Iterable[int], optional
        Node ids to add up front, in the given order.

    Examples
    --------
    >>> g = AdjacencyListGraph(nodes=[1, 5, 7])
    >>> g.add_edge(5, 1)
    0
    >>> g.add_edge(1, 5)
    0
    >>> g.u(0), g.v(0)
    (1, 5)
    """

    def __init__(self, nodes: Optional[Iterable[int]] = None) -> None:
        self._adjacency: Dict[int, List[int]] = {}
        self._uv: List[Tuple[int, int]] = []
        self._edge_lookup: Dict[Tuple[int, int], int] = {}
        self._max_node_id = -1
        if nodes is not None:
            for node in nodes:
                self.add_node(node)

    # -----------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------
    def add_node(self, node: int) -> int:
        """Add *node* if it is not present yet. Returns the node id."""
        node = int(node)
        if node < 0:
            raise ValidationError(f"node ids must be >= 0, got {node}")
        if node not in self._adjacency:
            self._adjacency[node] = []
            if node > self._max_node_id:
                self._max_node_id = node
        return node

    def add_edge(self, u: int, v: int) -> int:
        """Connect *u* and *v*, adding missing nodes.

        Returns
        -------
        int
            Id of the new edge, or of the existing edge between the pair.

        Raises
        ------
        ValidationError
            If ``u == v``.
        """
        u, v = int(u), int(v)
        if u == v:
            raise ValidationError(f"self-loop on node {u} is not allowed")
        key = (u, v) if u < v else (v, u)
        edge = self._edge_lookup.get(key)
        if edge is not None:
            return edge
        self.add_node(u)
        self.add_node(v)
        edge = len(self._uv)
        self._uv.append(key)
        self._edge_lookup[key] = edge
        self._adjacency[key[0]].append(edge)
        self._adjacency[key[1]].append(edge)
        return edge

    # -----------------------------------------------------------------
    # Graph capability interface
    # -----------------------------------------------------------------
    @property
    def node_count(self) -> int:
        return len(self._adjacency)

    @property
    def edge_count(self) -> int:
        return len(self._uv)

    @property
    def max_node_id(self) -> int:
        return self._max_node_id

    @property
    def max_edge_id(self) -> int:
        return len(self._uv) - 1

    def nodes(self) -> Iterator[int]:
        """Node ids in insertion order."""
        return iter(list(self._adjacency))

    def edges(self) -> Iterator[int]:
        return iter(range(len(self._uv)))

    def incident_edges(self, node: int) -> Iterator[int]:
        """Edge ids touching *node*, in ascending order."""
        try:
            return iter(list(self._adjacency[node]))
        except KeyError:
            raise ValidationError(f"node {node} is not in the graph") from None

    def u(self, edge: int) -> int:
        return self._uv[edge][0]

    def v(self, edge: int) -> int:
        return self._uv[edge][1]

    def has_node(self, node: int) -> bool:
        return node in self._adjacency

    def uv_ids(self) -> np.ndarray:
        """Endpoint table of shape ``(edge_count, 2)``, ``u < v`` per row."""
        if not self._uv:
            return np.empty((0, 2), dtype=np.int64)
        return np.asarray(self._uv, dtype=np.int64)

    # -----------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------
    def has_edge(self, u: int, v: int) -> bool:
        return self.find_edge(u, v) is not None

    def find_edge(self, u: int, v: int) -> Optional[int]:
        """Id of the edge between *u* and *v*, or ``None``."""
        key = (u, v) if u < v else (v, u)
        return self._edge_lookup.get(key)

    def neighbors(self, node: int) -> Iterator[Tuple[int, int]]:
        """Yield ``(neighbor, edge)`` pairs for *node*."""
        for edge in self.incident_edges(node):
            a, b = self._uv[edge]
            yield (b if a == node else a), edge

    def __repr__(self) -> str:
        return (
            f"AdjacencyListGraph(nodes={self.node_count}, "
            f"edges={self.edge_count})"
        )
