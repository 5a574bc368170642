# -*- coding: utf-8 -*-
"""
Graph Capability Interface - Structural protocol shared by all graph backends.

Defines ``Graph``, the minimal set of operations the RAG builder, the
feature aggregator and the agglomerative clusterer rely on. Backends do not
inherit from it; any object that provides these members is a graph. This
keeps ``GridGraph`` (implicit pixel lattice) and ``AdjacencyListGraph``
(explicit region graph) interchangeable without a shared class hierarchy.

Nodes and edges are plain non-negative integers. Edge ids are dense
(``0 .. max_edge_id``); node ids may be sparse, which is how a region
adjacency graph keeps the label values of its superpixels.

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
from typing import Iterator, Protocol, runtime_checkable

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import ValidationError


@runtime_checkable
class Graph(Protocol):
    """Structural interface for undirected graphs over integer ids.

    ``nodes()``, ``edges()`` and ``incident_edges()`` return fresh
    iterators on every call, so enumerations are restartable.
    """

    @property
    def node_count(self) -> int:
        ...

    @property
    def edge_count(self) -> int:
        ...

    @property
    def max_node_id(self) -> int:
        ...

    @property
    def max_edge_id(self) -> int:
        ...

    def nodes(self) -> Iterator[int]:
        ...

    def edges(self) -> Iterator[int]:
        ...

    def incident_edges(self, node: int) -> Iterator[int]:
        ...

    def u(self, edge: int) -> int:
        ...

    def v(self, edge: int) -> int:
        ...

    def has_node(self, node: int) -> bool:
        ...

    def uv_ids(self) -> np.ndarray:
        ...


def check_graph(graph: object, name: str = 'graph') -> Graph:
    """Ensure *graph* satisfies the ``Graph`` capability interface.

    Parameters
    ----------
    graph : object
        Candidate graph object.
    name : str
        Argument name used in the error message.

    Returns
    -------
    Graph
        The same object, for chaining.

    Raises
    ------
    ValidationError
        If *graph* is missing any of the required members.
    """
    if not isinstance(graph, Graph):
        raise ValidationError(
            f"{name} must provide the Graph interface (nodes, edges, "
            f"incident_edges, u, v, ...), got {type(graph).__name__}"
        )
    return graph
