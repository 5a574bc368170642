# -*- coding: utf-8 -*-
"""
Graph - Integer-id graph backends and property maps.

Two backends implement the ``Graph`` capability interface:

- ``GridGraph``: implicit direct/indirect neighborhood over a pixel lattice.
- ``AdjacencyListGraph``: explicit simple graph, used for region adjacency.

``PropertyMap`` (dense) and ``SparsePropertyMap`` carry per-node and
per-edge data; ``node_map`` / ``edge_map`` size a dense map from a graph.

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

from hiseg.graph.base import Graph, check_graph
from hiseg.graph.grid import GridGraph
from hiseg.graph.adjacency import AdjacencyListGraph
from hiseg.graph.property_map import (
    PropertyMap,
    SparsePropertyMap,
    as_dense_array,
    edge_map,
    node_map,
)

__all__ = [
    'Graph',
    'check_graph',
    'GridGraph',
    'AdjacencyListGraph',
    'PropertyMap',
    'SparsePropertyMap',
    'as_dense_array',
    'edge_map',
    'node_map',
]
