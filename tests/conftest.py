# -*- coding: utf-8 -*-
"""
Shared Test Fixtures - Synthetic graphs, label images and step images.

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

import numpy as np
import pytest

from hiseg.graph import AdjacencyListGraph, GridGraph


@pytest.fixture
def quad_grid():
    """2x2 direct grid. Edges: 0:(0,1) 1:(0,2) 2:(1,3) 3:(2,3)."""
    return GridGraph((2, 2))


@pytest.fixture
def stripe_labels():
    """4x6 label image of three vertical stripes, two columns each."""
    return np.repeat(np.array([[0, 0, 1, 1, 2, 2]]), 4, axis=0)


@pytest.fixture
def block_labels():
    """12x12 label image of sixteen 3x3 blocks, labels row-major 0..15."""
    blocks = np.arange(16).reshape(4, 4)
    return np.kron(blocks, np.ones((3, 3), dtype=np.int64)).astype(np.int64)


@pytest.fixture
def step_image():
    """12x12 image: left half 0, right half 100."""
    image = np.zeros((12, 12))
    image[:, 6:] = 100.0
    return image


@pytest.fixture
def five_node_graph():
    """Five nodes, six edges.

    ::

        e0 (0,1) w=4    e1 (1,2) w=1    e2 (2,3) w=5
        e3 (3,4) w=2    e4 (0,4) w=3    e5 (1,3) w=6
    """
    g = AdjacencyListGraph(nodes=range(5))
    for u, v in [(0, 1), (1, 2), (2, 3), (3, 4), (0, 4), (1, 3)]:
        g.add_edge(u, v)
    weights = np.array([4.0, 1.0, 5.0, 2.0, 3.0, 6.0])
    return g, weights


@pytest.fixture
def path_graph():
    """Path 0 - 1 - 2 with edges 0:(0,1) and 1:(1,2)."""
    g = AdjacencyListGraph(nodes=range(3))
    g.add_edge(0, 1)
    g.add_edge(1, 2)
    return g
