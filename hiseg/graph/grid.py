# -*- coding: utf-8 -*-
"""
Grid Graph - Implicit pixel-lattice graph with direct or indirect neighborhood.

``GridGraph`` exposes an N-dimensional pixel lattice through the ``Graph``
capability interface. Node ids are the C-order (row-major) flat indices of
the pixels, so a label image can be read as a node map with
``labels.ravel()``. Edges connect each pixel to its forward neighbors:

- ``'direct'``: one step along a single axis (4-neighborhood in 2D).
- ``'indirect'``: any step in ``{-1, 0, 1}^ndim`` (8-neighborhood in 2D).

Edge ids are dense and ordered node-major: all edges whose ``u`` endpoint is
pixel 0 come first, in offset order, then pixel 1, and so on. ``u(e)`` is
always the smaller flat index of the pair. The edge endpoint table and the
incidence index are computed lazily on first use with vectorized numpy.

Dependencies
------------
numpy

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
import itertools
import logging
from typing import Iterator, Optional, Sequence, Tuple, Union

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import ValidationError
from hiseg.vocabulary import Neighborhood

logger = logging.getLogger(__name__)


def _forward_offsets(ndim: int, neighborhood: Neighborhood) -> np.ndarray:
    """Offsets to the forward half of a pixel's neighborhood.

    Returns
    -------
    np.ndarray
        Integer array of shape ``(n_offsets, ndim)``. An offset is forward
        when its first non-zero component is positive, which makes every
        undirected pixel pair appear exactly once.
    """
    if neighborhood is Neighborhood.DIRECT:
        return np.eye(ndim, dtype=np.int64)[::-1]
    offsets = []
    for step in itertools.product((-1, 0, 1), repeat=ndim):
        nonzero = [s for s in step if s != 0]
        if nonzero and nonzero[0] > 0:
            offsets.append(step)
    # product() is lexicographic, so offsets ascend by flat-index jump.
    return np.asarray(offsets, dtype=np.int64)


class GridGraph:
    """Regular grid graph over an N-dimensional pixel lattice.

    Parameters
    ----------
    shape : Sequence[int]
        Lattice shape, e.g. ``(rows, cols)``. Every extent must be >= 1.
    neighborhood : str or Neighborhood
        ``'direct'`` (default) or ``'indirect'``.

    Raises
    ------
    ValidationError
        If *shape* is empty or has non-positive extents, or if
        *neighborhood* is not recognized.

    Examples
    --------
    >>> g = GridGraph((2, 2))
    >>> g.node_count, g.edge_count
    (4, 4)
    >>> [(g.u(e), g.v(e)) for e in g.edges()]
    [(0, 1), (0, 2), (1, 3), (2, 3)]
    """

    def __init__(
        self,
        shape: Sequence[int],
        neighborhood: Union[str, Neighborhood] = Neighborhood.DIRECT,
    ) -> None:
        shape = tuple(int(s) for s in shape)
        if not shape:
            raise ValidationError("shape must have at least one dimension")
        if any(s < 1 for s in shape):
            raise ValidationError(f"shape extents must be >= 1, got {shape}")
        try:
            self._neighborhood = Neighborhood(neighborhood)
        except ValueError:
            raise ValidationError(
                f"neighborhood must be one of "
                f"{[n.value for n in Neighborhood]}, got {neighborhood!r}"
            ) from None
        self._shape = shape
        self._node_count = int(np.prod(shape))
        self._offsets = _forward_offsets(len(shape), self._neighborhood)
        self._uv: Optional[np.ndarray] = None
        self._incidence: Optional[Tuple[np.ndarray, np.ndarray]] = None

    # -----------------------------------------------------------------
    # Lattice geometry
    # -----------------------------------------------------------------
    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def neighborhood(self) -> Neighborhood:
        return self._neighborhood

    def coordinate(self, node: int) -> Tuple[int, ...]:
        """Pixel coordinate of *node*."""
        self._check_node(node)
        return tuple(int(c) for c in np.unravel_index(node, self._shape))

    def node_id(self, coordinate: Sequence[int]) -> int:
        """Node id of the pixel at *coordinate*."""
        try:
            return int(np.ravel_multi_index(tuple(coordinate), self._shape))
        except ValueError:
            raise ValidationError(
                f"coordinate {tuple(coordinate)} is outside grid shape "
                f"{self._shape}"
            ) from None

    # -----------------------------------------------------------------
    # Graph capability interface
    # -----------------------------------------------------------------
    @property
    def node_count(self) -> int:
        return self._node_count

    @property
    def edge_count(self) -> int:
        return int(self._edge_table().shape[0])

    @property
    def max_node_id(self) -> int:
        return self._node_count - 1

    @property
    def max_edge_id(self) -> int:
        return self.edge_count - 1

    def nodes(self) -> Iterator[int]:
        return iter(range(self._node_count))

    def edges(self) -> Iterator[int]:
        return iter(range(self.edge_count))

    def has_node(self, node: int) -> bool:
        return 0 <= node < self._node_count

    def u(self, edge: int) -> int:
        return int(self._edge_table()[edge, 0])

    def v(self, edge: int) -> int:
        return int(self._edge_table()[edge, 1])

    def uv_ids(self) -> np.ndarray:
        """Endpoint table of shape ``(edge_count, 2)``, ``u < v`` per row."""
        return self._edge_table()

    def incident_edges(self, node: int) -> Iterator[int]:
        """Edge ids touching *node*, in ascending order."""
        self._check_node(node)
        starts, edge_ids = self._incidence_index()
        return iter(edge_ids[starts[node]:starts[node + 1]].tolist())

    def __repr__(self) -> str:
        return (
            f"GridGraph(shape={self._shape}, "
            f"neighborhood={self._neighborhood.value!r})"
        )

    # -----------------------------------------------------------------
    # Lazy topology
    # -----------------------------------------------------------------
    def _check_node(self, node: int) -> None:
        if not self.has_node(node):
            raise ValidationError(
                f"node {node} is outside [0, {self._node_count})"
            )

    def _edge_table(self) -> np.ndarray:
        if self._uv is None:
            self._uv = self._build_edge_table()
        return self._uv

    def _build_edge_table(self) -> np.ndarray:
        shape = np.asarray(self._shape, dtype=np.int64)
        coords = np.indices(self._shape).reshape(self.ndim, -1)
        flat = np.arange(self._node_count, dtype=np.int64)

        us, vs, offset_index = [], [], []
        for k, offset in enumerate(self._offsets):
            target = coords + offset[:, None]
            valid = np.all((target >= 0) & (target < shape[:, None]), axis=0)
            us.append(flat[valid])
            vs.append(np.ravel_multi_index(tuple(target[:, valid]), self._shape))
            offset_index.append(np.full(int(valid.sum()), k, dtype=np.int64))

        if not us:
            return np.empty((0, 2), dtype=np.int64)
        u = np.concatenate(us)
        v = np.concatenate(vs).astype(np.int64)
        k = np.concatenate(offset_index)
        order = np.lexsort((k, u))
        table = np.stack([u[order], v[order]], axis=1)
        logger.debug(
            "GridGraph %s: built %d edges (%s neighborhood)",
            self._shape, table.shape[0], self._neighborhood.value,
        )
        return table

    def _incidence_index(self) -> Tuple[np.ndarray, np.ndarray]:
        if self._incidence is None:
            uv = self._edge_table()
            n_edges = uv.shape[0]
            endpoints = np.concatenate([uv[:, 0], uv[:, 1]])
            edge_ids = np.concatenate([np.arange(n_edges)] * 2)
            order = np.lexsort((edge_ids, endpoints))
            counts = np.bincount(endpoints, minlength=self._node_count)
            starts = np.concatenate([[0], np.cumsum(counts)])
            self._incidence = (starts, edge_ids[order])
        return self._incidence
