# -*- coding: utf-8 -*-
"""
Region Adjacency Graph - Contract a labeled graph into a graph of regions.

``make_region_adjacency_graph`` takes a source graph (typically a
``GridGraph`` over pixels) and a node labeling (typically a superpixel or
watershed label image) and builds an ``AdjacencyListGraph`` with one node
per distinct label, node id equal to the label value, and one edge per pair
of labels that touch. Each RAG edge remembers the source edges it
summarizes in an ``AffiliatedEdges`` index; interior source edges (both
endpoints carry the same label) are discarded.

RAG edges are created in the order their first boundary source edge is
encountered, so edge ids are deterministic for a given input. Pair lookup
goes through the RAG's hash of unordered node pairs, keeping construction
linear in the number of source edges.

The projection helpers map per-region results (cluster ids, region means)
back onto the source graph, i.e. onto pixels.

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
import logging
from typing import Iterator, Mapping, Tuple, Union

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import InvalidLabeling, ValidationError
from hiseg.graph.adjacency import AdjacencyListGraph
from hiseg.graph.base import Graph, check_graph
from hiseg.graph.grid import GridGraph
from hiseg.graph.property_map import PropertyMap, SparsePropertyMap

logger = logging.getLogger(__name__)

LabelMap = Union[np.ndarray, PropertyMap, SparsePropertyMap, Mapping[int, int]]


class AffiliatedEdges:
    """Mapping from RAG edge id to the source edge ids it summarizes.

    Stored in compressed form: ``source_edges[offsets[e]:offsets[e + 1]]``
    are the source edges of RAG edge ``e``, in ascending order.

    Parameters
    ----------
    offsets : np.ndarray
        int64 array of length ``n_rag_edges + 1``, non-decreasing, starting
        at 0.
    source_edges : np.ndarray
        int64 array of length ``offsets[-1]``.

    Raises
    ------
    ValidationError
        If *offsets* do not run from 0 to ``len(source_edges)``, or a RAG
        edge has no source edge.
    """

    def __init__(self, offsets: np.ndarray, source_edges: np.ndarray) -> None:
        self._offsets = np.asarray(offsets, dtype=np.int64).reshape(-1)
        self._source_edges = np.asarray(source_edges, dtype=np.int64).reshape(-1)
        if self._offsets.shape[0] == 0 or self._offsets[0] != 0 \
                or self._offsets[-1] != self._source_edges.shape[0]:
            raise ValidationError(
                f"offsets must run from 0 to {self._source_edges.shape[0]}, "
                f"got {self._offsets.tolist()}"
            )
        empty = np.flatnonzero(np.diff(self._offsets) <= 0)
        if empty.size:
            raise ValidationError(
                f"every RAG edge needs at least one source edge; edge "
                f"{int(empty[0])} has none"
            )
        self._offsets.setflags(write=False)
        self._source_edges.setflags(write=False)

    @classmethod
    def from_assignment(
        cls,
        rag_edges: np.ndarray,
        source_edges: np.ndarray,
        n_rag_edges: int,
    ) -> 'AffiliatedEdges':
        """Group *source_edges* by their assigned RAG edge.

        Parameters
        ----------
        rag_edges : np.ndarray
            RAG edge id for each entry of *source_edges*.
        source_edges : np.ndarray
            Source edge ids, ascending.
        n_rag_edges : int
            Number of RAG edges.
        """
        rag_edges = np.asarray(rag_edges, dtype=np.int64)
        order = np.argsort(rag_edges, kind='stable')
        counts = np.bincount(rag_edges, minlength=n_rag_edges)
        offsets = np.concatenate([[0], np.cumsum(counts)])
        return cls(offsets, np.asarray(source_edges, dtype=np.int64)[order])

    @property
    def offsets(self) -> np.ndarray:
        return self._offsets

    @property
    def source_edges(self) -> np.ndarray:
        """All affiliated source edges, grouped by RAG edge."""
        return self._source_edges

    def lengths(self) -> np.ndarray:
        """Number of affiliated source edges per RAG edge."""
        return np.diff(self._offsets)

    def get(self, edge: int) -> np.ndarray:
        if not 0 <= edge < len(self):
            raise IndexError(f"RAG edge {edge} out of range [0, {len(self)})")
        return self._source_edges[self._offsets[edge]:self._offsets[edge + 1]]

    def __getitem__(self, edge: int) -> np.ndarray:
        return self.get(edge)

    def __len__(self) -> int:
        return self._offsets.shape[0] - 1

    def __iter__(self) -> Iterator[np.ndarray]:
        for edge in range(len(self)):
            yield self.get(edge)

    def __repr__(self) -> str:
        return (
            f"AffiliatedEdges(rag_edges={len(self)}, "
            f"source_edges={self._source_edges.shape[0]})"
        )


def _as_integral(values: np.ndarray, name: str) -> np.ndarray:
    """Convert a label array to int64, rejecting fractional or negative ids."""
    if values.dtype.kind in 'iub':
        out = values.astype(np.int64)
    elif values.dtype.kind == 'f':
        if not np.all(np.isfinite(values)) or \
                not np.array_equal(values, np.round(values)):
            raise InvalidLabeling(f"{name} must hold integral label values")
        out = values.astype(np.int64)
    else:
        raise InvalidLabeling(
            f"{name} must be an integer array, got dtype {values.dtype}"
        )
    if out.size and out.min() < 0:
        raise InvalidLabeling(
            f"{name} must be non-negative, found label {int(out.min())}"
        )
    return out


def validate_labels(graph: Graph, labels: LabelMap) -> np.ndarray:
    """Normalize a node labeling of *graph* to a dense int64 array.

    Parameters
    ----------
    graph : Graph
        The labeled graph.
    labels : array-like, PropertyMap, SparsePropertyMap or Mapping
        Label per node. Dense inputs are indexed by node id; a
        ``GridGraph`` also accepts an array of the grid's shape. Sparse
        inputs map node id to label and must cover every node.

    Returns
    -------
    np.ndarray
        int64 array of length ``graph.max_node_id + 1``. Entries for ids
        that are not nodes of a sparse-id graph are -1.

    Raises
    ------
    InvalidLabeling
        If labels are negative or non-integral, refer to nodes that are not
        in *graph*, or leave nodes unlabeled.
    """
    size = graph.max_node_id + 1

    if isinstance(labels, (SparsePropertyMap, Mapping)):
        dense = np.full(size, -1, dtype=np.int64)
        for node, label in labels.items():
            if not graph.has_node(node):
                raise InvalidLabeling(
                    f"labels reference node {node}, which is not in the graph"
                )
            dense[node] = int(label)
            if dense[node] < 0 or dense[node] != label:
                raise InvalidLabeling(
                    f"label of node {node} must be a non-negative integer, "
                    f"got {label!r}"
                )
        if len(labels) != graph.node_count:
            raise InvalidLabeling(
                f"labels cover {len(labels)} nodes, graph has "
                f"{graph.node_count}"
            )
        return dense

    array = np.asarray(labels.values if isinstance(labels, PropertyMap)
                       else labels)
    if isinstance(graph, GridGraph) and array.ndim > 1 \
            and array.shape != graph.shape:
        raise InvalidLabeling(
            f"label image shape {array.shape} does not match grid shape "
            f"{graph.shape}"
        )
    if array.size > size:
        raise InvalidLabeling(
            f"labels have {array.size} entries but the graph only has node "
            f"ids up to {graph.max_node_id}"
        )
    if array.size < size:
        raise InvalidLabeling(
            f"labels have {array.size} entries, {size} are needed to cover "
            f"every node"
        )
    flat = array.reshape(-1)
    if graph.node_count == size:
        return _as_integral(flat, 'labels')
    # Sparse node ids: only entries of existing nodes are meaningful.
    node_ids = np.fromiter(graph.nodes(), dtype=np.int64, count=graph.node_count)
    dense = np.full(size, -1, dtype=np.int64)
    dense[node_ids] = _as_integral(flat[node_ids], 'labels')
    return dense


def make_region_adjacency_graph(
    source_graph: Graph,
    labels: LabelMap,
) -> Tuple[AdjacencyListGraph, AffiliatedEdges]:
    """Build the region adjacency graph of a labeled graph.

    Parameters
    ----------
    source_graph : Graph
        Fine graph, e.g. ``GridGraph(image.shape[:2])``.
    labels : array-like, PropertyMap, SparsePropertyMap or Mapping
        Region label per source node (see ``validate_labels``).

    Returns
    -------
    rag : AdjacencyListGraph
        One node per distinct label (node id == label value, ascending
        insertion order); one edge per pair of adjacent labels.
    affiliated_edges : AffiliatedEdges
        For each RAG edge, the ascending source edge ids on the shared
        boundary. Never empty.

    Raises
    ------
    InvalidLabeling
        See ``validate_labels``.

    Examples
    --------
    >>> labels = np.array([[0, 0, 1],
    ...                    [2, 2, 1]])
    >>> rag, affiliated = make_region_adjacency_graph(GridGraph(labels.shape),
    ...                                               labels)
    >>> sorted(rag.nodes()), rag.edge_count
    ([0, 1, 2], 3)
    """
    check_graph(source_graph, 'source_graph')
    dense = validate_labels(source_graph, labels)

    present = dense[dense >= 0]
    rag = AdjacencyListGraph(nodes=np.unique(present).tolist())

    uv = source_graph.uv_ids()
    label_u = dense[uv[:, 0]]
    label_v = dense[uv[:, 1]]
    boundary = np.flatnonzero(label_u != label_v)

    assignment = np.empty(boundary.shape[0], dtype=np.int64)
    pairs = zip(label_u[boundary].tolist(), label_v[boundary].tolist())
    for i, (a, b) in enumerate(pairs):
        assignment[i] = rag.add_edge(a, b)

    affiliated = AffiliatedEdges.from_assignment(
        assignment, boundary, rag.edge_count,
    )
    logger.debug(
        "RAG: %d regions, %d adjacencies from %d of %d source edges",
        rag.node_count, rag.edge_count, boundary.shape[0], uv.shape[0],
    )
    return rag, affiliated


def project_labels_to_base_graph(
    labels: np.ndarray,
    cluster_labels: Union[PropertyMap, np.ndarray],
) -> np.ndarray:
    """Replace every pixel label by the cluster id of its region.

    Parameters
    ----------
    labels : np.ndarray
        Superpixel label image (any shape).
    cluster_labels : PropertyMap or np.ndarray
        Cluster id per RAG node, indexed by label value.

    Returns
    -------
    np.ndarray
        int64 array of the same shape as *labels*.

    Raises
    ------
    InvalidLabeling
        If *labels* is malformed or holds labels beyond *cluster_labels*.
    """
    return project_node_features_to_base_graph(
        labels, cluster_labels,
    ).astype(np.int64)


def project_node_features_to_base_graph(
    labels: np.ndarray,
    node_values: Union[PropertyMap, np.ndarray],
) -> np.ndarray:
    """Paint per-region values back onto the pixels of each region.

    Parameters
    ----------
    labels : np.ndarray
        Superpixel label image of shape ``S``.
    node_values : PropertyMap or np.ndarray
        Values indexed by label, shape ``(max_label + 1, *value_shape)``.

    Returns
    -------
    np.ndarray
        Array of shape ``S + value_shape``.
    """
    label_array = _as_integral(np.asarray(labels), 'labels')
    values = np.asarray(node_values.values if isinstance(node_values, PropertyMap)
                        else node_values)
    if label_array.size and label_array.max() >= values.shape[0]:
        raise InvalidLabeling(
            f"label {int(label_array.max())} has no entry in a node map of "
            f"size {values.shape[0]}"
        )
    return values[label_array]

