# -*- coding: utf-8 -*-
"""
Agglomerative Clustering - Greedy edge contraction on a region adjacency graph.

Repeatedly contracts the live edge of lowest dissimilarity

    d(e) = (1 - beta) * w(e)
           + beta * metric(f(a), f(b)) * (|a||b| / (|a| + |b|)) ** wardness

where ``w`` is the (length-weighted) boundary weight, ``f`` the mean node
feature and ``|a|`` the region size, until ``min_region_count`` regions
remain, the queue runs dry, or the cheapest merge exceeds
``max_merge_weight``.

Contraction merges the two regions' ``{count, mean}`` statistics, folds
parallel edges to a common neighbor into the lower edge id (lengths add,
weights combine length-weighted), and re-queues every edge of the merged
region. The queue uses lazy deletion: each edge carries a stamp that is
bumped whenever its priority changes or it dies, and popped entries with an
outdated stamp are dropped. Equal dissimilarities are resolved by the
lowest edge id, so the merge order and the final labeling are
deterministic.

Regions are tracked with a union-find whose representative is the smallest
original node id of each class; these representatives are the cluster ids.

The algorithm is inherently sequential and runs single-threaded.

Attribution
-----------
Size weighting follows Ward's minimum variance criterion: J. H. Ward,
"Hierarchical Grouping to Optimize an Objective Function", Journal of the
American Statistical Association, 58(301):236-244, 1963.

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
import heapq
import logging
import math
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import EmptyGraph, ProcessorError, ValidationError
from hiseg.graph.base import Graph, check_graph
from hiseg.graph.property_map import PropertyMap, as_dense_array
from hiseg.segmentation.features import merge_means
from hiseg.segmentation.options import ClusteringOptions

logger = logging.getLogger(__name__)


class _UnionFind:
    """Weighted union-find (disjoint set) with path compression.

    Besides the tree root, every class keeps its smallest member id as the
    public representative, independent of which root union-by-rank picks.
    """

    def __init__(self, n: int) -> None:
        self.parent = np.arange(n, dtype=np.int64)
        self.rank = np.zeros(n, dtype=np.int64)
        self.representative = np.arange(n, dtype=np.int64)

    def find(self, x: int) -> int:
        """Find root with path compression."""
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[x] != root:
            next_x = self.parent[x]
            self.parent[x] = root
            x = next_x
        return int(root)

    def union(self, a: int, b: int) -> int:
        """Merge the sets containing *a* and *b*. Returns the new root."""
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return ra
        # Union by rank
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        self.representative[ra] = min(
            self.representative[ra], self.representative[rb],
        )
        return ra

    def label(self, x: int) -> int:
        return int(self.representative[self.find(x)])


class MergeEvent(NamedTuple):
    """One contraction, in the order it happened."""

    representative: int
    absorbed: int
    edge: int
    dissimilarity: float


class HierarchicalClustering:
    """Stateful agglomerative clustering of a graph.

    Inputs are copied on construction; the caller's maps are never
    modified.

    Parameters
    ----------
    graph : Graph
        Graph to cluster, usually a region adjacency graph.
    edge_weight : PropertyMap, SparsePropertyMap, Mapping or array-like
        Boundary weight per edge id.
    edge_length : optional
        Boundary length per edge id. Defaults to 1 for every edge.
    node_feature : optional
        Feature per node id, scalar or vector. Defaults to no features
        (the node term is then zero).
    node_size : optional
        Region size per node id. Defaults to 1 for every node. Regions of
        size zero never merge.
    options : ClusteringOptions or Mapping, optional
        Clustering configuration. Defaults to ``ClusteringOptions()``.

    Raises
    ------
    EmptyGraph
        If *graph* has no nodes.
    InvalidOptions
        If *options* is a mapping with invalid values.
    DimensionMismatch
        If a map does not cover every node or edge id.
    ValidationError
        If an edge weight or length is NaN, or a length or size is
        negative.

    Examples
    --------
    >>> hc = HierarchicalClustering(rag, weights, lengths, means, counts,
    ...                             ClusteringOptions(min_region_count=10))
    >>> labels = hc.cluster().result_labels()
    >>> hc.region_count
    10
    """

    def __init__(
        self,
        graph: Graph,
        edge_weight: Any,
        edge_length: Any = None,
        node_feature: Any = None,
        node_size: Any = None,
        options: Any = None,
    ) -> None:
        check_graph(graph)
        if graph.node_count == 0:
            raise EmptyGraph("cannot cluster a graph without nodes")
        self._options = ClusteringOptions.coerce(options)
        self._graph = graph

        n_nodes = graph.max_node_id + 1
        n_edges = graph.max_edge_id + 1

        self._weights = as_dense_array(edge_weight, n_edges, 'edge_weight')
        if self._weights.ndim != 1:
            raise ValidationError("edge_weight must hold one scalar per edge")
        if np.isnan(self._weights).any():
            raise ValidationError("edge_weight contains NaN")

        if edge_length is None:
            self._lengths = np.ones(n_edges, dtype=np.float64)
        else:
            self._lengths = as_dense_array(edge_length, n_edges, 'edge_length')
            if self._lengths.ndim != 1 or not (self._lengths >= 0).all():
                raise ValidationError(
                    "edge_length must be one non-negative scalar per edge"
                )

        if node_feature is None:
            self._features = np.zeros((n_nodes, 0), dtype=np.float64)
        else:
            features = as_dense_array(node_feature, n_nodes, 'node_feature')
            self._features = features.reshape(n_nodes, -1)

        if node_size is None:
            self._sizes = np.ones(n_nodes, dtype=np.float64)
        else:
            self._sizes = as_dense_array(node_size, n_nodes, 'node_size')
            if self._sizes.ndim != 1 or not (self._sizes >= 0).all():
                raise ValidationError(
                    "node_size must be one non-negative scalar per node"
                )

        self._beta = float(self._options.node_feature_importance)
        self._wardness = float(self._options.size_importance)
        self._metric = self._options.metric_function

        self._node_ids = np.fromiter(
            graph.nodes(), dtype=np.int64, count=graph.node_count,
        )
        self._uv = graph.uv_ids()
        self._uf = _UnionFind(n_nodes)
        self._stamp = np.zeros(n_edges, dtype=np.int64)
        self._alive = np.zeros(n_edges, dtype=bool)
        self._adjacency: Dict[int, Dict[int, int]] = {
            int(node): {} for node in self._node_ids
        }
        self._heap: List[Tuple[float, int, int]] = []
        self._region_count = int(graph.node_count)
        self._history: List[MergeEvent] = []
        self._done = False

        self._init_edges()

    # -----------------------------------------------------------------
    # Public interface
    # -----------------------------------------------------------------
    @property
    def options(self) -> ClusteringOptions:
        return self._options

    @property
    def region_count(self) -> int:
        """Number of regions (union-find classes) currently alive."""
        return self._region_count

    @property
    def history(self) -> List[MergeEvent]:
        """Contractions performed so far, oldest first."""
        return list(self._history)

    def cluster(self) -> 'HierarchicalClustering':
        """Run contraction to termination. Calling again is a no-op."""
        if self._done:
            return self
        target = self._options.min_region_count
        max_weight = self._options.max_merge_weight
        logger.debug(
            "Clustering %d nodes / %d live edges to %d regions "
            "(beta=%g, wardness=%g, metric=%s)",
            self._region_count, int(self._alive.sum()), target,
            self._beta, self._wardness, self._options.metric_name,
        )

        reason = 'target region count reached'
        while self._region_count > target:
            if not self._heap:
                reason = 'queue exhausted'
                break
            dissimilarity, edge, stamp = self._heap[0]
            if stamp != self._stamp[edge] or not self._alive[edge]:
                heapq.heappop(self._heap)
                continue
            if max_weight is not None and dissimilarity > max_weight:
                reason = 'max_merge_weight exceeded'
                break
            heapq.heappop(self._heap)
            self._contract(edge, dissimilarity)

        self._heap = []
        self._done = True
        logger.debug(
            "Clustering stopped (%s) after %d merges, %d regions remain",
            reason, len(self._history), self._region_count,
        )
        return self

    def result_labels(self) -> PropertyMap:
        """Cluster id (class representative) of every node.

        Returns
        -------
        PropertyMap
            int64 node map. Ids that are not nodes of a sparse-id graph
            hold -1.
        """
        labels = PropertyMap(self._uf.parent.shape[0], np.int64, fill_value=-1)
        values = labels.values
        for node in self._node_ids.tolist():
            values[node] = self._uf.label(node)
        return labels

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------
    def _init_edges(self) -> None:
        for edge, (u, v) in enumerate(self._uv.tolist()):
            if u == v:
                continue
            existing = self._adjacency[u].get(v)
            if existing is None:
                self._adjacency[u][v] = edge
                self._adjacency[v][u] = edge
                self._alive[edge] = True
            else:
                keep = self._fold_parallel(existing, edge)
                self._adjacency[u][v] = keep
                self._adjacency[v][u] = keep
        for u, neighbors in self._adjacency.items():
            for v, edge in neighbors.items():
                if u < v:
                    self._push(edge, u, v)

    def _fold_parallel(self, e1: int, e2: int) -> int:
        """Merge two edges between the same regions; the lower id survives."""
        keep, drop = (e1, e2) if e1 < e2 else (e2, e1)
        l_keep = self._lengths[keep]
        l_drop = self._lengths[drop]
        total = l_keep + l_drop
        if total > 0:
            weight = (self._weights[keep] * l_keep
                      + self._weights[drop] * l_drop) / total
        else:
            weight = 0.5 * (self._weights[keep] + self._weights[drop])
        self._weights[keep] = weight
        self._lengths[keep] = total
        self._alive[keep] = True
        self._alive[drop] = False
        self._stamp[drop] += 1
        return keep

    def _dissimilarity(self, edge: int, a: int, b: int) -> float:
        d = (1.0 - self._beta) * self._weights[edge]
        if self._beta > 0.0:
            node_term = self._metric(self._features[a], self._features[b])
            if self._wardness > 0.0:
                sa = self._sizes[a]
                sb = self._sizes[b]
                node_term *= (sa * sb / (sa + sb)) ** self._wardness
            d += self._beta * node_term
        return float(d)

    def _push(self, edge: int, a: int, b: int) -> None:
        self._stamp[edge] += 1
        if self._sizes[a] == 0 or self._sizes[b] == 0:
            return
        d = self._dissimilarity(edge, a, b)
        if math.isnan(d):
            raise ProcessorError(
                f"dissimilarity of edge {edge} between regions {a} and {b} "
                f"is NaN"
            )
        heapq.heappush(self._heap, (d, edge, int(self._stamp[edge])))

    def _contract(self, edge: int, dissimilarity: float) -> None:
        a = self._uf.find(int(self._uv[edge, 0]))
        b = self._uf.find(int(self._uv[edge, 1]))
        rep_a = int(self._uf.representative[a])
        rep_b = int(self._uf.representative[b])

        root = self._uf.union(a, b)
        other = b if root == a else a

        merged, size = merge_means(
            self._features[a], self._sizes[a],
            self._features[b], self._sizes[b],
        )
        self._features[root] = merged
        self._sizes[root] = size

        self._alive[edge] = False
        self._stamp[edge] += 1

        root_adj = self._adjacency[root]
        other_adj = self._adjacency.pop(other)
        del root_adj[other]
        for x, e2 in other_adj.items():
            if x == root:
                continue
            x_adj = self._adjacency[x]
            del x_adj[other]
            e1 = root_adj.get(x)
            keep = e2 if e1 is None else self._fold_parallel(e1, e2)
            root_adj[x] = keep
            x_adj[root] = keep

        for x, e3 in root_adj.items():
            self._push(e3, root, x)

        self._region_count -= 1
        self._history.append(MergeEvent(
            representative=min(rep_a, rep_b),
            absorbed=max(rep_a, rep_b),
            edge=int(edge),
            dissimilarity=dissimilarity,
        ))


def hierarchical_clustering(
    graph: Graph,
    edge_weight: Any,
    edge_length: Any = None,
    node_feature: Any = None,
    node_size: Any = None,
    options: Optional[Any] = None,
    **option_overrides: Any,
) -> PropertyMap:
    """Cluster *graph* and return the cluster id of every node.

    Parameters
    ----------
    graph, edge_weight, edge_length, node_feature, node_size, options
        See ``HierarchicalClustering``.
    **option_overrides
        Individual ``ClusteringOptions`` fields, applied on top of
        *options* (e.g. ``min_region_count=5``).

    Returns
    -------
    PropertyMap
        int64 node map; each value is the smallest original node id of the
        node's final region.

    Examples
    --------
    >>> rag, affiliated = make_region_adjacency_graph(grid, superpixels)
    >>> weights, lengths = aggregate_edges(rag, affiliated, grid,
    ...                                    interpolate_edge_weights(grid, grad))
    >>> means, counts = aggregate_nodes(superpixels, lab_image)
    >>> clusters = hierarchical_clustering(rag, weights, lengths, means,
    ...                                    counts, min_region_count=20)
    """
    resolved = ClusteringOptions.coerce(options)
    if option_overrides:
        resolved = resolved.with_changes(**option_overrides)
    return HierarchicalClustering(
        graph, edge_weight, edge_length, node_feature, node_size, resolved,
    ).cluster().result_labels()
