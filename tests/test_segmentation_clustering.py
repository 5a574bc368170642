# -*- coding: utf-8 -*-
"""
Agglomerative Clustering Tests - Merge order, tie-breaking, stopping
criteria, parallel edge folding and input validation.

Dependencies
------------
pytest

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

from hiseg.exceptions import (
    DimensionMismatch,
    EmptyGraph,
    InvalidOptions,
    ProcessorError,
    ValidationError,
)
from hiseg.graph import AdjacencyListGraph, GridGraph, PropertyMap
from hiseg.segmentation.clustering import (
    HierarchicalClustering,
    MergeEvent,
    hierarchical_clustering,
)
from hiseg.segmentation.features import (
    aggregate_edges,
    aggregate_nodes,
    interpolate_edge_weights,
)
from hiseg.segmentation.options import ClusteringOptions
from hiseg.segmentation.rag import make_region_adjacency_graph


class _EdgeListGraph:
    """Minimal multigraph: parallel edges allowed, used to feed the
    clusterer inputs an AdjacencyListGraph cannot represent."""

    def __init__(self, n_nodes, pairs):
        self._n = n_nodes
        self._uv = np.asarray(pairs, dtype=np.int64)

    @property
    def node_count(self):
        return self._n

    @property
    def edge_count(self):
        return self._uv.shape[0]

    @property
    def max_node_id(self):
        return self._n - 1

    @property
    def max_edge_id(self):
        return self._uv.shape[0] - 1

    def nodes(self):
        return iter(range(self._n))

    def edges(self):
        return iter(range(self.edge_count))

    def incident_edges(self, node):
        return iter([e for e in self.edges() if node in self._uv[e]])

    def u(self, edge):
        return int(self._uv[edge, 0])

    def v(self, edge):
        return int(self._uv[edge, 1])

    def has_node(self, node):
        return 0 <= node < self._n

    def uv_ids(self):
        return self._uv


def _cluster(graph, weights, **kwargs):
    options = {k: kwargs.pop(k) for k in list(kwargs)
               if k in ('min_region_count', 'node_feature_importance',
                        'size_importance', 'node_feature_metric',
                        'max_merge_weight')}
    return HierarchicalClustering(graph, weights, options=options,
                                  **kwargs).cluster()


# ---------------------------------------------------------------------------
# Merge order
# ---------------------------------------------------------------------------

class TestMergeOrder:
    """Edges contract in ascending dissimilarity."""

    def test_quad_grid_full_contraction(self, quad_grid):
        hc = _cluster(quad_grid, np.array([1.0, 2.0, 3.0, 4.0]))
        assert [m.edge for m in hc.history] == [0, 1, 2]
        # Edges 2 and 3 become parallel after the second merge and are
        # folded into edge 2 with the mean weight 3.5.
        assert [m.dissimilarity for m in hc.history] == [1.0, 2.0, 3.5]
        assert hc.region_count == 1
        np.testing.assert_array_equal(hc.result_labels().values, [0, 0, 0, 0])

    def test_five_node_graph(self, five_node_graph):
        graph, weights = five_node_graph
        hc = _cluster(graph, weights)
        assert [m.edge for m in hc.history] == [1, 3, 4, 0]
        # Edge 0 absorbs edges 5 and 2: (4*1 + 5.5*2) / 3
        np.testing.assert_allclose(
            [m.dissimilarity for m in hc.history], [1.0, 2.0, 3.0, 5.0],
        )
        assert hc.history[2] == MergeEvent(representative=0, absorbed=3,
                                           edge=4, dissimilarity=3.0)

    @pytest.mark.parametrize('target, expected', [
        (5, [0, 1, 2, 3, 4]),
        (4, [0, 1, 1, 3, 4]),
        (3, [0, 1, 1, 3, 3]),
        (2, [0, 1, 1, 0, 0]),
        (1, [0, 0, 0, 0, 0]),
    ])
    def test_five_node_graph_targets(self, five_node_graph, target, expected):
        graph, weights = five_node_graph
        labels = hierarchical_clustering(graph, weights,
                                         min_region_count=target)
        np.testing.assert_array_equal(labels.values, expected)

    def test_dissimilarities_non_decreasing_for_edge_weights(self, block_labels):
        rng = np.random.RandomState(3)
        grid = GridGraph(block_labels.shape)
        rag, affiliated = make_region_adjacency_graph(grid, block_labels)
        weights, lengths = aggregate_edges(
            rag, affiliated, grid, rng.rand(grid.edge_count),
        )
        hc = HierarchicalClustering(rag, weights, lengths).cluster()
        d = [m.dissimilarity for m in hc.history]
        assert len(d) == 15
        # Length-weighted means of two values lie between them.
        assert all(b >= a - 1e-12 for a, b in zip(d, d[1:]))


class TestTieBreak:
    """Equal dissimilarities resolve to the lowest edge id."""

    def test_all_equal(self, quad_grid):
        hc = _cluster(quad_grid, np.ones(4), min_region_count=3)
        assert hc.history[0].edge == 0
        np.testing.assert_array_equal(hc.result_labels().values, [0, 0, 2, 3])

    def test_tie_between_middle_edges(self, quad_grid):
        hc = _cluster(quad_grid, np.array([5.0, 1.0, 1.0, 5.0]),
                      min_region_count=3)
        assert hc.history[0].edge == 1
        np.testing.assert_array_equal(hc.result_labels().values, [0, 1, 0, 3])


# ---------------------------------------------------------------------------
# Dissimilarity terms
# ---------------------------------------------------------------------------

class TestNodeFeatureTerm:
    """node_feature_importance, size_importance and metrics."""

    def test_feature_distance_drives_merges(self, path_graph):
        hc = _cluster(path_graph, np.zeros(2),
                      node_feature=np.array([0.0, 1.0, 10.0]),
                      node_feature_importance=1.0)
        assert [m.edge for m in hc.history] == [0, 1]
        # Second merge compares the merged mean 0.5 with 10.
        np.testing.assert_allclose(
            [m.dissimilarity for m in hc.history], [1.0, 9.5],
        )

    def test_mixed_dissimilarity(self, path_graph):
        hc = HierarchicalClustering(
            path_graph, np.array([2.0, 0.0]),
            node_feature=np.array([0.0, 1.0, 5.0]),
            options=ClusteringOptions(node_feature_importance=0.25,
                                      min_region_count=2),
        ).cluster()
        # e0: 0.75*2 + 0.25*1 = 1.75, e1: 0.75*0 + 0.25*4 = 1.0
        assert hc.history[0].edge == 1
        assert hc.history[0].dissimilarity == pytest.approx(1.0)

    @pytest.mark.parametrize('wardness, expected', [
        (0.0, [0, 0, 2]),
        (1.0, [0, 1, 1]),
    ])
    def test_size_importance(self, path_graph, wardness, expected):
        labels = hierarchical_clustering(
            path_graph, np.zeros(2),
            node_feature=np.array([0.0, 1.0, 2.0]),
            node_size=np.array([10.0, 1.0, 1.0]),
            node_feature_importance=1.0,
            size_importance=wardness,
            min_region_count=2,
        )
        np.testing.assert_array_equal(labels.values, expected)

    def test_vector_features_and_metric(self, path_graph):
        features = np.array([[1.0, 0.0], [0.9, 0.1], [0.0, 1.0]])
        hc = _cluster(path_graph, np.zeros(2), node_feature=features,
                      node_feature_importance=1.0,
                      node_feature_metric='chi_squared',
                      min_region_count=2)
        assert hc.history[0].edge == 0

    def test_custom_metric(self, path_graph):
        calls = []

        def metric(a, b):
            calls.append((a.copy(), b.copy()))
            return float(abs(a[0] - b[0]))

        labels = hierarchical_clustering(
            path_graph, np.zeros(2),
            node_feature=np.array([0.0, 3.0, 4.0]),
            node_feature_importance=1.0,
            node_feature_metric=metric,
            min_region_count=2,
        )
        assert calls
        np.testing.assert_array_equal(labels.values, [0, 1, 1])

    def test_nan_metric_raises(self, path_graph):
        with pytest.raises(ProcessorError, match="NaN"):
            HierarchicalClustering(
                path_graph, np.zeros(2), node_feature=np.zeros(3),
                options={'node_feature_importance': 1.0,
                         'node_feature_metric': lambda a, b: float('nan')},
            )


# ---------------------------------------------------------------------------
# Stopping and edge cases
# ---------------------------------------------------------------------------

class TestStopping:
    """Termination criteria."""

    def test_max_merge_weight(self, five_node_graph):
        graph, weights = five_node_graph
        hc = _cluster(graph, weights, max_merge_weight=2.5)
        assert hc.region_count == 3
        np.testing.assert_array_equal(hc.result_labels().values,
                                      [0, 1, 1, 3, 3])

    def test_target_above_node_count(self, five_node_graph):
        graph, weights = five_node_graph
        hc = _cluster(graph, weights, min_region_count=50)
        assert hc.history == []
        np.testing.assert_array_equal(hc.result_labels().values,
                                      [0, 1, 2, 3, 4])

    def test_disconnected_components_stop_early(self):
        g = AdjacencyListGraph(nodes=range(4))
        g.add_edge(0, 1)
        g.add_edge(2, 3)
        hc = _cluster(g, np.array([1.0, 1.0]))
        assert hc.region_count == 2
        np.testing.assert_array_equal(hc.result_labels().values, [0, 0, 2, 2])

    def test_single_node(self):
        hc = _cluster(AdjacencyListGraph(nodes=[3]), np.zeros(0))
        assert hc.region_count == 1
        np.testing.assert_array_equal(hc.result_labels().values,
                                      [-1, -1, -1, 3])

    def test_zero_size_regions_never_merge(self, path_graph):
        hc = _cluster(path_graph, np.array([1.0, 2.0]),
                      node_size=np.array([1.0, 0.0, 1.0]))
        assert hc.history == []
        assert hc.region_count == 3

    def test_cluster_is_idempotent(self, five_node_graph):
        graph, weights = five_node_graph
        hc = _cluster(graph, weights, min_region_count=2)
        first = hc.history
        hc.cluster()
        assert hc.history == first
        assert hc.region_count == 2

    def test_region_count_tracks_history(self, block_labels):
        grid = GridGraph(block_labels.shape)
        rag, affiliated = make_region_adjacency_graph(grid, block_labels)
        weights, lengths = aggregate_edges(
            rag, affiliated, grid,
            np.random.RandomState(5).rand(grid.edge_count),
        )
        for target in (1, 4, 9, 16):
            hc = HierarchicalClustering(
                rag, weights, lengths,
                options=ClusteringOptions(min_region_count=target),
            ).cluster()
            assert hc.region_count == target
            assert len(hc.history) == 16 - target
            assert np.unique(hc.result_labels().values).size == target


# ---------------------------------------------------------------------------
# Parallel edges
# ---------------------------------------------------------------------------

class TestParallelEdges:
    """Parallel input edges are folded by length-weighted mean."""

    def test_input_parallel_edges(self):
        graph = _EdgeListGraph(3, [(0, 1), (0, 1), (1, 2)])
        hc = HierarchicalClustering(
            graph, np.array([1.0, 4.0, 2.0]),
            edge_length=np.array([1.0, 3.0, 1.0]),
        ).cluster()
        assert [m.edge for m in hc.history] == [2, 0]
        np.testing.assert_allclose(
            [m.dissimilarity for m in hc.history], [2.0, 3.25],
        )

    def test_zero_length_parallel_edges_use_plain_mean(self):
        graph = _EdgeListGraph(2, [(0, 1), (0, 1)])
        hc = HierarchicalClustering(
            graph, np.array([1.0, 3.0]), edge_length=np.zeros(2),
        ).cluster()
        assert hc.history[0].edge == 0
        assert hc.history[0].dissimilarity == pytest.approx(2.0)

    def test_self_loops_ignored(self):
        graph = _EdgeListGraph(2, [(0, 0), (0, 1)])
        hc = HierarchicalClustering(graph, np.array([0.0, 1.0])).cluster()
        assert [m.edge for m in hc.history] == [1]


# ---------------------------------------------------------------------------
# Result properties
# ---------------------------------------------------------------------------

class TestResultLabels:
    """Representatives, determinism and input ownership."""

    @pytest.fixture
    def random_problem(self, block_labels):
        rng = np.random.RandomState(11)
        image = rng.rand(*block_labels.shape, 3)
        grid = GridGraph(block_labels.shape, 'indirect')
        rag, affiliated = make_region_adjacency_graph(grid, block_labels)
        weights, lengths = aggregate_edges(
            rag, affiliated, grid,
            interpolate_edge_weights(grid, rng.rand(*block_labels.shape)),
        )
        means, counts = aggregate_nodes(block_labels, image)
        return rag, weights, lengths, means, counts

    def test_label_is_smallest_member(self, random_problem):
        labels = hierarchical_clustering(
            *random_problem, node_feature_importance=0.5,
            size_importance=1.0, min_region_count=5,
        ).values
        for cluster in np.unique(labels):
            members = np.flatnonzero(labels == cluster)
            assert cluster == members.min()

    def test_deterministic(self, random_problem):
        opts = ClusteringOptions(node_feature_importance=0.7,
                                 size_importance=0.5, min_region_count=3)
        a = HierarchicalClustering(*random_problem, options=opts).cluster()
        b = HierarchicalClustering(*random_problem, options=opts).cluster()
        assert a.history == b.history
        np.testing.assert_array_equal(a.result_labels().values,
                                      b.result_labels().values)

    def test_inputs_not_modified(self, random_problem):
        rag, weights, lengths, means, counts = random_problem
        before = [m.values.copy() for m in (weights, lengths, means, counts)]
        hierarchical_clustering(rag, weights, lengths, means, counts,
                                node_feature_importance=0.5)
        after = [m.values for m in (weights, lengths, means, counts)]
        for old, new in zip(before, after):
            np.testing.assert_array_equal(old, new)

    def test_sparse_node_ids(self):
        labels = np.array([[0, 0, 5, 9]])
        grid = GridGraph(labels.shape)
        rag, affiliated = make_region_adjacency_graph(grid, labels)
        weights, lengths = aggregate_edges(
            rag, affiliated, grid, np.array([0.0, 1.0, 2.0]),
        )
        clusters = hierarchical_clustering(rag, weights, lengths,
                                           min_region_count=2)
        assert isinstance(clusters, PropertyMap)
        assert clusters.dtype == np.int64
        np.testing.assert_array_equal(
            clusters.values, [0, -1, -1, -1, -1, 0, -1, -1, -1, 9],
        )

    def test_mapping_inputs(self, path_graph):
        clusters = hierarchical_clustering(
            path_graph, {0: 2.0, 1: 1.0}, min_region_count=2,
        )
        np.testing.assert_array_equal(clusters.values, [0, 1, 1])


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    """Errors are raised before any work is done."""

    def test_empty_graph(self):
        with pytest.raises(EmptyGraph):
            HierarchicalClustering(AdjacencyListGraph(), np.zeros(0))

    def test_not_a_graph(self):
        with pytest.raises(ValidationError, match="Graph interface"):
            HierarchicalClustering(object(), np.zeros(0))

    def test_short_edge_weights(self, five_node_graph):
        graph, weights = five_node_graph
        with pytest.raises(DimensionMismatch, match="edge_weight"):
            HierarchicalClustering(graph, weights[:3])

    def test_edge_weights_from_another_graph(self, stripe_labels):
        """A per-pixel edge array is not a RAG edge map."""
        grid = GridGraph(stripe_labels.shape)
        rag, _ = make_region_adjacency_graph(grid, stripe_labels)
        pixel_edges = interpolate_edge_weights(grid, np.ones(grid.node_count))
        assert pixel_edges.shape[0] > rag.edge_count
        with pytest.raises(DimensionMismatch, match="edge_weight"):
            hierarchical_clustering(rag, pixel_edges, min_region_count=1)

    def test_long_node_size(self, path_graph):
        with pytest.raises(DimensionMismatch, match="node_size"):
            HierarchicalClustering(path_graph, np.zeros(2),
                                   node_size=np.ones(4))

    def test_short_node_features(self, five_node_graph):
        graph, weights = five_node_graph
        with pytest.raises(DimensionMismatch, match="node_feature"):
            HierarchicalClustering(graph, weights, node_feature=np.zeros(4))

    def test_nan_weight(self, five_node_graph):
        graph, weights = five_node_graph
        weights = weights.copy()
        weights[2] = np.nan
        with pytest.raises(ValidationError, match="NaN"):
            HierarchicalClustering(graph, weights)

    def test_negative_size(self, path_graph):
        with pytest.raises(ValidationError, match="node_size"):
            HierarchicalClustering(path_graph, np.zeros(2),
                                   node_size=np.array([1.0, -1.0, 1.0]))

    def test_invalid_options_mapping(self, path_graph):
        with pytest.raises(InvalidOptions):
            HierarchicalClustering(path_graph, np.zeros(2),
                                   options={'node_feature_importance': 2.0})

    def test_invalid_override(self, path_graph):
        with pytest.raises(InvalidOptions):
            hierarchical_clustering(path_graph, np.zeros(2),
                                    min_region_count=0)
