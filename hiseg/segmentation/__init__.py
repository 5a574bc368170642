# -*- coding: utf-8 -*-
"""
Segmentation Module - Region adjacency graphs and agglomerative clustering.

Sub-modules
-----------
rag.py
    ``make_region_adjacency_graph`` and projection of region results back
    onto the source graph.
features.py
    Edge weight interpolation/aggregation and per-region statistics.
metrics.py
    Node feature distances (L2, L1, chi-squared).
options.py
    ``ClusteringOptions``.
clustering.py
    ``HierarchicalClustering`` and ``hierarchical_clustering``.
segmenter.py
    ``HierarchicalRegionMerging``, the end-to-end image transform.

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

from hiseg.segmentation.rag import (
    AffiliatedEdges,
    make_region_adjacency_graph,
    project_labels_to_base_graph,
    project_node_features_to_base_graph,
    validate_labels,
)
from hiseg.segmentation.features import (
    EDGE_ACCUMULATORS,
    RegionStatistics,
    aggregate_edges,
    aggregate_nodes,
    interpolate_edge_weights,
    merge_means,
)
from hiseg.segmentation.metrics import (
    chi_squared_distance,
    l1_distance,
    l2_distance,
    resolve_metric,
)
from hiseg.segmentation.options import ClusteringOptions
from hiseg.segmentation.clustering import (
    HierarchicalClustering,
    MergeEvent,
    hierarchical_clustering,
)
from hiseg.segmentation.segmenter import HierarchicalRegionMerging

__all__ = [
    'AffiliatedEdges',
    'make_region_adjacency_graph',
    'project_labels_to_base_graph',
    'project_node_features_to_base_graph',
    'validate_labels',
    'EDGE_ACCUMULATORS',
    'RegionStatistics',
    'aggregate_edges',
    'aggregate_nodes',
    'interpolate_edge_weights',
    'merge_means',
    'chi_squared_distance',
    'l1_distance',
    'l2_distance',
    'resolve_metric',
    'ClusteringOptions',
    'HierarchicalClustering',
    'MergeEvent',
    'hierarchical_clustering',
    'HierarchicalRegionMerging',
]
