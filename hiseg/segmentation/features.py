# -*- coding: utf-8 -*-
"""
Region Features - Node and edge statistics of a region adjacency graph.

Edge features summarize the shared boundary of two regions:

- ``interpolate_edge_weights`` turns a per-pixel scalar (e.g., gradient
  magnitude) into a per-source-edge scalar by averaging the two endpoint
  pixels, i.e. linear interpolation at the half-pixel boundary.
- ``aggregate_edges`` reduces the per-source-edge scalar over each RAG
  edge's affiliated edges (mean by default) and reports the boundary
  length (affiliated edge count).

Node features summarize the pixels of a region:

- ``aggregate_nodes`` returns the per-label pixel count and mean feature
  vector (e.g., mean Lab color).
- ``RegionStatistics`` is the ``{count, mean}`` value type with the exact,
  associative merge law used by agglomerative clustering; ``merge_means``
  is its array form.

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
from dataclasses import dataclass
from typing import Tuple, Union

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import DimensionMismatch, ValidationError
from hiseg.graph.base import Graph, check_graph
from hiseg.graph.property_map import PropertyMap
from hiseg.segmentation.rag import AffiliatedEdges, _as_integral

logger = logging.getLogger(__name__)

EDGE_ACCUMULATORS = ('mean', 'sum', 'min', 'max')


# =====================================================================
# Region statistics value type
# =====================================================================

def merge_means(
    mean_a: np.ndarray, count_a: float,
    mean_b: np.ndarray, count_b: float,
) -> Tuple[np.ndarray, float]:
    """Count-weighted mean of two summaries.

    Returns ``((mean_a*count_a + mean_b*count_b) / (count_a+count_b),
    count_a + count_b)``. When both counts are zero the first mean is kept.
    """
    total = count_a + count_b
    if total == 0:
        return np.array(mean_a, dtype=np.float64, copy=True), total
    merged = (np.multiply(mean_a, count_a) + np.multiply(mean_b, count_b)) / total
    return merged, total


@dataclass(frozen=True)
class RegionStatistics:
    """Pixel count and mean feature of one region.

    Merging never revisits pixels: it only needs the two summaries, and the
    result does not depend on merge order (up to float rounding).

    Examples
    --------
    >>> a = RegionStatistics(2, np.array([1.0, 0.0]))
    >>> b = RegionStatistics(1, np.array([4.0, 3.0]))
    >>> m = a.merge(b)
    >>> m.count, m.mean.tolist()
    (3, [2.0, 1.0])
    """

    count: int
    mean: np.ndarray

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValidationError(f"count must be >= 0, got {self.count}")
        object.__setattr__(
            self, 'mean', np.atleast_1d(np.asarray(self.mean, dtype=np.float64)),
        )

    @classmethod
    def from_samples(cls, samples: np.ndarray) -> 'RegionStatistics':
        """Summarize ``(n, channels)`` or ``(n,)`` samples directly."""
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim == 1:
            samples = samples[:, None]
        if samples.shape[0] == 0:
            return cls(0, np.zeros(samples.shape[1]))
        return cls(samples.shape[0], samples.mean(axis=0))

    def merge(self, other: 'RegionStatistics') -> 'RegionStatistics':
        if self.mean.shape != other.mean.shape:
            raise DimensionMismatch(
                f"cannot merge features of shape {self.mean.shape} and "
                f"{other.mean.shape}"
            )
        mean, count = merge_means(self.mean, self.count, other.mean, other.count)
        return RegionStatistics(count, mean)

    def __add__(self, other: 'RegionStatistics') -> 'RegionStatistics':
        return self.merge(other)


# =====================================================================
# Edge features
# =====================================================================

def interpolate_edge_weights(
    source_graph: Graph,
    node_values: Union[np.ndarray, PropertyMap],
) -> np.ndarray:
    """Per-source-edge scalar: mean of the values at both endpoints.

    Parameters
    ----------
    source_graph : Graph
        Fine graph, usually a ``GridGraph``.
    node_values : np.ndarray or PropertyMap
        One scalar per node id. For a ``GridGraph`` this may be an image of
        the grid's shape.

    Returns
    -------
    np.ndarray
        float64 array of length ``source_graph.max_edge_id + 1``.

    Raises
    ------
    DimensionMismatch
        If *node_values* does not hold exactly one scalar per node id.
    """
    check_graph(source_graph, 'source_graph')
    values = np.asarray(
        node_values.values if isinstance(node_values, PropertyMap)
        else node_values,
        dtype=np.float64,
    ).reshape(-1)
    expected = source_graph.max_node_id + 1
    if values.shape[0] != expected:
        raise DimensionMismatch(
            f"node_values must hold one scalar per node ({expected}), got "
            f"{values.shape[0]}"
        )
    uv = source_graph.uv_ids()
    return 0.5 * (values[uv[:, 0]] + values[uv[:, 1]])


def aggregate_edges(
    rag: Graph,
    affiliated_edges: AffiliatedEdges,
    source_graph: Graph,
    edge_values: Union[np.ndarray, PropertyMap],
    accumulator: str = 'mean',
) -> Tuple[PropertyMap, PropertyMap]:
    """Reduce per-source-edge values onto RAG edges.

    Parameters
    ----------
    rag : Graph
        Region adjacency graph from ``make_region_adjacency_graph``.
    affiliated_edges : AffiliatedEdges
        Affiliation index returned alongside *rag*.
    source_graph : Graph
        The graph *rag* was built from.
    edge_values : np.ndarray or PropertyMap
        One scalar per source edge id, e.g. from
        ``interpolate_edge_weights``.
    accumulator : str
        ``'mean'`` (default), ``'sum'``, ``'min'`` or ``'max'``.

    Returns
    -------
    edge_weight : PropertyMap
        float64 edge map of *rag*: the accumulated boundary value.
    edge_length : PropertyMap
        float64 edge map of *rag*: number of affiliated source edges.

    Raises
    ------
    DimensionMismatch
        If *edge_values* does not cover the source edges, or
        *affiliated_edges* does not match *rag*.
    ValidationError
        If *accumulator* is unknown.
    """
    check_graph(rag, 'rag')
    check_graph(source_graph, 'source_graph')
    if accumulator not in EDGE_ACCUMULATORS:
        raise ValidationError(
            f"accumulator must be one of {EDGE_ACCUMULATORS}, got "
            f"{accumulator!r}"
        )
    values = np.asarray(
        edge_values.values if isinstance(edge_values, PropertyMap)
        else edge_values,
        dtype=np.float64,
    )
    n_source = source_graph.max_edge_id + 1
    if values.ndim != 1 or values.shape[0] != n_source:
        raise DimensionMismatch(
            f"edge_values must be 1D with one value per source edge "
            f"({n_source}), got shape {values.shape}"
        )
    n_rag = rag.max_edge_id + 1
    if len(affiliated_edges) != n_rag:
        raise DimensionMismatch(
            f"affiliated_edges describes {len(affiliated_edges)} edges, rag "
            f"has {n_rag}"
        )

    lengths = affiliated_edges.lengths().astype(np.float64)
    weights = np.zeros(n_rag, dtype=np.float64)
    if n_rag:
        gathered = values[affiliated_edges.source_edges]
        starts = affiliated_edges.offsets[:-1]
        if accumulator == 'min':
            weights = np.minimum.reduceat(gathered, starts)
        elif accumulator == 'max':
            weights = np.maximum.reduceat(gathered, starts)
        else:
            weights = np.add.reduceat(gathered, starts)
            if accumulator == 'mean':
                weights = weights / lengths

    logger.debug(
        "Aggregated %d source edge values onto %d RAG edges (%s)",
        affiliated_edges.source_edges.shape[0], n_rag, accumulator,
    )
    return PropertyMap.from_array(weights, copy=False), \
        PropertyMap.from_array(lengths, copy=False)


# =====================================================================
# Node features
# =====================================================================

def aggregate_nodes(
    labels: np.ndarray,
    features: np.ndarray,
) -> Tuple[PropertyMap, PropertyMap]:
    """Per-label pixel count and mean feature.

    Parameters
    ----------
    labels : np.ndarray
        Non-negative integer label image of shape ``S``.
    features : np.ndarray
        Per-pixel feature of shape ``S`` (scalar) or ``S + (channels,)``
        (vector, e.g. Lab color).

    Returns
    -------
    node_mean : PropertyMap
        float64 map of size ``max_label + 1`` with value shape
        ``(channels,)`` (``(1,)`` for scalar features). Labels that do not
        occur keep a zero mean.
    node_count : PropertyMap
        float64 map of size ``max_label + 1``: pixels per label.

    Raises
    ------
    DimensionMismatch
        If the spatial shape of *features* differs from *labels*.
    InvalidLabeling
        If *labels* is negative or non-integral.
    """
    label_array = np.asarray(labels)
    feature_array = np.asarray(features, dtype=np.float64)
    if feature_array.shape == label_array.shape:
        feature_array = feature_array[..., None]
    elif feature_array.shape[:-1] != label_array.shape:
        raise DimensionMismatch(
            f"features of shape {feature_array.shape} do not match labels "
            f"of shape {label_array.shape}"
        )
    flat_labels = _as_integral(label_array.reshape(-1), 'labels')
    flat_features = feature_array.reshape(flat_labels.shape[0], -1)

    size = int(flat_labels.max()) + 1 if flat_labels.size else 0
    counts = np.bincount(flat_labels, minlength=size).astype(np.float64)
    sums = np.stack(
        [np.bincount(flat_labels, weights=flat_features[:, c], minlength=size)
         for c in range(flat_features.shape[1])],
        axis=1,
    ) if size else np.zeros((0, flat_features.shape[1]))
    means = np.zeros_like(sums)
    nonzero = counts > 0
    means[nonzero] = sums[nonzero] / counts[nonzero, None]
    return PropertyMap.from_array(means, copy=False), \
        PropertyMap.from_array(counts, copy=False)
