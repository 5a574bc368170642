# -*- coding: utf-8 -*-
"""
Node Feature Metrics - Distances between region feature vectors.

Each metric takes two 1D feature vectors (e.g., mean Lab colors of two
regions) and returns a non-negative float. ``resolve_metric`` turns a
``NodeFeatureMetric`` member, its string value, or a user callable into a
plain function.

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
from typing import Callable, Union

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import InvalidOptions
from hiseg.vocabulary import NodeFeatureMetric

MetricFunction = Callable[[np.ndarray, np.ndarray], float]

# Bins whose summed mass is below this are skipped by chi-squared.
_CHI_SQUARED_EPS = 1e-7


def l2_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance."""
    diff = a - b
    return float(np.sqrt(np.dot(diff, diff)))


def l1_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Manhattan distance."""
    return float(np.sum(np.abs(a - b)))


def chi_squared_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Symmetric chi-squared distance ``0.5 * sum((a-b)^2 / (a+b))``.

    Intended for histogram-like, non-negative features. Terms whose
    denominator is (near) zero contribute nothing.
    """
    total = a + b
    valid = total > _CHI_SQUARED_EPS
    diff = a[valid] - b[valid]
    return float(0.5 * np.sum(diff * diff / total[valid]))


_METRICS = {
    NodeFeatureMetric.L2: l2_distance,
    NodeFeatureMetric.L1: l1_distance,
    NodeFeatureMetric.CHI_SQUARED: chi_squared_distance,
}


def resolve_metric(
    metric: Union[NodeFeatureMetric, str, MetricFunction],
) -> MetricFunction:
    """Look up the distance function for *metric*.

    Parameters
    ----------
    metric : NodeFeatureMetric, str or callable
        A named metric (``'l2'``, ``'l1'``, ``'chi_squared'``) or any
        callable ``(a, b) -> float``.

    Returns
    -------
    Callable[[np.ndarray, np.ndarray], float]

    Raises
    ------
    InvalidOptions
        If *metric* is an unknown name, or ``NodeFeatureMetric.CUSTOM``
        passed without a callable.
    """
    if callable(metric) and not isinstance(metric, NodeFeatureMetric):
        return metric
    try:
        key = NodeFeatureMetric(metric)
    except ValueError:
        raise InvalidOptions(
            f"node_feature_metric must be one of "
            f"{[m.value for m in _METRICS]} or a callable, got {metric!r}"
        ) from None
    if key not in _METRICS:
        raise InvalidOptions(
            "node_feature_metric 'custom' requires passing the callable "
            "itself"
        )
    return _METRICS[key]
