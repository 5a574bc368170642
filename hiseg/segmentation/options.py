# -*- coding: utf-8 -*-
"""
Clustering Options - Immutable, validated configuration for agglomeration.

``ClusteringOptions`` is a frozen dataclass whose fields are declared with
the same ``Annotated`` constraint markers (``Range``, ``Desc``) used for
tunable processor parameters. ``__post_init__`` runs every collected
``ParamSpec`` and converts failures into ``InvalidOptions``, so an invalid
configuration can never be constructed.

Fields
------
min_region_count
    Stop once this many regions remain. Default 1.
node_feature_importance
    ``beta`` in ``[0, 1]``: weight of the node feature distance relative to
    the boundary edge weight. Default 0 (edge weight only).
size_importance
    ``wardness`` in ``[0, 1]``: exponent of the Ward-style size factor
    ``(|a||b| / (|a| + |b|)) ** wardness``. Default 0 (no size effect).
node_feature_metric
    ``'l2'`` (default), ``'l1'``, ``'chi_squared'``, a
    ``NodeFeatureMetric`` member, or a callable ``(a, b) -> float``.
max_merge_weight
    Optional: also stop when the cheapest remaining merge costs more.

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
import dataclasses
import math
from dataclasses import dataclass
from typing import Annotated, Any, Mapping, Optional, Union

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import InvalidOptions
from hiseg.image_processing.params import Desc, Range, collect_param_specs
from hiseg.segmentation.metrics import MetricFunction, resolve_metric
from hiseg.vocabulary import NodeFeatureMetric


@dataclass(frozen=True)
class ClusteringOptions:
    """Configuration of ``hierarchical_clustering``.

    Raises
    ------
    InvalidOptions
        If ``node_feature_importance`` or ``size_importance`` fall outside
        ``[0, 1]``, ``min_region_count`` is below 1, ``max_merge_weight`` is
        not a number (bools and NaN included), or the metric is unknown.

    Examples
    --------
    >>> opts = ClusteringOptions(min_region_count=20,
    ...                          node_feature_importance=0.5)
    >>> opts.with_changes(size_importance=1.0).size_importance
    1.0
    """

    min_region_count: Annotated[int, Range(min=1),
                                Desc('Target number of regions')] = 1
    node_feature_importance: Annotated[float, Range(min=0.0, max=1.0),
                                       Desc('Node feature weight (beta)')] = 0.0
    size_importance: Annotated[float, Range(min=0.0, max=1.0),
                               Desc('Ward size penalty (wardness)')] = 0.0
    node_feature_metric: Annotated[object, Desc('Node feature distance')] = (
        NodeFeatureMetric.L2
    )
    max_merge_weight: Optional[float] = None

    def __post_init__(self) -> None:
        for spec in collect_param_specs(type(self)):
            try:
                spec.validate(getattr(self, spec.name))
            except (TypeError, ValueError) as exc:
                raise InvalidOptions(str(exc)) from exc

        metric = self.node_feature_metric
        if not callable(metric) or isinstance(metric, NodeFeatureMetric):
            resolve_metric(metric)
            object.__setattr__(
                self, 'node_feature_metric', NodeFeatureMetric(metric),
            )

        if self.max_merge_weight is not None:
            value = self.max_merge_weight
            try:
                if isinstance(value, (bool, np.bool_)):
                    raise TypeError(value)
                value = float(value)
            except (TypeError, ValueError) as exc:
                raise InvalidOptions(
                    f"max_merge_weight must be a number or None, got "
                    f"{self.max_merge_weight!r}"
                ) from exc
            if math.isnan(value):
                raise InvalidOptions("max_merge_weight must not be NaN")
            object.__setattr__(self, 'max_merge_weight', value)

    @property
    def metric_function(self) -> MetricFunction:
        """The distance function selected by ``node_feature_metric``."""
        return resolve_metric(self.node_feature_metric)

    @property
    def metric_name(self) -> str:
        metric = self.node_feature_metric
        if isinstance(metric, NodeFeatureMetric):
            return metric.value
        return NodeFeatureMetric.CUSTOM.value

    def with_changes(self, **changes: Any) -> 'ClusteringOptions':
        """Return a validated copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def coerce(
        cls, options: Union['ClusteringOptions', Mapping[str, Any], None],
    ) -> 'ClusteringOptions':
        """Accept an options instance, a mapping of fields, or ``None``.

        Raises
        ------
        InvalidOptions
            If *options* is a mapping with unknown keys.
        TypeError
            If *options* is any other type.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            unknown = set(options) - {f.name for f in dataclasses.fields(cls)}
            if unknown:
                raise InvalidOptions(
                    f"unknown clustering options: {', '.join(sorted(unknown))}"
                )
            return cls(**options)
        raise TypeError(
            f"options must be ClusteringOptions or a mapping, got "
            f"{type(options).__name__}"
        )
