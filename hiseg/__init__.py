# -*- coding: utf-8 -*-
"""
hiseg - Graph-based hierarchical image segmentation.

Builds a region adjacency graph from an over-segmentation of an image,
attaches boundary and region statistics to it, and agglomerates the regions
greedily by edge weight, region feature distance and region size.

Dependencies
------------
numpy
scipy

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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from hiseg.exceptions import (
    HisegError,
    ValidationError,
    ProcessorError,
    InvalidLabeling,
    DimensionMismatch,
    InvalidOptions,
    EmptyGraph,
)
from hiseg.vocabulary import (
    ProcessorCategory,
    SegmentationType,
    Neighborhood,
    NodeFeatureMetric,
)

__all__ = [
    'HisegError',
    'ValidationError',
    'ProcessorError',
    'InvalidLabeling',
    'DimensionMismatch',
    'InvalidOptions',
    'EmptyGraph',
    'ProcessorCategory',
    'SegmentationType',
    'Neighborhood',
    'NodeFeatureMetric',
]
