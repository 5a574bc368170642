# -*- coding: utf-8 -*-
"""
hiseg Vocabulary - Enumerations shared across graph and segmentation modules.

Centralizes the string-valued enums used to tag processors and to select
graph neighborhoods and node feature distances, so that every module (and
every downstream GUI) agrees on the same spelling.

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

from enum import Enum


class ProcessorCategory(Enum):
    """Processing categories for processor tagging.

    Each value corresponds to a functional grouping of image processing
    operations.
    """

    FILTERS = "filters"
    EDGES = "edges"
    SEGMENTATION = "segmentation"


class SegmentationType(Enum):
    """Type of segmentation a segmentor processor produces.

    Used to describe the output characteristics of segmentation
    processors at the component level.
    """

    INSTANCE = "instance"
    SEMANTIC = "semantic"
    PANOPTIC = "panoptic"
    OVERSEGMENTATION = "oversegmentation"


class Neighborhood(Enum):
    """Pixel neighborhood of a grid graph.

    ``DIRECT`` connects pixels that differ by one step along a single axis
    (4-neighborhood in 2D, 6 in 3D). ``INDIRECT`` also connects diagonal
    neighbors (8-neighborhood in 2D, 26 in 3D).
    """

    DIRECT = "direct"
    INDIRECT = "indirect"


class NodeFeatureMetric(Enum):
    """Distance used to compare node feature vectors during clustering.

    ``CUSTOM`` marks a user-supplied callable; it is never passed by name.
    """

    L2 = "l2"
    L1 = "l1"
    CHI_SQUARED = "chi_squared"
    CUSTOM = "custom"
