# -*- coding: utf-8 -*-
"""
Spatial Filters - Edge-indicator filters feeding region adjacency graphs.

Provides ``GaussianGradientMagnitude``, the boundary-strength map whose
values are interpolated onto pixel-grid edges before they are averaged
into region adjacency graph edge weights. Handles 3D band stacks via
``BandwiseTransformMixin``.

Dependencies
------------
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

from hiseg.image_processing.filters.gradient import GaussianGradientMagnitude

__all__ = [
    'GaussianGradientMagnitude',
]
