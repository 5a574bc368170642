# -*- coding: utf-8 -*-
"""
Image Processing Module - Processor base classes, parameters and filters.

All processors inherit from ``ImageProcessor``, which provides version
checking and tunable parameter validation.

Sub-modules
-----------
filters/
    Edge-indicator filters (``GaussianGradientMagnitude``). Auto-handle 3D
    band stacks via ``BandwiseTransformMixin``.
versioning.py
    ``@processor_version`` and ``@processor_tags`` decorators.
params.py
    ``Range``, ``Options``, ``Desc`` constraint markers for tunable
    parameters via ``Annotated`` type hints.

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

from hiseg.image_processing.base import (
    ImageProcessor,
    ImageTransform,
    BandwiseTransformMixin,
)
from hiseg.image_processing.versioning import processor_version, processor_tags
from hiseg.image_processing.params import (
    Range,
    Options,
    Desc,
    ParamSpec,
    collect_param_specs,
)
from hiseg.image_processing.filters import GaussianGradientMagnitude

__all__ = [
    'ImageProcessor',
    'ImageTransform',
    'BandwiseTransformMixin',
    'processor_version',
    'processor_tags',
    'Range',
    'Options',
    'Desc',
    'ParamSpec',
    'collect_param_specs',
    'GaussianGradientMagnitude',
]
