# -*- coding: utf-8 -*-
"""
Filter Validation Helpers - Shared scale and boundary mode validation.

Provides reusable validation functions for spatial image filters. Filter
classes in this subpackage call these helpers to enforce consistent
constraints on Gaussian scales and scipy.ndimage boundary modes.

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
import numbers

# hiseg internal
from hiseg.exceptions import ValidationError


BOUNDARY_MODES = ('reflect', 'constant', 'nearest', 'mirror', 'wrap')


def validate_sigma(sigma: float, name: str = 'sigma') -> None:
    """Validate that a Gaussian scale is a positive finite number.

    Parameters
    ----------
    sigma : float
        The scale to validate.
    name : str
        Parameter name for error messages. Default ``'sigma'``.

    Raises
    ------
    ValidationError
        If ``sigma`` is not a number or is not > 0.
    """
    if isinstance(sigma, bool) or not isinstance(sigma, numbers.Real):
        raise ValidationError(
            f"{name} must be a number, got {type(sigma).__name__}"
        )
    if not sigma > 0:
        raise ValidationError(f"{name} must be > 0, got {sigma}")


def validate_mode(mode: str) -> None:
    """Validate that boundary mode is supported by scipy.ndimage.

    Parameters
    ----------
    mode : str
        Boundary handling mode to validate.

    Raises
    ------
    ValidationError
        If ``mode`` is not one of the supported scipy.ndimage modes.
    """
    if mode not in BOUNDARY_MODES:
        raise ValidationError(
            f"mode must be one of {BOUNDARY_MODES}, got {mode!r}"
        )
