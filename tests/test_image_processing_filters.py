# -*- coding: utf-8 -*-
"""
Edge Indicator Filter Tests - Gaussian gradient magnitude and shared
filter validation helpers.

Dependencies
------------
pytest
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

import numpy as np
import pytest

from hiseg.exceptions import ValidationError
from hiseg.image_processing.filters import GaussianGradientMagnitude
from hiseg.image_processing.filters._validation import (
    validate_mode,
    validate_sigma,
)
from hiseg.vocabulary import ProcessorCategory


# ---------------------------------------------------------------------------
# Validation helper tests
# ---------------------------------------------------------------------------

class TestValidation:
    """Test shared validation helpers."""

    def test_valid_sigmas(self):
        for sigma in (0.5, 1, 3.0, np.float32(2.0)):
            validate_sigma(sigma)

    def test_non_positive_sigma_raises(self):
        with pytest.raises(ValidationError, match="> 0"):
            validate_sigma(0.0)

    def test_non_numeric_sigma_raises(self):
        with pytest.raises(ValidationError, match="number"):
            validate_sigma('1.0')

    def test_bool_sigma_raises(self):
        with pytest.raises(ValidationError, match="number"):
            validate_sigma(True)

    def test_valid_modes(self):
        for mode in ('reflect', 'constant', 'nearest', 'mirror', 'wrap'):
            validate_mode(mode)

    def test_invalid_mode_raises(self):
        with pytest.raises(ValidationError, match="mode"):
            validate_mode('periodic')


# ---------------------------------------------------------------------------
# GaussianGradientMagnitude tests
# ---------------------------------------------------------------------------

class TestGaussianGradientMagnitude:
    """Test GaussianGradientMagnitude correctness and parameters."""

    def test_metadata(self):
        assert GaussianGradientMagnitude.__processor_version__ == '1.0.0'
        tags = GaussianGradientMagnitude.__processor_tags__
        assert tags['category'] is ProcessorCategory.EDGES

    def test_constant_image_is_zero(self):
        result = GaussianGradientMagnitude().apply(np.full((10, 10), 7.0))
        np.testing.assert_allclose(result, 0.0, atol=1e-10)

    def test_peak_on_step(self, step_image):
        result = GaussianGradientMagnitude(sigma=1.0).apply(step_image)
        assert result.shape == step_image.shape
        assert int(np.argmax(result[6])) in (5, 6)
        assert result[6, 0] < 1e-3 * result[6].max()

    def test_larger_sigma_lower_peak(self, step_image):
        f = GaussianGradientMagnitude(sigma=1.0)
        narrow = f.apply(step_image)
        wide = f.apply(step_image, sigma=3.0)
        assert wide.max() < narrow.max()

    def test_integer_input(self, step_image):
        result = GaussianGradientMagnitude().apply(step_image.astype(np.uint8))
        assert result.dtype == np.float64

    def test_bandwise_combined(self, step_image):
        stack = np.stack([step_image, 2.0 * step_image])
        per_band = GaussianGradientMagnitude(combine_bands=False).apply(stack)
        combined = GaussianGradientMagnitude().apply(stack)
        assert per_band.shape == (2, 12, 12)
        assert combined.shape == (12, 12)
        np.testing.assert_allclose(
            combined, np.sqrt(per_band[0] ** 2 + per_band[1] ** 2),
        )
        np.testing.assert_allclose(per_band[1], 2.0 * per_band[0])

    def test_invalid_sigma_raises(self):
        with pytest.raises(ValidationError):
            GaussianGradientMagnitude(sigma=0)

    def test_invalid_mode_raises(self):
        with pytest.raises(ValidationError, match="mode"):
            GaussianGradientMagnitude(mode='periodic')

    def test_runtime_out_of_range_raises(self, step_image):
        with pytest.raises(ValueError, match="above maximum"):
            GaussianGradientMagnitude().apply(step_image, sigma=500.0)
