# -*- coding: utf-8 -*-
"""
Processor Versioning Tests.

Tests for the @processor_version and @processor_tags decorators and the
missing-version warning on ImageProcessor.

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

import warnings

import numpy as np
import pytest

from hiseg.image_processing.base import ImageProcessor, ImageTransform
from hiseg.image_processing.versioning import processor_tags, processor_version
from hiseg.vocabulary import ProcessorCategory, SegmentationType


def _version_warnings(records):
    return [
        x for x in records
        if issubclass(x.category, UserWarning)
        and 'processor version' in str(x.message).lower()
    ]


class TestProcessorVersion:
    """@processor_version stamps the version."""

    def test_stamps_version(self):
        @processor_version('2.1.0')
        class _Versioned(ImageTransform):
            def apply(self, source, **kwargs):
                return source

        assert _Versioned.__processor_version__ == '2.1.0'
        assert _Versioned().apply(np.zeros((2, 2))).shape == (2, 2)

    def test_returns_same_class(self):
        class _Original(ImageTransform):
            def apply(self, source, **kwargs):
                return source

        assert processor_version('1.0.0')(_Original) is _Original

    def test_default_uses_package_version(self):
        @processor_version()
        class _Default(ImageTransform):
            def apply(self, source, **kwargs):
                return source

        assert isinstance(_Default.__processor_version__, str)
        assert _Default.__processor_version__


class TestMissingVersionWarning:
    """Unversioned concrete subclasses warn once at instantiation."""

    def test_warns_once(self):
        class _Unversioned(ImageTransform):
            def apply(self, source, **kwargs):
                return source

        ImageProcessor._version_warned_classes.discard(_Unversioned)
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter('always')
            _Unversioned()
            _Unversioned()
            found = _version_warnings(w)
        assert len(found) == 1
        assert '_Unversioned' in str(found[0].message)

    def test_no_warning_when_versioned(self):
        @processor_version('1.0.0')
        class _Versioned(ImageTransform):
            def apply(self, source, **kwargs):
                return source

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter('always')
            _Versioned()
            assert _version_warnings(w) == []


class TestProcessorTags:
    """@processor_tags metadata."""

    def test_stamps_tags(self):
        @processor_tags(category=ProcessorCategory.SEGMENTATION,
                        description='merge regions',
                        segmentation_types=[SegmentationType.SEMANTIC])
        class _Tagged(ImageTransform):
            def apply(self, source, **kwargs):
                return source

        tags = _Tagged.__processor_tags__
        assert tags['category'] is ProcessorCategory.SEGMENTATION
        assert tags['description'] == 'merge regions'
        assert tags['segmentation_types'] == (SegmentationType.SEMANTIC,)

    def test_defaults(self):
        @processor_tags()
        class _Bare(ImageTransform):
            def apply(self, source, **kwargs):
                return source

        assert _Bare.__processor_tags__['segmentation_types'] == ()

    def test_string_category_rejected(self):
        with pytest.raises(TypeError, match="ProcessorCategory"):
            processor_tags(category='segmentation')

    def test_string_segmentation_type_rejected(self):
        with pytest.raises(TypeError, match="SegmentationType"):
            processor_tags(segmentation_types=['semantic'])
