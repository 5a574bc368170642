# -*- coding: utf-8 -*-
"""
Processor Versioning - Version and capability-tag decorators for processors.

Provides the ``@processor_version`` class decorator for stamping semantic
version strings on any image processor class, and ``@processor_tags`` for
attaching category and segmentation-type metadata used by downstream tools
to discover processors by capability.

Author
------
Steven Siebert

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
import importlib.metadata
from typing import Optional, Sequence, Type, TypeVar

# hiseg vocabulary
from hiseg.vocabulary import ProcessorCategory, SegmentationType

T = TypeVar('T')


def processor_version(version: Optional[str] = None):
    """Class decorator that stamps a processor version on an image processor.

    Sets ``__processor_version__`` as a class attribute. This version is the
    single source of truth for both the algorithm version and the output
    format version. When *version* is omitted, the installed ``hiseg``
    package version is used.

    Parameters
    ----------
    version : str, optional
        Semantic version string (e.g., ``'1.0.0'``).

    Returns
    -------
    Callable
        Class decorator that sets ``__processor_version__`` on the class.

    Examples
    --------
    >>> @processor_version('1.0.0')
    ... class MyFilter(ImageTransform):
    ...     def apply(self, source, **kwargs):
    ...         return source
    >>> MyFilter.__processor_version__
    '1.0.0'
    """
    def decorator(cls: Type[T]) -> Type[T]:
        if version:
            cls.__processor_version__ = version
        else:
            try:
                cls.__processor_version__ = importlib.metadata.version('hiseg')
            except importlib.metadata.PackageNotFoundError:
                cls.__processor_version__ = "unknown"
        return cls
    return decorator


def processor_tags(
    category: Optional[ProcessorCategory] = None,
    description: Optional[str] = None,
    segmentation_types: Optional[Sequence[SegmentationType]] = None,
):
    """Class decorator for processor capability metadata.

    Stamps ``__processor_tags__`` on the class with category, description
    and segmentation-type metadata.

    Parameters
    ----------
    category : ProcessorCategory, optional
        Processing category.
    description : str, optional
        Short human-readable description of the processor's purpose.
    segmentation_types : Sequence[SegmentationType], optional
        Types of segmentation this processor produces.

    Raises
    ------
    TypeError
        If *category* is not a ``ProcessorCategory`` or any element of
        *segmentation_types* is not a ``SegmentationType``.
    """
    # Validate enum types eagerly so typos fail at import time
    if category is not None and not isinstance(category, ProcessorCategory):
        raise TypeError(
            f"category must be a ProcessorCategory member, got {category!r}"
        )
    if segmentation_types is not None:
        for s in segmentation_types:
            if not isinstance(s, SegmentationType):
                raise TypeError(
                    f"segmentation_types must be SegmentationType members, "
                    f"got {s!r}"
                )

    def decorator(cls: Type[T]) -> Type[T]:
        cls.__processor_tags__ = {
            'category': category,
            'description': description,
            'segmentation_types': (
                tuple(segmentation_types) if segmentation_types else ()
            ),
        }
        return cls
    return decorator
