# -*- coding: utf-8 -*-
"""
hiseg Exception Hierarchy - Domain-specific exceptions for hiseg operations.

Provides a small exception hierarchy that lets downstream consumers catch
hiseg-specific errors distinctly from Python built-in exceptions. All hiseg
exceptions subclass both ``HisegError`` and the appropriate built-in
exception, so existing ``except ValueError`` handlers keep working.

The segmentation pipeline validates its inputs eagerly: every error below is
raised at the start of the offending call, before any caller-visible state
is touched. None of them are retryable.

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


class HisegError(Exception):
    """Base exception for all hiseg errors."""


class ValidationError(HisegError, ValueError):
    """Invalid input data, parameters, or configuration.

    Raised for shape mismatches, out-of-range parameters, invalid
    method names, and other input validation failures.
    """


class ProcessorError(HisegError, RuntimeError):
    """Algorithm or processing failure during apply().

    Raised when a processor encounters a non-recoverable error
    during execution (not an input validation issue).
    """


class InvalidLabeling(ValidationError):
    """Malformed or out-of-range label map.

    Raised when a label map is negative, non-integral, or references
    nodes that do not exist in the graph it labels.
    """


class DimensionMismatch(ValidationError):
    """Feature array shape does not match the label or graph shape."""


class InvalidOptions(ValidationError):
    """Clustering options out of range.

    Raised for weighting parameters outside ``[0, 1]``, a non-positive
    target region count, or an unknown node feature metric.
    """


class EmptyGraph(ValidationError):
    """A graph with zero nodes was supplied to clustering."""
