# -*- coding: utf-8 -*-
"""
Property Maps - Per-node and per-edge value storage keyed by graph ids.

Two storage strategies are provided:

- ``PropertyMap``: dense, numpy-backed. Index ``i`` holds the value for id
  ``i``. Values may be scalars or fixed-shape vectors (``value_shape``).
  Suits grid graphs and edge maps, whose ids are contiguous.
- ``SparsePropertyMap``: dict-backed with a default factory. Suits
  arbitrary Python values (e.g., lists) or very sparse id sets.

Both expose the same ``get`` / ``set`` / item-access interface with O(1)
access, and both return the default value for ids never written. The
``node_map`` and ``edge_map`` factories size a dense map from a graph.

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
from typing import Any, Callable, Dict, Iterator, Mapping, Tuple, Union

# Third-party
import numpy as np

# hiseg internal
from hiseg.exceptions import DimensionMismatch, ValidationError


class PropertyMap:
    """Dense property map backed by a numpy array.

    Parameters
    ----------
    size : int
        Number of addressable ids (``0 .. size - 1``).
    dtype : numpy dtype
        Value dtype. Default ``float64``.
    value_shape : Tuple[int, ...]
        Shape of a single value. ``()`` for scalars. Default ``()``.
    fill_value : Any
        Default value for every id. Default ``0``.

    Examples
    --------
    >>> weights = PropertyMap(4)
    >>> weights[2] = 1.5
    >>> weights.get(2), weights.get(0)
    (1.5, 0.0)
    """

    def __init__(
        self,
        size: int,
        dtype: Any = np.float64,
        value_shape: Tuple[int, ...] = (),
        fill_value: Any = 0,
    ) -> None:
        if size < 0:
            raise ValidationError(f"size must be >= 0, got {size}")
        self._values = np.full(
            (int(size),) + tuple(value_shape), fill_value, dtype=dtype,
        )

    @classmethod
    def from_array(cls, values: np.ndarray, copy: bool = True) -> 'PropertyMap':
        """Wrap an existing array whose first axis is the id axis.

        Parameters
        ----------
        values : np.ndarray
            Array of shape ``(size, *value_shape)``.
        copy : bool
            Copy the array (default) or share its memory.

        Returns
        -------
        PropertyMap
        """
        values = np.array(values, copy=True) if copy else np.asarray(values)
        if values.ndim == 0:
            raise ValidationError("values must have at least one dimension")
        pmap = cls.__new__(cls)
        pmap._values = values
        return pmap

    @property
    def values(self) -> np.ndarray:
        """Underlying storage, shape ``(size, *value_shape)``."""
        return self._values

    @property
    def value_shape(self) -> Tuple[int, ...]:
        return self._values.shape[1:]

    @property
    def dtype(self) -> np.dtype:
        return self._values.dtype

    def get(self, key: int) -> Any:
        value = self._values[key]
        return value.item() if self._values.ndim == 1 else value

    def set(self, key: int, value: Any) -> None:
        self._values[key] = value

    def copy(self) -> 'PropertyMap':
        return PropertyMap.from_array(self._values, copy=True)

    def __getitem__(self, key: int) -> Any:
        return self.get(key)

    def __setitem__(self, key: int, value: Any) -> None:
        self.set(key, value)

    def __len__(self) -> int:
        return self._values.shape[0]

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._values
        return self._values.astype(dtype)

    def __repr__(self) -> str:
        return (
            f"PropertyMap(size={len(self)}, dtype={self._values.dtype}, "
            f"value_shape={self.value_shape})"
        )


class SparsePropertyMap:
    """Sparse property map backed by a dict with a default factory.

    Parameters
    ----------
    default_factory : Callable[[], Any]
        Called (without arguments) to produce the value of an id that has
        never been written. The result is stored on first access so that
        mutable defaults (e.g., lists) can be appended to in place.
    """

    def __init__(self, default_factory: Callable[[], Any] = float) -> None:
        self._default_factory = default_factory
        self._data: Dict[int, Any] = {}

    def get(self, key: int) -> Any:
        try:
            return self._data[key]
        except KeyError:
            value = self._default_factory()
            self._data[key] = value
            return value

    def set(self, key: int, value: Any) -> None:
        self._data[key] = value

    def keys(self) -> Iterator[int]:
        return iter(self._data)

    def items(self) -> Iterator[Tuple[int, Any]]:
        return iter(self._data.items())

    def __getitem__(self, key: int) -> Any:
        return self.get(key)

    def __setitem__(self, key: int, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"SparsePropertyMap(entries={len(self._data)})"


def node_map(
    graph: Any,
    dtype: Any = np.float64,
    value_shape: Tuple[int, ...] = (),
    fill_value: Any = 0,
) -> PropertyMap:
    """Create a dense map addressable by every node id of *graph*."""
    return PropertyMap(graph.max_node_id + 1, dtype, value_shape, fill_value)


def edge_map(
    graph: Any,
    dtype: Any = np.float64,
    value_shape: Tuple[int, ...] = (),
    fill_value: Any = 0,
) -> PropertyMap:
    """Create a dense map addressable by every edge id of *graph*."""
    return PropertyMap(graph.max_edge_id + 1, dtype, value_shape, fill_value)


def as_dense_array(
    values: Union[PropertyMap, SparsePropertyMap, Mapping, np.ndarray],
    size: int,
    name: str,
    dtype: Any = np.float64,
) -> np.ndarray:
    """Convert any supported property map into a dense array of *size* rows.

    Dense inputs (``PropertyMap`` or array-like) must have exactly *size*
    rows. Sparse inputs (``SparsePropertyMap`` or any ``Mapping``) are
    scattered into a zero-filled array.

    Parameters
    ----------
    values : PropertyMap, SparsePropertyMap, Mapping or array-like
        Source values keyed by id.
    size : int
        Required number of addressable ids.
    name : str
        Argument name used in error messages.
    dtype : numpy dtype
        Output dtype.

    Returns
    -------
    np.ndarray
        Array of shape ``(size, *value_shape)``. Always a fresh copy.

    Raises
    ------
    DimensionMismatch
        If a dense input does not have exactly *size* rows, or a sparse
        input has a key outside ``[0, size)``.
    """
    if isinstance(values, (SparsePropertyMap, Mapping)):
        items = list(values.items())
        if not items:
            return np.zeros(size, dtype=dtype)
        first = np.asarray(items[0][1], dtype=dtype)
        out = np.zeros((size,) + first.shape, dtype=dtype)
        for key, value in items:
            if not 0 <= key < size:
                raise DimensionMismatch(
                    f"{name} has id {key} outside the graph id range "
                    f"[0, {size})"
                )
            out[key] = value
        return out

    array = np.asarray(values, dtype=dtype)
    if array.ndim == 0 or array.shape[0] != size:
        raise DimensionMismatch(
            f"{name} must provide exactly {size} entries, one per id, got "
            f"shape {array.shape}"
        )
    return np.array(array, copy=True)
