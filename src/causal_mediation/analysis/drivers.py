"""
Driver Normalization Module

Uniform view over driver collections supplied as a 3-D block, a single
matrix, a mapping of named matrices, or a list of matrices.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..utils.errors import (
    DriverCollectionError,
    IndexLengthMismatchError,
    MissingIdentifierError,
)

logger = logging.getLogger(__name__)


class DriverSource(ABC):
    """
    A collection of candidate drivers tested against one mediator.

    Subclasses report how many drivers they hold and the ordered identifiers
    of those drivers. The original collection is kept in ``values`` so it can
    be handed to the testing engine unchanged.
    """

    def __init__(self, values: Any):
        self.values = values

    @abstractmethod
    def count(self) -> int:
        """Number of drivers."""

    @abstractmethod
    def identifiers(self) -> List[str]:
        """Driver identifiers in collection order."""

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={self.count()})"


class ArrayDriverSource(DriverSource):
    """
    Drivers stacked in a block indexed by [observation, level, driver].

    Parameters
    ----------
    values : array
        3-D array of driver values
    identifiers : sequence of str, optional
        Names along the third axis
    """

    def __init__(self, values: np.ndarray, identifiers: Optional[Sequence] = None):
        values = np.asarray(values)
        if values.ndim != 3:
            raise DriverCollectionError(
                f"Driver array must be 3-dimensional, got shape {values.shape}"
            )
        super().__init__(values)
        if identifiers is not None:
            identifiers = [str(name) for name in identifiers]
            if len(identifiers) != values.shape[2]:
                raise MissingIdentifierError(
                    f"Driver array has {values.shape[2]} drivers on its third axis "
                    f"but {len(identifiers)} identifiers were given"
                )
        self._identifiers = identifiers

    def count(self) -> int:
        return self.values.shape[2]

    def identifiers(self) -> List[str]:
        if self._identifiers is None:
            raise MissingIdentifierError(
                "Driver array has no names on its third axis; "
                "pass driver_names to label the drivers"
            )
        return list(self._identifiers)


class MappingDriverSource(DriverSource):
    """Drivers supplied as a mapping of identifier to matrix."""

    def __init__(self, values: Mapping):
        super().__init__(values)
        self._identifiers = [str(key) for key in values.keys()]

    def count(self) -> int:
        return len(self._identifiers)

    def identifiers(self) -> List[str]:
        return list(self._identifiers)


class MatrixDriverSource(DriverSource):
    """A single driver matrix, tested at one index entry."""

    def __init__(self, values: Any, identifier: Optional[str] = None):
        super().__init__(values)
        if identifier is None:
            # DataFrame attribute access also finds a column called "name".
            name = getattr(values, "name", None)
            identifier = name if isinstance(name, str) else None
        self._identifier = identifier

    def count(self) -> int:
        return 1

    def identifiers(self) -> List[str]:
        if self._identifier is None:
            raise MissingIdentifierError(
                "Single driver matrix has no name; pass driver_names to label it"
            )
        return [str(self._identifier)]


class SequenceDriverSource(DriverSource):
    """
    Drivers supplied as a list of matrices with separately given names.

    Parameters
    ----------
    values : list or tuple
        Driver matrices
    identifiers : sequence of str, optional
        One name per matrix
    """

    def __init__(self, values: Sequence, identifiers: Optional[Sequence] = None):
        super().__init__(values)
        if identifiers is not None:
            identifiers = [str(name) for name in identifiers]
            if len(identifiers) != len(values):
                raise MissingIdentifierError(
                    f"Driver list has {len(values)} matrices "
                    f"but {len(identifiers)} identifiers were given"
                )
        self._identifiers = identifiers

    def count(self) -> int:
        return len(self.values)

    def identifiers(self) -> List[str]:
        if self._identifiers is None:
            raise MissingIdentifierError(
                "Driver list has no names; pass a mapping or driver_names"
            )
        return list(self._identifiers)


def _is_matrix(value: Any) -> bool:
    return isinstance(value, pd.DataFrame) or np.ndim(value) == 2


def as_driver_source(collection: Any,
                     identifiers: Optional[Sequence] = None) -> DriverSource:
    """
    Wrap a driver collection in the matching ``DriverSource``.

    Parameters
    ----------
    collection : DriverSource, mapping, list of matrices, DataFrame or array
        Driver collection in any supported shape
    identifiers : sequence of str, optional
        Names for array- and list-shaped collections, which carry none of
        their own

    Returns
    -------
    DriverSource
    """
    if isinstance(collection, DriverSource):
        return collection

    if isinstance(collection, Mapping):
        if identifiers is not None:
            logger.debug("Ignoring explicit identifiers for mapping driver collection")
        return MappingDriverSource(collection)

    if isinstance(collection, np.ndarray) and collection.ndim == 3:
        return ArrayDriverSource(collection, identifiers)

    if isinstance(collection, pd.DataFrame) or (
            isinstance(collection, np.ndarray) and collection.ndim == 2):
        if identifiers is not None and len(identifiers) != 1:
            raise MissingIdentifierError(
                f"Single driver matrix takes one identifier, got {len(identifiers)}"
            )
        name = identifiers[0] if identifiers is not None else None
        return MatrixDriverSource(collection, name)

    if isinstance(collection, np.ndarray):
        raise DriverCollectionError(
            f"Driver array must be 2- or 3-dimensional, got shape {collection.shape}"
        )

    if isinstance(collection, (list, tuple)) and collection and all(
            _is_matrix(item) for item in collection):
        return SequenceDriverSource(collection, identifiers)

    raise DriverCollectionError(
        f"Unsupported driver collection type: {type(collection).__name__}"
    )


def resolve_drivers(collection: Any,
                    index_values: Optional[Sequence] = None,
                    identifiers: Optional[Sequence] = None
                    ) -> Tuple[DriverSource, List[str], List]:
    """
    Determine driver count, identifiers and index values for a collection.

    When ``index_values`` is omitted the identifiers double as index values,
    which suits collections of alternative encodings of one locus.

    Returns
    -------
    tuple
        (source, identifiers, index_values)
    """
    source = as_driver_source(collection, identifiers)
    n_drivers = source.count()
    if n_drivers == 0:
        raise DriverCollectionError("Driver collection is empty")
    names = source.identifiers()

    if index_values is None:
        index_values = list(names)
    else:
        index_values = np.atleast_1d(np.asarray(index_values, dtype=object)).tolist()

    if len(index_values) != n_drivers:
        raise IndexLengthMismatchError(
            f"Got {len(index_values)} index values for {n_drivers} drivers "
            f"({', '.join(names)})"
        )

    logger.debug("Resolved %d drivers: %s", n_drivers, names)
    return source, names, index_values
