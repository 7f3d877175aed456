"""
Replication Module

Broadcasts a single mediator column and a single annotation record across a
set of drivers, so each driver is tested against the same mediator.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..utils.config import ColumnBindings
from ..utils.errors import AnnotationCoercionError, IndexLengthMismatchError

logger = logging.getLogger(__name__)


@dataclass
class ReplicatedBatch:
    """
    Mediator and annotation replicated across N drivers.

    Attributes
    ----------
    mediator : DataFrame
        Observations x N, one identical column per driver
    annotation : DataFrame
        N rows, one per driver, in driver order
    identifiers : list of str
        Driver identifiers
    index_values : list
        Per-driver index values (e.g. positions)
    """

    mediator: pd.DataFrame
    annotation: pd.DataFrame
    identifiers: List[str]
    index_values: List
    bindings: ColumnBindings = field(default_factory=ColumnBindings)

    @property
    def n_drivers(self) -> int:
        return len(self.identifiers)


def normalize_annotation(annotation: Any) -> pd.DataFrame:
    """
    Coerce mediator annotation into a one-row table.

    Accepted inputs are ``None`` (an empty record), a mapping, a
    ``pandas.Series``, or a non-empty ``DataFrame`` (its first row is used).

    Parameters
    ----------
    annotation : None, mapping, Series or DataFrame
        Mediator metadata such as symbol and location

    Returns
    -------
    pd.DataFrame
        Exactly one row
    """
    if annotation is None:
        return pd.DataFrame(index=pd.RangeIndex(1))

    if isinstance(annotation, pd.DataFrame):
        if len(annotation) == 0:
            raise AnnotationCoercionError("Annotation table has no rows")
        if len(annotation) > 1:
            logger.debug("Annotation has %d rows; using the first", len(annotation))
        return annotation.iloc[[0]].reset_index(drop=True)

    if isinstance(annotation, pd.Series):
        return pd.DataFrame([annotation.to_dict()])

    if isinstance(annotation, Mapping):
        return pd.DataFrame([dict(annotation)])

    raise AnnotationCoercionError(
        f"Cannot build an annotation table from {type(annotation).__name__}; "
        "pass None, a mapping, a Series or a DataFrame"
    )


def replicate_mediator(mediator: Any, identifiers: Sequence[str]) -> pd.DataFrame:
    """
    Copy one mediator column into one column per driver.

    Parameters
    ----------
    mediator : array, Series or one-column DataFrame
        Mediator values, one per observation
    identifiers : sequence of str
        Driver identifiers, used as column names

    Returns
    -------
    pd.DataFrame
        Observations x len(identifiers); row labels are kept from the input
    """
    if isinstance(mediator, pd.DataFrame):
        if mediator.shape[1] != 1:
            raise ValueError(
                f"Mediator must be a single column, got {mediator.shape[1]} columns"
            )
        mediator = mediator.iloc[:, 0]

    if isinstance(mediator, pd.Series):
        index = mediator.index
        values = mediator.to_numpy()
    else:
        values = np.asarray(mediator)
        if values.ndim == 2 and values.shape[1] == 1:
            values = values[:, 0]
        if values.ndim != 1:
            raise ValueError(
                f"Mediator must be a single column, got shape {values.shape}"
            )
        index = pd.RangeIndex(len(values))

    replicated = np.repeat(values.reshape(-1, 1), len(identifiers), axis=1)
    return pd.DataFrame(replicated, index=index, columns=list(identifiers))


def replicate_annotation(annotation: Any,
                         identifiers: Sequence[str],
                         index_values: Sequence,
                         bindings: Optional[ColumnBindings] = None) -> pd.DataFrame:
    """
    Copy one annotation record into one row per driver.

    ``id`` and ``driver_names`` are set to the identifiers, the index column
    to the index values, and the facet column defaults to ``""`` when the
    record does not already carry it.

    Returns
    -------
    pd.DataFrame
        len(identifiers) rows in driver order
    """
    bindings = bindings or ColumnBindings()
    if len(index_values) != len(identifiers):
        raise IndexLengthMismatchError(
            f"Got {len(index_values)} index values for {len(identifiers)} drivers"
        )

    record = normalize_annotation(annotation)
    replicated = record.iloc[[0] * len(identifiers)].reset_index(drop=True)

    replicated["id"] = list(identifiers)
    replicated["driver_names"] = list(identifiers)
    replicated[bindings.index_name] = list(index_values)
    if bindings.facet_name not in replicated.columns:
        replicated[bindings.facet_name] = ""

    return replicated


def build_replicated_batch(mediator: Any,
                           annotation: Any,
                           identifiers: Sequence[str],
                           index_values: Sequence,
                           bindings: Optional[ColumnBindings] = None) -> ReplicatedBatch:
    """Replicate mediator and annotation across the given drivers."""
    bindings = bindings or ColumnBindings()
    identifiers = list(identifiers)
    index_values = list(index_values)

    annotation_table = replicate_annotation(annotation, identifiers, index_values, bindings)
    mediator_table = replicate_mediator(mediator, identifiers)

    return ReplicatedBatch(
        mediator=mediator_table,
        annotation=annotation_table,
        identifiers=identifiers,
        index_values=index_values,
        bindings=bindings,
    )
