"""
Indexed Mediation Module

Tests one mediator against a set of indexed drivers (positions along a
chromosome, or alternative encodings of one locus) with a single call to a
mediation testing engine, and wraps the engine output for plotting.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional, Protocol, Sequence

import pandas as pd

from ..utils.config import ColumnBindings
from .drivers import resolve_drivers
from .replication import build_replicated_batch

logger = logging.getLogger(__name__)


class MediationEngine(Protocol):
    """
    Callable that compares causal models for each target/mediator/driver triad.

    It receives keyword arguments ``target, mediator, annotation, covar_tar,
    covar_med, kinship, driver, driver_med, index_name`` plus any extra
    options, and returns an object with a ``best`` table and a ``params``
    structure (attribute or mapping access), optionally with a positional
    ``map``.
    """

    def __call__(self, *, target: Any, mediator: pd.DataFrame,
                 annotation: pd.DataFrame, covar_tar: Any, covar_med: Any,
                 kinship: Any, driver: Any, driver_med: Any, index_name: str,
                 **kwargs) -> Any:
        ...


def _lookup(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _as_dict(params: Any) -> dict:
    if params is None:
        return {}
    if isinstance(params, Mapping):
        return dict(params)
    if hasattr(params, "__dict__"):
        return dict(vars(params))
    raise TypeError(f"Cannot read engine params of type {type(params).__name__}")


@dataclass(frozen=True, eq=False)
class MediationIndex:
    """
    Result of an indexed mediation test.

    Attributes
    ----------
    best : DataFrame
        One row per (triad, model outcome) with index, pvalue, IC, triad and
        id columns, and optionally a pattern classification
    params : mapping
        Read-only run parameters; carries ``index_name`` and optionally
        ``target_index``
    map : array, optional
        Positional map of markers, drawn as rug marks
    raw : object
        The engine's own result object, unmodified
    """

    best: pd.DataFrame
    params: Mapping = field(default_factory=lambda: MappingProxyType({}))
    map: Any = None
    raw: Any = None

    @classmethod
    def from_engine_result(cls, out: Any,
                           index_name: Optional[str] = None) -> "MediationIndex":
        """
        Wrap an engine result.

        ``index_name`` fills in the parameter when the engine did not record
        it.
        """
        best = _lookup(out, "best")
        if best is None:
            raise ValueError("Engine result has no 'best' table")
        if not isinstance(best, pd.DataFrame):
            best = pd.DataFrame(best)

        params = _as_dict(_lookup(out, "params"))
        if index_name is not None and params.get("index_name") is None:
            params["index_name"] = index_name

        positions = _lookup(out, "map")
        if positions is None:
            positions = params.get("map")

        return cls(best=best, params=MappingProxyType(params), map=positions, raw=out)

    def __getattr__(self, name):
        if name.startswith("_") or name == "raw":
            raise AttributeError(name)
        return getattr(self.raw, name)

    @property
    def index_name(self) -> str:
        return self.params.get("index_name", ColumnBindings().index_name)

    @property
    def target_index(self) -> Optional[float]:
        return self.params.get("target_index")

    def summary(self) -> pd.DataFrame:
        """Best table ordered by p-value, then index."""
        by = [col for col in ("pvalue", self.index_name) if col in self.best.columns]
        if not by:
            return self.best.copy()
        return self.best.sort_values(by, kind="mergesort").reset_index(drop=True)

    def top(self, n: int = 1) -> pd.DataFrame:
        """Lowest p-value rows for each triad."""
        ordered = self.best.sort_values("pvalue", kind="mergesort")
        return ordered.groupby("triad", sort=True).head(n).reset_index(drop=True)

    def plot(self, **kwargs):
        """Plot results; see ``plot_mediation_index``."""
        from ..visualization.plots import plot_mediation_index
        return plot_mediation_index(self, **kwargs)

    def autoplot(self, **kwargs):
        """Plot results; identical to ``plot``."""
        from ..visualization.plots import plot_mediation_index
        return plot_mediation_index(self, **kwargs)


def mediation_index(target: Any,
                    mediator: Any,
                    driver: Any = None,
                    annotation: Any = None,
                    covar_tar: Any = None,
                    covar_med: Any = None,
                    kinship: Any = None,
                    driver_med: Any = None,
                    driver_index: Optional[Sequence] = None,
                    facet_name: str = "chr",
                    index_name: str = "pos",
                    *,
                    engine: MediationEngine,
                    driver_names: Optional[Sequence[str]] = None,
                    **kwargs) -> MediationIndex:
    """
    Test mediation across a set of indexed drivers.

    Parameters
    ----------
    target : array or Series
        Target values, one per observation
    mediator : array, Series or one-column DataFrame
        Mediator values, one per observation
    driver : array, optional
        Driver matrix passed to the engine as-is
    annotation : None, mapping, Series or DataFrame
        Mediator annotation (symbol, location, ...)
    covar_tar, covar_med : DataFrame, optional
        Covariates for target and mediator
    kinship : array, optional
        Kinship matrix among observations
    driver_med : mapping, list, DataFrame, array or DriverSource
        Driver collection: mapping of name to matrix, a list of matrices, a
        single matrix, or a 3-D array [observation, level, driver]. The
        engine receives the underlying collection; a ``DriverSource`` is
        unwrapped, so array drivers reach it unnamed. Driver identifiers
        reach the engine as the mediator column names and the annotation
        ``id`` and ``driver_names`` columns, in driver order.
    driver_index : sequence, optional
        Index value per driver, e.g. positions; defaults to driver names
    facet_name : str
        Name of facet column (default ``chr``)
    index_name : str
        Name of index column (default ``pos``)
    engine : callable
        Mediation testing engine, see ``MediationEngine``
    driver_names : sequence of str, optional
        Names for array-shaped driver collections
    **kwargs
        Passed through to the engine

    Returns
    -------
    MediationIndex
    """
    bindings = ColumnBindings(facet_name=facet_name, index_name=index_name)

    source, identifiers, index_values = resolve_drivers(
        driver_med, driver_index, driver_names
    )
    batch = build_replicated_batch(
        mediator, annotation, identifiers, index_values, bindings
    )

    logger.info("Testing mediator against %d indexed drivers", batch.n_drivers)
    out = engine(
        target=target,
        mediator=batch.mediator,
        annotation=batch.annotation,
        covar_tar=covar_tar,
        covar_med=covar_med,
        kinship=kinship,
        driver=driver,
        driver_med=source.values,
        index_name=index_name,
        **kwargs,
    )

    return MediationIndex.from_engine_result(out, index_name=index_name)
