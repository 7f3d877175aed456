"""
Visualization Module

Faceted plots of indexed mediation results: one panel per triad, drivers
along the index axis, and the chosen test statistic on the vertical axis.
"""

import math
import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from functools import singledispatch
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
import seaborn as sns

from ..analysis.mediation_index import MediationIndex
from ..utils.config import PlotOptions, check_response
from ..utils.errors import MissingColumnError

INDEX_KEY = "index"
MARKERS = ["o", "^", "s", "D", "v", "P", "X", "*", "<", ">"]


@dataclass(frozen=True)
class MediationPlotSpec:
    """
    Resolved plot layout for a ``MediationIndex``.

    Attributes
    ----------
    data : DataFrame
        Best table with the index column renamed to ``index`` and the
        response column ``y`` added
    y : str
        Column plotted on the vertical axis
    xlabel, ylabel : str
        Axis labels
    color : str, optional
        Column mapped to point color
    shape : str, optional
        Column mapped to point marker
    facets : list of str
        Triad panels, in display order
    target_index : float, optional
        Reference line position, set only when inside the index range
    rug : array, optional
        Map positions within the index range
    """

    data: pd.DataFrame
    y: str
    xlabel: str
    ylabel: str
    color: Optional[str]
    shape: Optional[str]
    facets: List[str]
    target_index: Optional[float]
    rug: Optional[np.ndarray]


def _level_order(values: pd.Series) -> List[str]:
    if isinstance(values.dtype, pd.CategoricalDtype):
        return [str(level) for level in values.cat.categories
                if level in set(values.dropna())]
    return sorted(values.astype(str).unique())


def _map_positions(positions: Any) -> np.ndarray:
    # Per-chromosome maps are flattened in key order.
    if isinstance(positions, Mapping):
        parts = [np.asarray(v, dtype=float).ravel() for v in positions.values()]
        return np.concatenate(parts) if parts else np.array([], dtype=float)
    return np.asarray(positions, dtype=float).ravel()


def build_plot_spec(result: MediationIndex,
                    response: str = "pvalue",
                    alpha: float = 0.5,
                    pattern_name: str = "pattern") -> MediationPlotSpec:
    """
    Resolve columns, facets, reference line and rug for plotting.

    Parameters
    ----------
    result : MediationIndex
        Indexed mediation result
    response : str
        'pvalue' (plotted as -log10) or 'IC'
    alpha : float
        Point transparency; validated here, applied when drawing
    pattern_name : str
        Column mapped to point color

    Returns
    -------
    MediationPlotSpec
    """
    check_response(response)
    index_name = result.index_name
    best = result.best.copy()

    if index_name not in best.columns:
        raise MissingColumnError(
            f"Index column {index_name!r} not found in results; "
            f"columns are {list(best.columns)}"
        )
    # Known quirk: a pre-existing 'index' column loses to the renamed index.
    if index_name != INDEX_KEY and INDEX_KEY in best.columns:
        warnings.warn(
            f"Dropping existing column {INDEX_KEY!r} in favor of index column "
            f"{index_name!r}"
        )
        best = best.drop(columns=INDEX_KEY)
    best = best.rename(columns={index_name: INDEX_KEY})

    if response == "pvalue":
        if "pvalue" not in best.columns:
            raise MissingColumnError("Results have no 'pvalue' column")
        y = "-log10(pvalue)"
        pvalues = best["pvalue"].astype(float)
        tiny = np.finfo(float).tiny
        if (pvalues < tiny).any():
            warnings.warn(
                f"{int((pvalues < tiny).sum())} p-values below {tiny:.3g} "
                f"plotted at {tiny:.3g}"
            )
            pvalues = pvalues.clip(lower=tiny)
        best[y] = -np.log10(pvalues)
        ylabel = y
    else:
        if "IC" not in best.columns:
            raise MissingColumnError("Results have no 'IC' column")
        y = "IC"
        ylabel = "BIC on log10 scale"

    color = pattern_name if pattern_name in best.columns else None
    shape = "pattern" if pattern_name != "pattern" and "pattern" in best.columns else None

    if "triad" not in best.columns:
        raise MissingColumnError("Results have no 'triad' column")
    facets = _level_order(best["triad"])

    target_index = None
    rug = None
    # Reference line and rug only make sense along a numeric index.
    if len(best) and pd.api.types.is_numeric_dtype(best[INDEX_KEY]):
        low, high = best[INDEX_KEY].min(), best[INDEX_KEY].max()
        if result.target_index is not None:
            candidate = float(result.target_index)
            if low <= candidate <= high:
                target_index = candidate
        if result.map is not None:
            positions = _map_positions(result.map)
            rug = positions[(positions >= low) & (positions <= high)]

    return MediationPlotSpec(
        data=best,
        y=y,
        xlabel=index_name,
        ylabel=ylabel,
        color=color,
        shape=shape,
        facets=facets,
        target_index=target_index,
        rug=rug,
    )


def _legend_handles(levels: Dict[str, Any], kind: str) -> List[Line2D]:
    handles = []
    for label, value in levels.items():
        if kind == "color":
            handles.append(Line2D([], [], marker="o", linestyle="", color=value, label=label))
        else:
            handles.append(Line2D([], [], marker=value, linestyle="", color="gray", label=label))
    return handles


def plot_mediation_index(result: MediationIndex,
                         response: str = "pvalue",
                         alpha: float = 0.5,
                         pattern_name: str = "pattern",
                         figsize: Optional[Tuple[float, float]] = None,
                         col_wrap: Optional[int] = None,
                         save_path: Optional[str] = None) -> plt.Figure:
    """
    Faceted scatter plot of indexed mediation results.

    Parameters
    ----------
    result : MediationIndex
        Indexed mediation result
    response : str
        'pvalue' plots -log10(pvalue); 'IC' plots the information criterion
    alpha : float
        Point transparency
    pattern_name : str
        Column mapped to point color; a separate 'pattern' column, if any,
        is mapped to marker shape
    figsize : tuple, optional
        Figure size; scales with the number of panels by default
    col_wrap : int, optional
        Panels per row
    save_path : str, optional
        Path to save figure

    Returns
    -------
    matplotlib.Figure
    """
    options = PlotOptions(response=response, alpha=alpha, pattern_name=pattern_name,
                          figsize=figsize, col_wrap=col_wrap)
    spec = build_plot_spec(result, options.response, options.alpha, options.pattern_name)
    data = spec.data

    n_panels = max(len(spec.facets), 1)
    ncols = options.col_wrap or math.ceil(math.sqrt(n_panels))
    nrows = math.ceil(n_panels / ncols)
    fig, axes = plt.subplots(nrows, ncols,
                             figsize=options.figsize or (4 * ncols, 3.5 * nrows),
                             sharex=True, sharey=True, squeeze=False)

    colors = {}
    if spec.color:
        levels = _level_order(data[spec.color])
        colors = dict(zip(levels, sns.color_palette(n_colors=len(levels))))
    markers = {}
    if spec.shape:
        levels = _level_order(data[spec.shape])
        markers = {level: MARKERS[i % len(MARKERS)] for i, level in enumerate(levels)}

    keys = [col for col in (spec.color, spec.shape) if col]
    triads = data["triad"].astype(str)

    for ax, triad in zip(axes.flat, spec.facets):
        panel = data[triads == triad]

        if spec.target_index is not None:
            ax.axvline(spec.target_index, color="gray", zorder=0)

        if keys:
            groups = panel.groupby([panel[col].astype(str) for col in keys], sort=False)
        else:
            groups = [((), panel)]

        for key, group in groups:
            if not isinstance(key, tuple):
                key = (key,)
            levels = dict(zip(keys, key))
            points = ax.scatter(
                group[INDEX_KEY], group[spec.y],
                color=colors.get(levels.get(spec.color), "steelblue"),
                marker=markers.get(levels.get(spec.shape), "o"),
                alpha=options.alpha,
            )
            if "id" in group.columns:
                # Point ids for interactive/SVG backends.
                points.set_urls(group["id"].astype(str).tolist())

        if spec.rug is not None and len(spec.rug):
            sns.rugplot(x=spec.rug, ax=ax, color="gray")

        ax.set_title(triad, fontsize=12)
        ax.grid(alpha=0.3)

    for ax in axes.flat[len(spec.facets):]:
        ax.set_visible(False)
    # Bottom visible panel of each column carries the index axis.
    for column in axes.T:
        shown = [ax for ax in column if ax.get_visible()]
        if shown:
            shown[-1].set_xlabel(spec.xlabel, fontsize=12)
            shown[-1].xaxis.set_tick_params(labelbottom=True)
    for ax in axes[:, 0]:
        ax.set_ylabel(spec.ylabel, fontsize=12)

    plt.tight_layout()

    if colors:
        fig.legend(handles=_legend_handles(colors, "color"), title=spec.color,
                   loc="upper left", bbox_to_anchor=(1.0, 1.0))
    if markers:
        fig.legend(handles=_legend_handles(markers, "shape"), title=spec.shape,
                   loc="lower left", bbox_to_anchor=(1.0, 0.0))

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches="tight")

    return fig


@singledispatch
def autoplot(obj, **kwargs):
    """Plot an analysis result object."""
    raise TypeError(f"No autoplot method for {type(obj).__name__}")


@autoplot.register(MediationIndex)
def _autoplot_mediation_index(obj: MediationIndex, **kwargs) -> plt.Figure:
    return plot_mediation_index(obj, **kwargs)
