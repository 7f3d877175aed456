"""
Configuration

Column-name bindings and plotting options, resolved once per call.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidResponseError

RESPONSES = ("pvalue", "IC")


def check_response(response: str) -> str:
    """Validate a response metric name."""
    if response not in RESPONSES:
        raise InvalidResponseError(
            f"response must be one of {RESPONSES}, got {response!r}"
        )
    return response


@dataclass(frozen=True)
class ColumnBindings:
    """
    Names of the columns that play the facet, index and pattern roles.

    Parameters
    ----------
    facet_name : str
        Grouping column, typically chromosome
    index_name : str
        Per-driver ordering column, typically position
    pattern_name : str
        Discrete classification column in result tables
    """

    facet_name: str = "chr"
    index_name: str = "pos"
    pattern_name: str = "pattern"


@dataclass(frozen=True)
class PlotOptions:
    """Rendering options for indexed mediation results."""

    response: str = "pvalue"
    alpha: float = 0.5
    pattern_name: str = "pattern"
    figsize: Optional[Tuple[float, float]] = None
    col_wrap: Optional[int] = None

    def __post_init__(self):
        check_response(self.response)
        if not 0 <= self.alpha <= 1:
            raise ValueError(f"alpha must be in [0, 1], got {self.alpha}")
