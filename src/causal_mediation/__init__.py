"""
Causal Mediation Index

Tests whether a mediator lies between candidate drivers and a target across
a set of indexed drivers (positions along a chromosome, or alternative
encodings of one locus), and plots the best-fitting causal models along
that index.
"""

__version__ = "0.1.0"
__author__ = "Lior Shachaf"

from .analysis.mediation_index import MediationIndex, mediation_index
from .analysis.drivers import ArrayDriverSource, MappingDriverSource, MatrixDriverSource
from .visualization.plots import plot_mediation_index, autoplot
from .data.genotypes import reconstruct_allele_probabilities, reduce_to_snp, driver_encodings
from .utils.config import ColumnBindings, PlotOptions
from .utils.errors import (
    MediationIndexError,
    IndexLengthMismatchError,
    MissingIdentifierError,
    InvalidResponseError,
)

__all__ = [
    # Analysis
    "MediationIndex",
    "mediation_index",
    "ArrayDriverSource",
    "MappingDriverSource",
    "MatrixDriverSource",
    # Visualization
    "plot_mediation_index",
    "autoplot",
    # Data
    "reconstruct_allele_probabilities",
    "reduce_to_snp",
    "driver_encodings",
    # Utils
    "ColumnBindings",
    "PlotOptions",
    "MediationIndexError",
    "IndexLengthMismatchError",
    "MissingIdentifierError",
    "InvalidResponseError",
]
