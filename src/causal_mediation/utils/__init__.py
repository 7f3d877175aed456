"""
Utilities for indexed mediation analysis.

Contains configuration and the error taxonomy.
"""

from .config import RESPONSES, ColumnBindings, PlotOptions, check_response
from .errors import (
    MediationIndexError,
    IndexLengthMismatchError,
    MissingIdentifierError,
    DriverCollectionError,
    AnnotationCoercionError,
    MissingColumnError,
    InvalidResponseError,
)

__all__ = [
    # Configuration
    "RESPONSES",
    "ColumnBindings",
    "PlotOptions",
    "check_response",
    # Errors
    "MediationIndexError",
    "IndexLengthMismatchError",
    "MissingIdentifierError",
    "DriverCollectionError",
    "AnnotationCoercionError",
    "MissingColumnError",
    "InvalidResponseError",
]
