"""
Error Types

Exceptions raised by the indexed mediation pipeline. Each concrete error also
derives from the builtin a caller would naturally catch (``ValueError`` or
``TypeError``).
"""


class MediationIndexError(Exception):
    """Base class for indexed mediation errors."""


class IndexLengthMismatchError(MediationIndexError, ValueError):
    """Index values do not line up with the driver collection."""


class MissingIdentifierError(MediationIndexError, ValueError):
    """Driver collection carries no usable identifiers."""


class DriverCollectionError(MediationIndexError, TypeError):
    """Driver collection has an unsupported shape."""


class AnnotationCoercionError(MediationIndexError, TypeError):
    """Annotation cannot be coerced into a one-row table."""


class MissingColumnError(MediationIndexError, ValueError):
    """A configured column is absent from a result table."""


class InvalidResponseError(MediationIndexError, ValueError):
    """Unrecognized response metric for plotting."""
