"""
Analysis module for indexed mediation testing.

Contains the pipeline that tests one mediator across many drivers:
- Driver normalization (arrays, matrices, named mappings)
- Replication of mediator and annotation across drivers
- The engine adapter and its result object
"""

from .drivers import (
    DriverSource,
    ArrayDriverSource,
    MappingDriverSource,
    MatrixDriverSource,
    SequenceDriverSource,
    as_driver_source,
    resolve_drivers,
)
from .replication import (
    ReplicatedBatch,
    normalize_annotation,
    replicate_mediator,
    replicate_annotation,
    build_replicated_batch,
)
from .mediation_index import MediationEngine, MediationIndex, mediation_index

__all__ = [
    # Drivers
    "DriverSource",
    "ArrayDriverSource",
    "MappingDriverSource",
    "MatrixDriverSource",
    "SequenceDriverSource",
    "as_driver_source",
    "resolve_drivers",
    # Replication
    "ReplicatedBatch",
    "normalize_annotation",
    "replicate_mediator",
    "replicate_annotation",
    "build_replicated_batch",
    # Engine adapter
    "MediationEngine",
    "MediationIndex",
    "mediation_index",
]
