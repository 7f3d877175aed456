"""Driver collections built from genotype probabilities."""

from .genotypes import (
    reconstruct_allele_probabilities,
    reduce_to_snp,
    driver_encodings,
    stack_genoprobs,
)

__all__ = [
    "reconstruct_allele_probabilities",
    "reduce_to_snp",
    "driver_encodings",
    "stack_genoprobs",
]
