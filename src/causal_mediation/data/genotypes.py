"""
Genotype Encoding Module

Builds driver collections from genotype probabilities: full allele
probabilities, SNP-level reductions, and marker-by-marker stacks.
"""

import warnings
from collections.abc import Mapping
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..analysis.drivers import ArrayDriverSource


def reconstruct_allele_probabilities(geno: Union[pd.DataFrame, np.ndarray],
                                     first_allele: str = "A",
                                     tol: float = 1e-6) -> pd.DataFrame:
    """
    Restore the dropped allele from K-1 allele probability columns.

    Founder-allele probabilities are often stored without their first
    column, which is implied by the row sums.

    Parameters
    ----------
    geno : DataFrame or array
        Observations x (K-1) allele probabilities
    first_allele : str
        Name for the reconstructed column
    tol : float
        Tolerance before warning about probabilities outside [0, 1]

    Returns
    -------
    pd.DataFrame
        Observations x K allele probabilities, reconstructed allele first
    """
    geno = pd.DataFrame(geno)
    if first_allele in geno.columns:
        raise ValueError(f"Column {first_allele!r} already present")

    missing = 1 - geno.sum(axis=1)
    if ((missing < -tol) | (missing > 1 + tol)).any():
        warnings.warn(
            f"{int(((missing < -tol) | (missing > 1 + tol)).sum())} observations "
            "have allele probabilities summing outside [0, 1]"
        )

    return pd.concat([missing.rename(first_allele), geno], axis=1)


def reduce_to_snp(allele_probs: pd.DataFrame,
                  allele: Union[str, int],
                  labels: Tuple[str, str] = ("B6", "rest")) -> pd.DataFrame:
    """
    Collapse allele probabilities to one allele versus the rest.

    Parameters
    ----------
    allele_probs : DataFrame
        Observations x K allele probabilities
    allele : str or int
        Column name, or position, of the allele to keep
    labels : tuple of str
        Names of the two output columns

    Returns
    -------
    pd.DataFrame
        Two columns that sum to one per observation
    """
    allele_probs = pd.DataFrame(allele_probs)
    if isinstance(allele, int) and allele not in allele_probs.columns:
        kept = allele_probs.iloc[:, allele]
    else:
        kept = allele_probs[allele]

    return pd.DataFrame({labels[0]: kept, labels[1]: 1 - kept},
                        index=allele_probs.index)


def driver_encodings(**encodings) -> Dict[str, pd.DataFrame]:
    """
    Named driver matrices aligned on their shared observations.

    Keyword order sets driver order, e.g.
    ``driver_encodings(allele=allele_probs, SNP=snp_probs)``.
    """
    if not encodings:
        raise ValueError("Need at least one driver encoding")

    frames = {name: pd.DataFrame(matrix) for name, matrix in encodings.items()}
    common = None
    for frame in frames.values():
        common = frame.index if common is None else common.intersection(frame.index, sort=False)

    if len(common) == 0:
        warnings.warn("Driver encodings share no observations")
    return {name: frame.loc[common] for name, frame in frames.items()}


def stack_genoprobs(probs: Mapping,
                    names: Optional[Sequence[str]] = None) -> ArrayDriverSource:
    """
    Stack per-marker probability matrices into an observation x allele x
    marker block.

    Parameters
    ----------
    probs : mapping
        Marker name to observations x alleles matrix; all the same shape
    names : sequence of str, optional
        Marker names to use instead of the mapping keys

    Returns
    -------
    ArrayDriverSource
    """
    matrices = [np.asarray(matrix, dtype=float) for matrix in probs.values()]
    if not matrices:
        raise ValueError("Need at least one marker")
    shapes = {matrix.shape for matrix in matrices}
    if len(shapes) > 1:
        raise ValueError(f"Marker matrices differ in shape: {sorted(shapes)}")

    block = np.stack(matrices, axis=2)
    return ArrayDriverSource(block, list(names) if names is not None else list(probs.keys()))
