"""
Shared fixtures for indexed mediation tests
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest


@pytest.fixture(autouse=True)
def close_figures():
    """Close figures created during a test"""
    yield
    plt.close("all")


class RecordingEngine:
    """Stand-in mediation engine that records its calls"""

    def __init__(self, params=None, result_type=dict):
        self.calls = []
        self.params = params or {}
        self.result_type = result_type

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        annotation = kwargs["annotation"]
        index_name = kwargs["index_name"]
        n = len(annotation)
        best = pd.DataFrame({
            index_name: annotation[index_name].tolist(),
            "pvalue": np.linspace(0.5, 0.01, n),
            "IC": np.linspace(100.0, 120.0, n),
            "triad": ["causal"] * n,
            "id": annotation["id"].tolist(),
            "pattern": ["s1"] * n,
        })
        params = {"index_name": index_name, **self.params}
        if self.result_type is dict:
            return {"best": best, "params": params}
        return self.result_type(best=best, params=params)


@pytest.fixture
def recording_engine():
    return RecordingEngine()


@pytest.fixture
def sample_mediator():
    """Mediator expression for 20 individuals"""
    np.random.seed(42)
    ids = [f"ind{i}" for i in range(20)]
    return pd.Series(np.random.normal(0, 1, 20), index=ids, name="Tmem68")


@pytest.fixture
def sample_target(sample_mediator):
    np.random.seed(43)
    return pd.Series(np.random.normal(0, 1, 20), index=sample_mediator.index)


@pytest.fixture
def sample_driver_med(sample_mediator):
    """Two encodings of one locus: 8 alleles and a SNP"""
    np.random.seed(44)
    probs = np.random.dirichlet(np.ones(8), size=20)
    allele = pd.DataFrame(probs, index=sample_mediator.index, columns=list("ABCDEFGH"))
    snp = pd.DataFrame({"B6": allele["B"], "rest": 1 - allele["B"]})
    return {"allele": allele, "SNP": snp}


@pytest.fixture
def engine_factory():
    return RecordingEngine
