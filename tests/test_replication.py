"""
Unit tests for mediator and annotation replication
"""

import pytest
import numpy as np
import pandas as pd
from causal_mediation.analysis.replication import (
    build_replicated_batch,
    normalize_annotation,
    replicate_annotation,
    replicate_mediator,
)
from causal_mediation.utils.config import ColumnBindings
from causal_mediation.utils.errors import (
    AnnotationCoercionError,
    IndexLengthMismatchError,
)


class TestReplicateMediator:
    """Test replicate_mediator"""

    def test_column_count(self, sample_mediator):
        """Test one column per driver"""
        names = [f"m{i}" for i in range(7)]
        replicated = replicate_mediator(sample_mediator, names)

        assert replicated.shape == (20, 7)
        assert list(replicated.columns) == names

    def test_columns_are_copies(self, sample_mediator):
        """Test every column equals the original mediator"""
        replicated = replicate_mediator(sample_mediator, ["a", "b", "c"])

        for name in replicated.columns:
            np.testing.assert_array_equal(replicated[name].values, sample_mediator.values)

    def test_observation_ids_kept(self, sample_mediator):
        """Test row labels are preserved"""
        replicated = replicate_mediator(sample_mediator, ["a"])

        assert list(replicated.index) == list(sample_mediator.index)

    def test_one_column_frame(self, sample_mediator):
        """Test one-column DataFrame input"""
        replicated = replicate_mediator(sample_mediator.to_frame(), ["a", "b"])

        assert replicated.shape == (20, 2)

    def test_column_vector_array(self):
        """Test (n, 1) array input"""
        replicated = replicate_mediator(np.arange(5.0).reshape(-1, 1), ["a", "b"])

        assert replicated.shape == (5, 2)
        assert replicated["b"].tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]

    def test_multi_column_rejected(self):
        """Test multi-column mediator fails"""
        with pytest.raises(ValueError):
            replicate_mediator(pd.DataFrame({"x": [1, 2], "y": [3, 4]}), ["a"])


class TestNormalizeAnnotation:
    """Test normalize_annotation"""

    def test_none(self):
        """Test None becomes one empty row"""
        table = normalize_annotation(None)

        assert isinstance(table, pd.DataFrame)
        assert len(table) == 1

    def test_mapping(self):
        """Test dict becomes one row"""
        table = normalize_annotation({"symbol": "Tmem68", "chr": "4"})

        assert len(table) == 1
        assert table.loc[0, "symbol"] == "Tmem68"

    def test_series(self):
        """Test Series becomes one row"""
        table = normalize_annotation(pd.Series({"symbol": "Tmem68", "start": 4.5}))

        assert list(table.columns) == ["symbol", "start"]

    def test_first_row_of_frame(self):
        """Test only the first row of a table is used"""
        table = normalize_annotation(pd.DataFrame({"symbol": ["Tmem68", "Other"]}))

        assert table["symbol"].tolist() == ["Tmem68"]

    @pytest.mark.parametrize("annotation", [["Tmem68", 4], np.array([1.0, 2.0]), "Tmem68", 3])
    def test_unsupported(self, annotation):
        """Test unsupported annotation fails"""
        with pytest.raises(AnnotationCoercionError):
            normalize_annotation(annotation)

    def test_empty_frame(self):
        """Test empty table fails"""
        with pytest.raises(AnnotationCoercionError):
            normalize_annotation(pd.DataFrame({"symbol": []}))


class TestReplicateAnnotation:
    """Test replicate_annotation"""

    def test_null_annotation(self):
        """Test None annotation becomes a 2-row table"""
        table = replicate_annotation(None, ["allele", "SNP"], [10.2, 10.2])

        assert isinstance(table, pd.DataFrame)
        assert len(table) == 2
        assert table["id"].tolist() == ["allele", "SNP"]
        assert table["chr"].tolist() == ["", ""]

    def test_order_preserved(self):
        """Test ids, driver names and index values line up"""
        names = ["m3", "m1", "m2"]
        positions = [30.0, 10.0, 20.0]
        table = replicate_annotation({"symbol": "Tmem68"}, names, positions)

        assert table["id"].tolist() == names
        assert table["driver_names"].tolist() == names
        assert table["pos"].tolist() == positions
        assert table["symbol"].tolist() == ["Tmem68"] * 3

    def test_existing_facet_untouched(self):
        """Test facet values are kept when present"""
        table = replicate_annotation({"chr": "4"}, ["a", "b"], [1, 2])

        assert table["chr"].tolist() == ["4", "4"]

    def test_custom_bindings(self):
        """Test configured facet and index names"""
        bindings = ColumnBindings(facet_name="chrom", index_name="probs")
        table = replicate_annotation(None, ["allele", "SNP"], ["allele", "SNP"], bindings)

        assert table["probs"].tolist() == ["allele", "SNP"]
        assert table["chrom"].tolist() == ["", ""]
        assert "pos" not in table.columns

    def test_length_mismatch(self):
        """Test index values must match drivers"""
        with pytest.raises(IndexLengthMismatchError):
            replicate_annotation(None, ["a", "b"], [1])


def test_build_replicated_batch(sample_mediator):
    """Test batch bundles consistently shaped parts"""
    batch = build_replicated_batch(
        sample_mediator, {"symbol": "Tmem68"}, ["m1", "m2", "m3"], [1.0, 2.0, 3.0]
    )

    assert batch.n_drivers == 3
    assert batch.mediator.shape == (20, 3)
    assert len(batch.annotation) == 3
    assert list(batch.mediator.columns) == batch.annotation["id"].tolist()
